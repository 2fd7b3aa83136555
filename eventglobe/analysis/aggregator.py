"""Event aggregation for rendering.

Partitions parsed events into bilateral arcs and single-actor points,
spreads co-located points along a deterministic spiral so markers do not
stack, and tallies single-actor events per country to find each country's
dominant CAMEO category. Pure functions — no I/O or external calls.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from config.defaults import POINT_SIZE
from eventglobe.analysis.color_encoder import country_fill_color, event_color
from eventglobe.analysis.geo_resolver import GeoResolver, ResolvedLocation
from eventglobe.analysis.table_rows import marker_label
from eventglobe.models.events import Event
from eventglobe.models.reference import ReferenceData
from eventglobe.models.render import RenderableArc, RenderablePoint
from eventglobe.utils.geo_utils import spiral_jitter

logger = logging.getLogger(__name__)

BILATERAL = "bilateral"
SINGLE_ACTOR = "single"


@dataclass
class AggregateResult:
    """Renderable collections derived from one event list."""

    arcs: List[RenderableArc] = field(default_factory=list)
    points: List[RenderablePoint] = field(default_factory=list)
    category_counts: Dict[str, Dict[str, int]] = field(default_factory=dict)
    dominant_categories: Dict[str, str] = field(default_factory=dict)
    country_colors: Dict[str, str] = field(default_factory=dict)
    dropped: int = 0


def is_bilateral(event: Event, resolver: GeoResolver) -> bool:
    """Both actors carry distinct, resolvable country codes."""
    code1 = event.actor1.country_code
    code2 = event.actor2.country_code
    if not code1 or not code2 or code1 == code2:
        return False
    return resolver.is_resolvable(code1) and resolver.is_resolvable(code2)


def select_single_actor(
    event: Event, resolver: GeoResolver
) -> Optional[Tuple[str, ResolvedLocation]]:
    """Pick the actor that anchors a single-actor event.

    Actors flagged as concrete places win over bloc-fallback actors; actor1
    wins over actor2 at the same level.

    Returns:
        (country code, resolved location), or None when neither actor resolves.
    """
    actor1, actor2 = event.actor1, event.actor2
    candidates = [a for a in (actor1, actor2) if a.is_place]
    candidates += [a for a in (actor1, actor2) if not a.is_place]
    for actor in candidates:
        location = resolver.resolve(actor.country_code)
        if location is not None:
            return actor.country_code, location
    return None


def classify_event(event: Event, resolver: GeoResolver) -> Optional[str]:
    """Return BILATERAL, SINGLE_ACTOR, or None for events that cannot be placed."""
    if is_bilateral(event, resolver):
        return BILATERAL
    if select_single_actor(event, resolver) is not None:
        return SINGLE_ACTOR
    return None


def _root_code_order(code: str) -> Tuple[int, str]:
    return (int(code), code) if code.isdigit() else (10 ** 6, code)


def dominant_category(counts: Dict[str, int]) -> Optional[str]:
    """Root code with the highest count; ties go to the lowest numeric root code."""
    if not counts:
        return None
    return min(counts, key=lambda code: (-counts[code], _root_code_order(code)))


def aggregate_events(
    events: Sequence[Event],
    reference: ReferenceData,
    color_mode: str = "category",
    point_size: float = POINT_SIZE,
) -> AggregateResult:
    """Build arcs, jittered points and per-country dominant colors.

    Args:
        events: Parsed events; list positions become the renderable ``index``.
        reference: Reference tables for coordinates and labels.
        color_mode: "category" (root code palette) or "tone" (AvgTone gradient).
        point_size: Marker size assigned to every point.

    Returns:
        AggregateResult with all renderable collections.
    """
    resolver = GeoResolver(reference.countries)
    result = AggregateResult()
    occupancy: Dict[Tuple[float, float], int] = defaultdict(int)
    tallies: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))

    for index, event in enumerate(events):
        color = event_color(event, color_mode)

        if is_bilateral(event, resolver):
            start = resolver.resolve(event.actor1.country_code)
            end = resolver.resolve(event.actor2.country_code)
            result.arcs.append(
                RenderableArc(
                    start_lat=start.lat,
                    start_lng=start.lng,
                    end_lat=end.lat,
                    end_lng=end.lng,
                    event=event,
                    index=index,
                    color=color,
                    label=marker_label(event, reference, resolver),
                )
            )
            continue

        anchor = select_single_actor(event, resolver)
        if anchor is None:
            result.dropped += 1
            continue

        country_code, location = anchor
        base = (location.lat, location.lng)
        occupancy[base] += 1
        lat, lng = spiral_jitter(location.lat, location.lng, occupancy[base])
        result.points.append(
            RenderablePoint(
                lat=lat,
                lng=lng,
                size=point_size,
                color=color,
                label=marker_label(event, reference, resolver),
                event=event,
                index=index,
            )
        )
        if event.event_root_code:
            tallies[country_code][event.event_root_code] += 1

    for country_code, counts in tallies.items():
        result.category_counts[country_code] = dict(counts)
        dominant = dominant_category(counts)
        if dominant is not None:
            result.dominant_categories[country_code] = dominant
            result.country_colors[country_code] = country_fill_color(dominant)

    logger.info(
        "Aggregator: %d arcs, %d points, %d countries tinted, %d events dropped",
        len(result.arcs),
        len(result.points),
        len(result.country_colors),
        result.dropped,
    )
    return result

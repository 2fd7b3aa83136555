"""Event table view-models and marker labels.

Builds the text shown in the event table and in arc/point popups from typed
events and reference data. Pure functions — no I/O.
"""

from __future__ import annotations

from typing import Optional

from config.defaults import (
    LABEL_NOT_AVAILABLE,
    LABEL_UNKNOWN_CATEGORY,
    LABEL_UNKNOWN_EVENT,
    LABEL_UNKNOWN_OBJECT,
    LABEL_UNKNOWN_SUBJECT,
)
from eventglobe.analysis.color_encoder import goldstein_background_color
from eventglobe.analysis.geo_resolver import GeoResolver
from eventglobe.models.events import Actor, Event
from eventglobe.models.reference import ReferenceData
from eventglobe.models.render import TableRow
from eventglobe.utils.date_utils import format_event_day


def event_name(event: Event, reference: ReferenceData) -> str:
    """CAMEO label for the event code, or a generic "unknown detail" label."""
    return reference.cameo_name(event.event_code) or LABEL_UNKNOWN_EVENT


def category_name(event: Event, reference: ReferenceData) -> str:
    """CAMEO label for the root code, or a generic "unknown category" label."""
    return reference.cameo_name(event.event_root_code) or LABEL_UNKNOWN_CATEGORY


def _relation_party(actor: Actor, resolver: GeoResolver) -> str:
    if actor.country_code:
        return resolver.display_name(actor.country_code)
    return actor.display_name(LABEL_NOT_AVAILABLE)


def marker_label(event: Event, reference: ReferenceData, resolver: Optional[GeoResolver] = None) -> str:
    """HTML popup label shared by arcs and points.

    The relation line names the actors' countries in Japanese; an actor with
    no country code shows its own name or code instead.
    """
    resolver = resolver or GeoResolver(reference.countries)
    actor1 = _relation_party(event.actor1, resolver)
    actor2 = _relation_party(event.actor2, resolver)
    return (
        f"<b>関係:</b> {actor1} → {actor2}<br>"
        f"<b>カテゴリ:</b> {category_name(event, reference)} ({event.event_root_code or LABEL_NOT_AVAILABLE})<br>"
        f"<b>イベント詳細:</b> {event_name(event, reference)}"
    )


def build_table_row(
    event: Event,
    index: int,
    reference: ReferenceData,
    resolver: Optional[GeoResolver] = None,
) -> TableRow:
    """Build the table-row view-model for one rendered event."""
    resolver = resolver or GeoResolver(reference.countries)

    actor1_country = resolver.display_name(event.actor1.country_code)
    actor2_country = resolver.display_name(event.actor2.country_code)
    subject = event.actor1.name or LABEL_UNKNOWN_SUBJECT
    obj = event.actor2.name or LABEL_UNKNOWN_OBJECT

    return TableRow(
        date=format_event_day(event.day, default=LABEL_NOT_AVAILABLE),
        actor_summary=f"{actor1_country} → {actor2_country}",
        event_label=reference.cameo_name(event.event_code) or event.event_code or LABEL_NOT_AVAILABLE,
        source_link=event.source_url if event.has_source else None,
        actor_action=f"{subject}が{obj}に対し行動",
        category_label=category_name(event, reference),
        background_color=goldstein_background_color(event.goldstein_scale),
        index=index,
    )


def build_error_row(message: str) -> TableRow:
    """A single full-width row describing a failed cycle."""
    return TableRow(error=f"Error: {message}")

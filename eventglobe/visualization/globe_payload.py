"""JSON payload for a globe.gl front end.

Converts a RenderSnapshot into the camelCase structure the browser globe
consumes (arcsData, pointsData, polygon colors, table rows) and writes it to
disk. NaN values become null so the payload is strict JSON.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.defaults import LABEL_NOT_AVAILABLE, LABEL_READ_ARTICLE, TABLE_COLUMN_COUNT
from eventglobe.io.persistence import cycle_directory, write_snapshot_payload
from eventglobe.models.events import Actor, Event
from eventglobe.models.render import RenderSnapshot, TableRow
from eventglobe.state import ViewState
from eventglobe.utils.date_utils import isoformat_utc
from eventglobe.visualization.theme import (
    ARC_DASH_ANIMATE_MS,
    ARC_DASH_GAP,
    ARC_DASH_LENGTH,
    ARC_STROKE,
    GLOBE_BACKGROUND_IMAGE_URL,
    GLOBE_IMAGE_URL,
)

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "snapshot.json"


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def _actor_payload(actor: Actor) -> Dict[str, Any]:
    return {
        "code": actor.code,
        "name": actor.name,
        "countryCode": actor.country_code,
        "lat": actor.lat,
        "lng": actor.lng,
        "isPlace": actor.is_place,
        "placeName": actor.place_name,
    }


def _event_payload(event: Event) -> Dict[str, Any]:
    return {
        "globalEventId": event.global_event_id,
        "day": event.day,
        "eventCode": event.event_code,
        "eventRootCode": event.event_root_code,
        "goldsteinScale": _finite(event.goldstein_scale),
        "avgTone": _finite(event.avg_tone),
        "sourceUrl": event.source_url if event.has_source else None,
        "actor1": _actor_payload(event.actor1),
        "actor2": _actor_payload(event.actor2),
    }


def _row_payload(row: TableRow) -> Dict[str, Any]:
    if row.is_error:
        return {"error": row.error, "colspan": TABLE_COLUMN_COUNT}
    return {
        "date": row.date,
        "actorSummary": row.actor_summary,
        "eventLabel": row.event_label,
        "sourceLink": row.source_link,
        "sourceLabel": LABEL_READ_ARTICLE if row.source_link else LABEL_NOT_AVAILABLE,
        "actorAction": row.actor_action,
        "categoryLabel": row.category_label,
        "backgroundColor": row.background_color,
        "index": row.index,
    }


def _view_payload(state: ViewState) -> Dict[str, Any]:
    view: Dict[str, Any] = {
        "mode": state.view_mode,
        "colorMode": state.color_mode,
        "selectedRegion": state.selected_region,
        "highlightedIso": state.highlighted_iso,
        "pointOfView": {"altitude": state.focus_altitude},
        "mapCenter": list(state.map_center),
        "mapZoom": state.focus_zoom,
    }
    if state.is_focused:
        view["pointOfView"].update({"lat": state.focus_lat, "lng": state.focus_lng})
    return view


def build_globe_payload(
    snapshot: RenderSnapshot,
    view_state: Optional[ViewState] = None,
) -> Dict[str, Any]:
    """Serialize a snapshot into the globe front end's camelCase shape."""
    arcs: List[Dict[str, Any]] = [
        {
            "startLat": arc.start_lat,
            "startLng": arc.start_lng,
            "endLat": arc.end_lat,
            "endLng": arc.end_lng,
            "color": arc.color,
            "label": arc.label,
            "index": arc.index,
            "event": _event_payload(arc.event),
        }
        for arc in snapshot.arcs
    ]
    points: List[Dict[str, Any]] = [
        {
            "lat": point.lat,
            "lng": point.lng,
            "size": point.size,
            "color": point.color,
            "label": point.label,
            "index": point.index,
            "event": _event_payload(point.event),
        }
        for point in snapshot.points
    ]

    payload: Dict[str, Any] = {
        "status": snapshot.status,
        "message": snapshot.message,
        "archiveUrl": snapshot.archive_url,
        "fileTimestamp": isoformat_utc(snapshot.file_timestamp) or None,
        "fetchedAt": isoformat_utc(snapshot.fetched_at) or None,
        "colorMode": snapshot.color_mode,
        "arcs": arcs,
        "points": points,
        "countryColors": dict(snapshot.country_colors),
        "tableRows": [_row_payload(row) for row in snapshot.table_rows],
        "globe": {
            "globeImageUrl": GLOBE_IMAGE_URL,
            "backgroundImageUrl": GLOBE_BACKGROUND_IMAGE_URL,
            "arcStroke": ARC_STROKE,
            "arcDashLength": ARC_DASH_LENGTH,
            "arcDashGap": ARC_DASH_GAP,
            "arcDashAnimateTime": ARC_DASH_ANIMATE_MS,
        },
    }
    if view_state is not None:
        payload["view"] = _view_payload(view_state)
    return payload


def export_snapshot(
    snapshot: RenderSnapshot,
    output_root: str | Path,
    view_state: Optional[ViewState] = None,
) -> Optional[Path]:
    """Write the snapshot payload to ``<output_root>/<cycle>/snapshot.json``.

    The cycle directory is named after the exported file's timestamp, or the
    fetch time when the file timestamp is unknown.

    Returns:
        The written path, or None when the snapshot carries neither timestamp.
    """
    stamp = snapshot.file_timestamp or snapshot.fetched_at
    if stamp is None:
        logger.warning("Snapshot has no timestamp — skipping export")
        return None

    cycle_dir = cycle_directory(output_root, stamp)
    path = cycle_dir / SNAPSHOT_FILENAME
    write_snapshot_payload(build_globe_payload(snapshot, view_state), path)
    logger.info("Exported snapshot to %s", path)
    return path

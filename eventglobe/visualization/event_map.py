"""2D event map for the GDELT Event Globe.

Renders a RenderSnapshot as a Folium map: country polygons tinted by their
dominant event category, great-circle polylines for bilateral events and
circle markers for single-actor events. Rendering only — no data transformation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from eventglobe.models.reference import ReferenceData
from eventglobe.models.render import RenderSnapshot
from eventglobe.state import ViewState
from eventglobe.utils.geo_utils import great_circle_points
from eventglobe.visualization.theme import (
    ARC_OPACITY,
    ARC_WEIGHT,
    HIGHLIGHT_CAP_COLOR,
    HIGHLIGHT_STROKE_COLOR,
    MAP_TILES,
    POINT_FILL_OPACITY,
    POINT_RADIUS_PX,
    POLYGON_CAP_COLOR,
    POLYGON_STROKE_COLOR,
)

logger = logging.getLogger(__name__)


def country_style(
    feature: Dict[str, Any],
    country_colors: Dict[str, str],
    highlighted_iso: Optional[str] = None,
) -> Dict[str, Any]:
    """Leaflet style for one boundary feature."""
    iso = (feature.get("properties") or {}).get("ISO_A3")
    if highlighted_iso and iso == highlighted_iso:
        return {"fillColor": HIGHLIGHT_CAP_COLOR, "color": HIGHLIGHT_STROKE_COLOR, "weight": 2, "fillOpacity": 1}
    return {
        "fillColor": country_colors.get(iso, POLYGON_CAP_COLOR),
        "color": POLYGON_STROKE_COLOR,
        "weight": 0.5,
        "fillOpacity": 1,
    }


def render_event_map(
    snapshot: RenderSnapshot,
    reference: Optional[ReferenceData],
    output_path: Optional[str | Path] = None,
    view_state: Optional[ViewState] = None,
) -> Optional[Path]:
    """Render the snapshot as a Folium HTML map.

    Args:
        snapshot: Snapshot to draw. Failed snapshots are not rendered.
        reference: Reference data supplying country boundaries; None draws no polygons.
        output_path: If provided, save the map HTML to this path.
        view_state: Camera and highlight state; defaults to the initial view.

    Returns:
        Output path if saved, None otherwise.
    """
    try:
        import folium

        if not snapshot.ok:
            logger.warning("Event map: snapshot is in error state — skipping")
            return None

        state = view_state or ViewState()
        fmap = folium.Map(
            location=list(state.map_center),
            zoom_start=state.focus_zoom,
            tiles=MAP_TILES,
            world_copy_jump=True,
        )

        if reference is not None and reference.country_features:
            colors = dict(snapshot.country_colors)
            highlighted = state.highlighted_iso
            folium.GeoJson(
                {"type": "FeatureCollection", "features": list(reference.country_features)},
                name="countries",
                style_function=lambda feature: country_style(feature, colors, highlighted),
                tooltip=folium.GeoJsonTooltip(fields=["ADMIN", "ISO_A3"], labels=False),
            ).add_to(fmap)

        for arc in snapshot.arcs:
            folium.PolyLine(
                locations=great_circle_points(arc.start_lat, arc.start_lng, arc.end_lat, arc.end_lng),
                color=arc.color,
                weight=ARC_WEIGHT,
                opacity=ARC_OPACITY,
                popup=folium.Popup(arc.label, max_width=300),
            ).add_to(fmap)

        for point in snapshot.points:
            folium.CircleMarker(
                location=[point.lat, point.lng],
                radius=POINT_RADIUS_PX,
                color=point.color,
                fill=True,
                fill_color=point.color,
                fill_opacity=POINT_FILL_OPACITY,
                popup=folium.Popup(point.label, max_width=300),
            ).add_to(fmap)

        if output_path:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fmap.save(str(output_path))
            logger.info(
                "Saved event map: %s (%d arcs, %d points)",
                output_path,
                len(snapshot.arcs),
                len(snapshot.points),
            )
            return output_path

        return None

    except ImportError:
        logger.warning("folium is required for event map rendering")
        return None
    except Exception as exc:
        logger.error("Event map rendering failed: %s", exc)
        return None

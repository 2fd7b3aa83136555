"""Shared dark-theme constants for the GDELT Event Globe renderers.

Rendering only — no data transformation.
"""

from __future__ import annotations

# ── Base map ──────────────────────────────────────────────────────────────────
MAP_TILES: str = "CartoDB dark_matter"
THEME_BACKGROUND: str = "#0A0E17"
THEME_TEXT: str = "#E5E7EB"
THEME_ACCENT: str = "#60A5FA"

# ── Country polygons ──────────────────────────────────────────────────────────
POLYGON_CAP_COLOR: str = "rgba(200, 200, 200, 0.1)"
POLYGON_STROKE_COLOR: str = "#ccc"
HIGHLIGHT_CAP_COLOR: str = "rgba(255, 255, 0, 0.2)"
HIGHLIGHT_STROKE_COLOR: str = "yellow"
POLYGON_SIDE_COLOR: str = "rgba(0, 0, 0, 0)"

# ── Arcs and points ───────────────────────────────────────────────────────────
ARC_WEIGHT: float = 1.5
ARC_OPACITY: float = 0.6
ARC_STROKE: float = 0.4          # Globe arc stroke width
ARC_DASH_LENGTH: float = 0.5
ARC_DASH_GAP: float = 0.2
ARC_DASH_ANIMATE_MS: int = 2500
POINT_RADIUS_PX: float = 4.0
POINT_FILL_OPACITY: float = 0.8

# ── Globe imagery ─────────────────────────────────────────────────────────────
GLOBE_IMAGE_URL: str = "//unpkg.com/three-globe/example/img/earth-night.jpg"
GLOBE_BACKGROUND_IMAGE_URL: str = "//unpkg.com/three-globe/example/img/night-sky.png"

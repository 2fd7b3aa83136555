"""GDELT Event Globe visualization package.

Rendering collaborators only — they consume a RenderSnapshot and never
transform event data. Theme constants are shared from visualization/theme.py.
"""

from eventglobe.visualization.event_map import render_event_map
from eventglobe.visualization.globe_payload import build_globe_payload, export_snapshot
from eventglobe.visualization.theme import MAP_TILES, THEME_ACCENT, THEME_BACKGROUND

__all__ = [
    "render_event_map",
    "build_globe_payload",
    "export_snapshot",
    "MAP_TILES",
    "THEME_ACCENT",
    "THEME_BACKGROUND",
]

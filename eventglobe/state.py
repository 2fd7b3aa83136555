"""Viewer interaction state and its transitions.

ViewState is immutable; every user action is a pure function
``(ViewState, ...) -> ViewState``. The fetch cycle never reads or writes this
state; only the viewer and the rendering collaborators do.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from config.defaults import (
    COLOR_MODE,
    DEFAULT_VIEW_MODE,
    GLOBE_DEFAULT_ALTITUDE,
    GLOBE_FOCUS_ALTITUDE,
    MAP_DEFAULT_CENTER,
    MAP_DEFAULT_ZOOM,
    MAP_FOCUS_ZOOM,
    VIEW_MODES,
)
from eventglobe.analysis.geo_resolver import GeoResolver

logger = logging.getLogger(__name__)

# Sidebar taxonomy: region label → Japanese country names (matching name_jp
# in the bundled country table).
REGIONS: Dict[str, Tuple[str, ...]] = {
    "アジア": (
        "日本", "中国", "韓国", "北朝鮮", "インド", "ロシア", "ベトナム", "タイ",
        "マレーシア", "インドネシア", "フィリピン", "パキスタン", "イラン", "イラク",
        "シリア", "イスラエル", "トルコ", "サウジアラビア", "アラブ首長国連邦",
        "カタール", "パレスチナ",
    ),
    "ヨーロッパ": (
        "イギリス", "フランス", "ドイツ", "イタリア", "スペイン", "ウクライナ",
        "ポーランド", "オランダ", "ベルギー", "スイス", "オーストリア", "スウェーデン",
    ),
    "北アメリカ": ("アメリカ合衆国", "カナダ", "メキシコ"),
    "南アメリカ": ("ブラジル", "アルゼンチン", "コロンビア", "ペルー", "チリ", "ベネズエラ"),
    "アフリカ": ("エジプト", "ナイジェリア", "南アフリカ", "ケニア", "エチオピア"),
    "オセアニア": ("オーストラリア", "ニュージーランド"),
}


@dataclass(frozen=True)
class ViewState:
    """What the viewer is currently showing.

    ``focus_lat``/``focus_lng`` are None while the camera sits at its default
    position. ``highlighted_iso`` marks the country polygon outlined on the
    globe; it is only ever set in 3D mode.
    """

    view_mode: str = DEFAULT_VIEW_MODE
    color_mode: str = COLOR_MODE
    selected_region: Optional[str] = None
    focus_lat: Optional[float] = None
    focus_lng: Optional[float] = None
    focus_zoom: int = MAP_DEFAULT_ZOOM
    focus_altitude: float = GLOBE_DEFAULT_ALTITUDE
    highlighted_iso: Optional[str] = None

    @property
    def is_focused(self) -> bool:
        return self.focus_lat is not None and self.focus_lng is not None

    @property
    def map_center(self) -> Tuple[float, float]:
        """Center used by the 2D map."""
        if self.is_focused:
            return (self.focus_lat, self.focus_lng)
        return MAP_DEFAULT_CENTER


def set_view_mode(state: ViewState, view_mode: str) -> ViewState:
    """Switch between the 3D globe and the 2D map.

    Re-selecting the active mode is a no-op. A real switch rebuilds the view
    from scratch, so the camera returns to its default position.

    Raises:
        ValueError: If the mode is not a known view mode.
    """
    if view_mode not in VIEW_MODES:
        raise ValueError(f"view_mode must be one of {VIEW_MODES}, got {view_mode!r}")
    if view_mode == state.view_mode:
        return state
    logger.info("Switching to %s view", view_mode.upper())
    return replace(
        state,
        view_mode=view_mode,
        focus_lat=None,
        focus_lng=None,
        focus_zoom=MAP_DEFAULT_ZOOM,
        focus_altitude=GLOBE_DEFAULT_ALTITUDE,
    )


def set_color_mode(state: ViewState, color_mode: str) -> ViewState:
    if color_mode not in ("category", "tone"):
        raise ValueError(f"color_mode must be 'category' or 'tone', got {color_mode!r}")
    return replace(state, color_mode=color_mode)


def toggle_region(state: ViewState, region: str) -> ViewState:
    """Expand a sidebar region, or collapse it if it is already expanded."""
    if region not in REGIONS:
        logger.debug("Ignoring unknown region %r", region)
        return state
    selected = None if state.selected_region == region else region
    return replace(state, selected_region=selected)


def region_countries(state: ViewState) -> List[str]:
    """Sorted country names listed under the expanded region."""
    if state.selected_region is None:
        return []
    return sorted(REGIONS[state.selected_region])


def focus_country(state: ViewState, name_jp: str, resolver: GeoResolver) -> ViewState:
    """Center the view on a country chosen by its Japanese name.

    Names with no country code, or codes with no coordinate, leave the state
    unchanged.
    """
    iso = resolver.iso_for_name(name_jp)
    if iso is None:
        logger.debug("No country code for %r", name_jp)
        return state
    location = resolver.resolve(iso)
    if location is None:
        return state

    return replace(
        state,
        focus_lat=location.lat,
        focus_lng=location.lng,
        focus_zoom=MAP_FOCUS_ZOOM,
        focus_altitude=GLOBE_FOCUS_ALTITUDE,
        highlighted_iso=iso if state.view_mode == "3d" else state.highlighted_iso,
    )


def clear_focus(state: ViewState) -> ViewState:
    """Return the camera to its default position and drop the highlight."""
    return replace(
        state,
        focus_lat=None,
        focus_lng=None,
        focus_zoom=MAP_DEFAULT_ZOOM,
        focus_altitude=GLOBE_DEFAULT_ALTITUDE,
        highlighted_iso=None,
    )

"""Color encodings for GDELT events.

Pure, total functions: every input (None, NaN, unknown codes, out-of-range
scores) maps to a defined color string. Nothing is cached across cycles.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

from config.defaults import (
    CATEGORY_ALPHA,
    COUNTRY_FILL_ALPHA,
    GOLDSTEIN_BACKGROUND_ALPHA,
    GOLDSTEIN_CLAMP,
    TONE_CLAMP,
)
from eventglobe.models.events import Event

# CAMEO root code → RGB. 01–09 are broadly cooperative, 10–20 conflictual.
ROOT_CODE_RGB: Dict[str, Tuple[int, int, int]] = {
    "01": (178, 223, 138),   # Make public statement
    "02": (166, 206, 227),   # Appeal
    "03": (31, 120, 180),    # Express intent to cooperate
    "04": (118, 118, 118),   # Consult
    "05": (51, 160, 44),     # Engage in diplomatic cooperation
    "06": (152, 78, 163),    # Engage in material cooperation
    "07": (102, 194, 165),   # Provide aid
    "08": (66, 146, 198),    # Yield
    "09": (253, 191, 111),   # Investigate
    "10": (255, 127, 0),     # Demand
    "11": (252, 141, 98),    # Disapprove
    "12": (231, 41, 138),    # Reject
    "13": (255, 255, 153),   # Threaten
    "14": (247, 129, 191),   # Protest
    "15": (177, 89, 40),     # Exhibit force posture
    "16": (227, 26, 28),     # Reduce relations
    "17": (255, 20, 147),    # Coerce
    "18": (128, 0, 0),       # Assault
    "19": (255, 0, 0),       # Fight
    "20": (0, 0, 0),         # Unconventional mass violence
}

DEFAULT_RGB: Tuple[int, int, int] = (200, 200, 200)
TONE_UNKNOWN_COLOR = "#808080"
TRANSPARENT = "transparent"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _rgba(rgb: Tuple[float, float, float], alpha: float) -> str:
    r, g, b = (_round_half_up(c) for c in rgb)
    return f"rgba({r}, {g}, {b}, {alpha})"


def _is_missing(score: Optional[float]) -> bool:
    return score is None or (isinstance(score, float) and math.isnan(score))


def event_root_code_color(root_code: Optional[str], alpha: float = CATEGORY_ALPHA) -> str:
    """Category color for a CAMEO root code ("01".."20"); gray for anything else."""
    rgb = ROOT_CODE_RGB.get(root_code, DEFAULT_RGB) if root_code else DEFAULT_RGB
    return _rgba(rgb, alpha)


def country_fill_color(root_code: Optional[str]) -> str:
    """Low-opacity category color used to tint a country polygon."""
    return event_root_code_color(root_code, alpha=COUNTRY_FILL_ALPHA)


def avg_tone_color(tone: Optional[float]) -> str:
    """Red (negative) → yellow (0) → green (positive) gradient, clamped at ±10."""
    if _is_missing(tone):
        return TONE_UNKNOWN_COLOR
    factor = min(abs(tone), TONE_CLAMP) / TONE_CLAMP
    if tone >= 0:
        r, g = _round_half_up(255 * (1 - factor)), 255
    else:
        r, g = 255, _round_half_up(255 * (1 - factor))
    return f"rgb({r}, {g}, 0)"


def goldstein_background_color(score: Optional[float]) -> str:
    """Faint table-row wash: blue-leaning for cooperation, red-leaning for conflict."""
    if _is_missing(score):
        return TRANSPARENT
    factor = min(abs(score), GOLDSTEIN_CLAMP) / GOLDSTEIN_CLAMP
    if score >= 0:
        rgb = (230 - 30 * factor, 230 + 25 * factor, 255)
    else:
        rgb = (255, 230 - 30 * factor, 230 - 30 * factor)
    return _rgba(rgb, GOLDSTEIN_BACKGROUND_ALPHA)


def event_color(event: Event, mode: str = "category") -> str:
    """Marker color for an event under the given color mode ("category" or "tone")."""
    if mode == "tone":
        return avg_tone_color(event.avg_tone)
    return event_root_code_color(event.event_root_code)

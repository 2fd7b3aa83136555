"""GDELT Event Globe analysis package.

Pure functions only — no I/O, no API calls, no side effects.
All functions operate on typed models from eventglobe.models.
"""

from eventglobe.analysis.aggregator import aggregate_events, classify_event, dominant_category
from eventglobe.analysis.color_encoder import (
    avg_tone_color,
    country_fill_color,
    event_color,
    event_root_code_color,
    goldstein_background_color,
)
from eventglobe.analysis.geo_resolver import GeoResolver, ResolvedLocation
from eventglobe.analysis.record_parser import parse_events
from eventglobe.analysis.table_rows import build_error_row, build_table_row

__all__ = [
    "aggregate_events",
    "classify_event",
    "dominant_category",
    "avg_tone_color",
    "country_fill_color",
    "event_color",
    "event_root_code_color",
    "goldstein_background_color",
    "GeoResolver",
    "ResolvedLocation",
    "parse_events",
    "build_error_row",
    "build_table_row",
]

"""GDELT Event Globe utilities package.

Stateless helpers for dates, geometry and logging setup.
"""

from eventglobe.utils.date_utils import format_event_day, isoformat_utc, parse_feed_timestamp
from eventglobe.utils.geo_utils import great_circle_points, spiral_jitter
from eventglobe.utils.logging_utils import configure_logging, get_logger, get_run_logger

__all__ = [
    "format_event_day",
    "isoformat_utc",
    "parse_feed_timestamp",
    "great_circle_points",
    "spiral_jitter",
    "configure_logging",
    "get_logger",
    "get_run_logger",
]

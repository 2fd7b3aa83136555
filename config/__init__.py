"""GDELT Event Globe configuration package."""

from config.defaults import (
    COLOR_MODE,
    FALLBACK_RETRY_SECONDS,
    FEED_VARIANT,
    MIN_EVENT_COLUMNS,
    NEXT_UPDATE_OFFSET_MINUTES,
    POINT_SIZE,
    UPDATE_GRACE_SECONDS,
)
from config.settings import ViewerConfig

__all__ = [
    "ViewerConfig",
    "COLOR_MODE",
    "FALLBACK_RETRY_SECONDS",
    "FEED_VARIANT",
    "MIN_EVENT_COLUMNS",
    "NEXT_UPDATE_OFFSET_MINUTES",
    "POINT_SIZE",
    "UPDATE_GRACE_SECONDS",
]

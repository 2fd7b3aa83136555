"""GDELT Event Globe — ViewerConfig and environment-based configuration loading.

All runtime configuration flows through ViewerConfig. No module-level globals,
no hard-coded values. Overrides come from environment variables or a .env file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from config.defaults import (
    ARCHIVE_URL_PATTERNS,
    CAMEO_CODES_SOURCE,
    COLOR_MODE,
    COUNTRY_COORDINATES_SOURCE,
    COUNTRY_GEOJSON_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_VIEW_MODE,
    FALLBACK_RETRY_SECONDS,
    FEED_BACKOFF_BASE,
    FEED_MAX_RETRIES,
    FEED_REQUEST_TIMEOUT,
    FEED_VARIANT,
    LASTUPDATE_ENGLISH_URL,
    LASTUPDATE_TRANSLATION_URL,
    NEXT_UPDATE_OFFSET_MINUTES,
    OUTPUT_ROOT,
    POINT_SIZE,
    REFERENCE_LOAD_WORKERS,
    UPDATE_GRACE_SECONDS,
    VIEW_MODES,
)

# Load .env file if present; silently skip if missing
load_dotenv()

_COLOR_MODES = ("category", "tone")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_POINTER_URLS = {
    "translation": LASTUPDATE_TRANSLATION_URL,
    "english": LASTUPDATE_ENGLISH_URL,
}


@dataclass
class ViewerConfig:
    """Single configuration object threaded through the fetch cycle and viewer.

    All tuneable thresholds, source locations, and file paths live here.
    Never use module-level globals or hard-coded values in pipeline code.
    """

    # ── Upstream feed ──────────────────────────────────────────────────────────
    feed_variant: str = field(default_factory=lambda: os.getenv("GDELT_FEED_VARIANT", FEED_VARIANT))
    # Empty means "derive from feed_variant"
    lastupdate_url: str = field(default_factory=lambda: os.getenv("GDELT_LASTUPDATE_URL", ""))

    # ── Reference data (local paths or http(s) URLs) ──────────────────────────
    cameo_source: str = field(
        default_factory=lambda: os.getenv("CAMEO_CODES_SOURCE", CAMEO_CODES_SOURCE)
    )
    country_source: str = field(
        default_factory=lambda: os.getenv("COUNTRY_COORDINATES_SOURCE", COUNTRY_COORDINATES_SOURCE)
    )
    geojson_source: str = field(
        default_factory=lambda: os.getenv("COUNTRY_GEOJSON_SOURCE", COUNTRY_GEOJSON_URL)
    )
    reference_load_workers: int = REFERENCE_LOAD_WORKERS

    # ── HTTP ───────────────────────────────────────────────────────────────────
    max_retries: int = FEED_MAX_RETRIES
    backoff_base: float = FEED_BACKOFF_BASE
    request_timeout: int = FEED_REQUEST_TIMEOUT

    # ── Update scheduling ──────────────────────────────────────────────────────
    next_update_offset_minutes: int = NEXT_UPDATE_OFFSET_MINUTES
    update_grace_seconds: float = UPDATE_GRACE_SECONDS
    fallback_retry_seconds: float = FALLBACK_RETRY_SECONDS

    # ── Rendering ──────────────────────────────────────────────────────────────
    color_mode: str = COLOR_MODE
    point_size: float = POINT_SIZE
    view_mode: str = DEFAULT_VIEW_MODE

    # ── Output and logging ─────────────────────────────────────────────────────
    output_root: str = field(default_factory=lambda: os.getenv("OUTPUT_ROOT", OUTPUT_ROOT))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL))
    # Unset keeps logging on the console only
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    def __post_init__(self) -> None:
        if self.feed_variant not in ARCHIVE_URL_PATTERNS:
            raise ValueError(
                f"feed_variant must be one of {sorted(ARCHIVE_URL_PATTERNS)}, got {self.feed_variant!r}"
            )
        if self.color_mode not in _COLOR_MODES:
            raise ValueError(f"color_mode must be one of {_COLOR_MODES}, got {self.color_mode!r}")
        if self.view_mode not in VIEW_MODES:
            raise ValueError(f"view_mode must be one of {VIEW_MODES}, got {self.view_mode!r}")
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got {self.log_level!r}")
        if not self.lastupdate_url:
            self.lastupdate_url = _POINTER_URLS[self.feed_variant]

    @property
    def archive_url_pattern(self) -> str:
        """Regex locating the archive URL inside the pointer file."""
        return ARCHIVE_URL_PATTERNS[self.feed_variant]

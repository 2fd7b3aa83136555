"""GDELT Event Globe — All default values and configuration constants.

All tuneable values live here. Never hard-code magic numbers in source files.
Import constants from this module; override via ViewerConfig at runtime.
"""

from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent / "eventglobe" / "data"

# ── Upstream feed ──────────────────────────────────────────────────────────────
# Pointer files published every 15 minutes by GDELT 2.0
LASTUPDATE_TRANSLATION_URL: str = "http://data.gdeltproject.org/gdeltv2/lastupdate-translation.txt"
LASTUPDATE_ENGLISH_URL: str = "http://data.gdeltproject.org/gdeltv2/lastupdate.txt"

# Default feed variant: "translation" (machine-translated sources) or "english"
FEED_VARIANT: str = "translation"

# Archive URL patterns embedded in the pointer files. Group 1 is the 14-digit
# YYYYMMDDHHMMSS publication timestamp.
ARCHIVE_URL_PATTERNS = {
    "translation": r"http://[\w.\-]+/gdeltv2/(\d+)\.translation\.export\.CSV\.zip",
    "english": r"http://[\w.\-]+/gdeltv2/(\d+)\.export\.CSV\.zip",
}

# ── Reference data ─────────────────────────────────────────────────────────────
CAMEO_CODES_SOURCE: str = str(_DATA_DIR / "cameo-event-codes.json")
COUNTRY_COORDINATES_SOURCE: str = str(_DATA_DIR / "country-coordinates.json")
COUNTRY_GEOJSON_URL: str = (
    "https://raw.githubusercontent.com/vasturiano/react-globe.gl/master/"
    "example/datasets/ne_110m_admin_0_countries.geojson"
)

# ── Record layout ──────────────────────────────────────────────────────────────
# GDELT 2.0 event export rows carry 61 tab-separated columns; shorter rows are malformed
MIN_EVENT_COLUMNS: int = 61

# Literal placeholder GDELT writes when an event has no source URL
NULL_SOURCE_URL: str = "NULL"

# ── Update scheduling ──────────────────────────────────────────────────────────
# Expected delay between a file's embedded timestamp and the next publication
NEXT_UPDATE_OFFSET_MINUTES: int = 25

# Grace added on top of the computed next-publish time
UPDATE_GRACE_SECONDS: float = 1.0

# Delay used when the next-publish time is already in the past
FALLBACK_RETRY_SECONDS: float = 60.0

# ── HTTP ───────────────────────────────────────────────────────────────────────
FEED_MAX_RETRIES: int = 2
FEED_BACKOFF_BASE: float = 2.0
FEED_REQUEST_TIMEOUT: int = 60

# Concurrent workers for the reference-data loads (CAMEO, countries, GeoJSON)
REFERENCE_LOAD_WORKERS: int = 3

# ── Color encoding ─────────────────────────────────────────────────────────────
CATEGORY_ALPHA: float = 0.8
COUNTRY_FILL_ALPHA: float = 0.25
GOLDSTEIN_BACKGROUND_ALPHA: float = 0.12

# Scores are clamped to this magnitude before scaling
TONE_CLAMP: float = 10.0
GOLDSTEIN_CLAMP: float = 10.0

# Default color mode for arcs and points: "category" (root code) or "tone" (AvgTone)
COLOR_MODE: str = "category"

# ── Aggregation ────────────────────────────────────────────────────────────────
# Spiral jitter applied to co-located single-actor points
JITTER_LAT_STEP: float = 0.2
JITTER_LNG_STEP: float = 0.4
JITTER_DIVISOR: float = 3.0

POINT_SIZE: float = 0.3

# ── View state ─────────────────────────────────────────────────────────────────
VIEW_MODES = ("3d", "2d")
DEFAULT_VIEW_MODE: str = "3d"
GLOBE_DEFAULT_ALTITUDE: float = 3.5
GLOBE_FOCUS_ALTITUDE: float = 1.5
MAP_DEFAULT_CENTER = (20.0, 0.0)
MAP_DEFAULT_ZOOM: int = 2
MAP_FOCUS_ZOOM: int = 5

# ── Display labels ─────────────────────────────────────────────────────────────
LABEL_UNKNOWN_EVENT: str = "詳細不明"
LABEL_UNKNOWN_CATEGORY: str = "不明なカテゴリ"
LABEL_UNKNOWN_SUBJECT: str = "不明な主体"
LABEL_UNKNOWN_OBJECT: str = "不明な対象"
LABEL_NOT_AVAILABLE: str = "N/A"
LABEL_READ_ARTICLE: str = "記事を読む"
LABEL_NO_EVENTS: str = "表示可能なイベントが見つかりませんでした。"

# Number of columns in the event table (error rows span all of them)
TABLE_COLUMN_COUNT: int = 5

# ── Output and logging ─────────────────────────────────────────────────────────
OUTPUT_ROOT: str = "outputs"
DEFAULT_LOG_LEVEL: str = "INFO"

"""GDELT 2.0 event export parser.

Turns the decompressed tab-separated export into an ordered list of typed
Event records. Columns are read strictly by position; the export has no
header row. Malformed rows (fewer than 61 columns) are skipped, unparsable
numbers become NaN (floats) or None (integer counts). Nothing in here raises
on bad input.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from config.defaults import MIN_EVENT_COLUMNS
from eventglobe.analysis.geo_resolver import GeoResolver
from eventglobe.models.events import Actor, Event

logger = logging.getLogger(__name__)

# ── GDELT 2.0 event schema (column positions) ─────────────────────────────────
COL_GLOBAL_EVENT_ID = 0
COL_SQLDATE = 1
COL_ACTOR1_CODE = 5
COL_ACTOR1_NAME = 6
COL_ACTOR1_COUNTRY = 7
COL_ACTOR2_CODE = 15
COL_ACTOR2_NAME = 16
COL_ACTOR2_COUNTRY = 17
COL_IS_ROOT_EVENT = 25
COL_EVENT_CODE = 26
COL_EVENT_BASE_CODE = 27
COL_QUAD_CLASS = 29
COL_GOLDSTEIN = 30
COL_NUM_MENTIONS = 31
COL_NUM_SOURCES = 32
COL_NUM_ARTICLES = 33
COL_AVG_TONE = 34
COL_ACTOR1_GEO_FULLNAME = 36
COL_ACTOR1_GEO_LAT = 40
COL_ACTOR1_GEO_LONG = 41
COL_ACTOR2_GEO_FULLNAME = 44
COL_ACTOR2_GEO_LAT = 48
COL_ACTOR2_GEO_LONG = 49
COL_ACTION_GEO_FULLNAME = 52
COL_ACTION_GEO_COUNTRY = 53
COL_ACTION_GEO_LAT = 56
COL_ACTION_GEO_LONG = 57
COL_DATEADDED = 59
COL_SOURCEURL = 60

# CAMEO actor codes start with a 3-letter country code (e.g. "USAGOV")
_ACTOR_CODE_COUNTRY_PREFIX = 3


def parse_float(raw: str) -> float:
    """Locale-independent float parse; NaN on any failure or non-finite value."""
    try:
        value = float(raw.strip())
    except (ValueError, AttributeError):
        return math.nan
    return value if math.isfinite(value) else math.nan


def parse_int(raw: str) -> Optional[int]:
    """Integer parse; None on any failure."""
    try:
        return int(raw.strip())
    except (ValueError, AttributeError):
        return None


def _optional_float(raw: str) -> Optional[float]:
    value = parse_float(raw)
    return None if math.isnan(value) else value


def _nonempty(raw: str) -> Optional[str]:
    raw = raw.strip()
    return raw or None


def own_country_code(code: Optional[str], country_column: Optional[str]) -> Optional[str]:
    """An actor's own country code: the explicit column, else the actor-code prefix."""
    if country_column:
        return country_column
    if code and len(code) >= _ACTOR_CODE_COUNTRY_PREFIX:
        return code[:_ACTOR_CODE_COUNTRY_PREFIX]
    return None


def _usable(code: Optional[str], resolver: Optional[GeoResolver]) -> bool:
    if not code:
        return False
    return resolver is None or resolver.is_resolvable(code)


def apply_bloc_fallback(
    own1: Optional[str],
    own2: Optional[str],
    resolver: Optional[GeoResolver] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Substitute the other actor's code when an actor's own code is unusable.

    Without a resolver, "usable" means present; with one it also means
    resolvable. When neither side is usable each actor keeps its own code.
    Organizational actors therefore inherit their counterpart's country and
    such records collapse onto a single country.

    Returns:
        (actor1 country code, actor2 country code).
    """
    ok1 = _usable(own1, resolver)
    ok2 = _usable(own2, resolver)
    country1 = own1 if ok1 else (own2 if ok2 else own1)
    country2 = own2 if ok2 else (own1 if ok1 else own2)
    return country1, country2


def _build_actor(
    columns: Sequence[str],
    code_col: int,
    name_col: int,
    geo_name_col: int,
    geo_lat_col: int,
    geo_lng_col: int,
    country_code: Optional[str],
    own_code: Optional[str],
    resolver: Optional[GeoResolver],
) -> Actor:
    actor = Actor(
        code=_nonempty(columns[code_col]),
        name=_nonempty(columns[name_col]),
        country_code=country_code,
        geo_full_name=columns[geo_name_col].strip(),
        geo_lat=_optional_float(columns[geo_lat_col]),
        geo_lng=_optional_float(columns[geo_lng_col]),
    )
    if resolver is None:
        return actor

    location = resolver.resolve(country_code)
    if location is not None:
        actor.lat = location.lat
        actor.lng = location.lng
        actor.place_name = location.name or None
        actor.is_place = country_code == own_code
    return actor


def parse_row(columns: Sequence[str], resolver: Optional[GeoResolver] = None) -> Event:
    """Build an Event from one already-split row of at least 61 columns."""
    code1 = _nonempty(columns[COL_ACTOR1_CODE])
    code2 = _nonempty(columns[COL_ACTOR2_CODE])
    own1 = own_country_code(code1, _nonempty(columns[COL_ACTOR1_COUNTRY]))
    own2 = own_country_code(code2, _nonempty(columns[COL_ACTOR2_COUNTRY]))
    country1, country2 = apply_bloc_fallback(own1, own2, resolver)

    actor1 = _build_actor(
        columns, COL_ACTOR1_CODE, COL_ACTOR1_NAME, COL_ACTOR1_GEO_FULLNAME,
        COL_ACTOR1_GEO_LAT, COL_ACTOR1_GEO_LONG, country1, own1, resolver,
    )
    actor2 = _build_actor(
        columns, COL_ACTOR2_CODE, COL_ACTOR2_NAME, COL_ACTOR2_GEO_FULLNAME,
        COL_ACTOR2_GEO_LAT, COL_ACTOR2_GEO_LONG, country2, own2, resolver,
    )

    return Event(
        global_event_id=columns[COL_GLOBAL_EVENT_ID].strip(),
        day=columns[COL_SQLDATE].strip(),
        event_code=columns[COL_EVENT_CODE].strip(),
        goldstein_scale=parse_float(columns[COL_GOLDSTEIN]),
        avg_tone=parse_float(columns[COL_AVG_TONE]),
        actor1=actor1,
        actor2=actor2,
        source_url=columns[COL_SOURCEURL].strip(),
        is_root_event=columns[COL_IS_ROOT_EVENT].strip() == "1",
        event_base_code=columns[COL_EVENT_BASE_CODE].strip(),
        quad_class=parse_int(columns[COL_QUAD_CLASS]),
        num_mentions=parse_int(columns[COL_NUM_MENTIONS]),
        num_sources=parse_int(columns[COL_NUM_SOURCES]),
        num_articles=parse_int(columns[COL_NUM_ARTICLES]),
        action_geo_full_name=columns[COL_ACTION_GEO_FULLNAME].strip(),
        action_geo_country_code=columns[COL_ACTION_GEO_COUNTRY].strip(),
        action_lat=_optional_float(columns[COL_ACTION_GEO_LAT]),
        action_lng=_optional_float(columns[COL_ACTION_GEO_LONG]),
        date_added=columns[COL_DATEADDED].strip(),
    )


def parse_events(raw_text: str, resolver: Optional[GeoResolver] = None) -> List[Event]:
    """Parse a GDELT 2.0 event export into Event records.

    Args:
        raw_text: Decompressed export text (tab-separated, newline-terminated rows).
        resolver: Optional geo resolver; when given, actors are resolved inline
            and bloc fallback only accepts resolvable codes.

    Returns:
        Events in input row order. Rows with fewer than 61 columns are skipped.
    """
    events: List[Event] = []
    skipped = 0
    for row in raw_text.split("\n"):
        columns = row.rstrip("\r").split("\t")
        if len(columns) < MIN_EVENT_COLUMNS:
            if row.strip():
                skipped += 1
            continue
        events.append(parse_row(columns, resolver))

    if skipped:
        logger.debug("Record parser: skipped %d malformed rows", skipped)
    logger.info("Record parser: parsed %d events", len(events))
    return events

"""Event data models for the GDELT Event Globe.

Defines the typed records produced by the record parser. All fields are
typed; no raw column lists leave the parser.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from config.defaults import NULL_SOURCE_URL


@dataclass
class Actor:
    """One side of a GDELT interaction record, after geo resolution.

    country_code holds the bloc-fallback result: the actor's own code when it is
    present (and resolvable), otherwise the other actor's code. lat/lng are the
    coordinates of country_code; is_place is True only when they came from the
    actor's own code.
    """

    code: Optional[str] = None
    name: Optional[str] = None
    country_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    is_place: bool = False
    place_name: Optional[str] = None   # name_jp of the resolved reference entry

    # Actor geography block, as reported by GDELT
    geo_full_name: str = ""
    geo_lat: Optional[float] = None
    geo_lng: Optional[float] = None

    @property
    def is_located(self) -> bool:
        """True if a coordinate is known for country_code (own or fallback)."""
        return self.lat is not None and self.lng is not None

    def display_name(self, default: str) -> str:
        """Return the actor name, its raw code, or the given default."""
        return self.name or self.code or default


@dataclass
class Event:
    """A single GDELT 2.0 event record (one row of the export file)."""

    global_event_id: str
    day: str                        # YYYYMMDD
    event_code: str = ""
    event_root_code: Optional[str] = None
    goldstein_scale: float = math.nan
    avg_tone: float = math.nan
    actor1: Actor = field(default_factory=Actor)
    actor2: Actor = field(default_factory=Actor)
    source_url: str = ""            # "NULL" when GDELT has no source

    # ── Classification ─────────────────────────────────────────────────────────
    is_root_event: bool = False
    event_base_code: str = ""
    quad_class: Optional[int] = None

    # ── Coverage counts (None when unparsable) ────────────────────────────────
    num_mentions: Optional[int] = None
    num_sources: Optional[int] = None
    num_articles: Optional[int] = None

    # ── Action geography ───────────────────────────────────────────────────────
    action_geo_full_name: str = ""
    action_geo_country_code: str = ""
    action_lat: Optional[float] = None
    action_lng: Optional[float] = None

    date_added: str = ""            # YYYYMMDDHHMMSS

    def __post_init__(self) -> None:
        self.event_root_code = self.event_code[:2] if self.event_code else None

    @property
    def has_source(self) -> bool:
        return bool(self.source_url) and self.source_url != NULL_SOURCE_URL

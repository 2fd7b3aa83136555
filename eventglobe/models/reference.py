"""Reference data models for the GDELT Event Globe.

CAMEO labels, country coordinates and country boundary features are loaded
once per fetch cycle and treated as read-only afterwards.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def _as_coordinate(value: Any) -> Optional[float]:
    """Coerce a JSON coordinate to float; None for missing or non-numeric values."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


@dataclass(frozen=True)
class GeoEntry:
    """Country reference entry: representative coordinate and Japanese display name."""

    lat: Optional[float]
    lng: Optional[float]
    name_jp: str = ""
    icon: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GeoEntry":
        return cls(
            lat=_as_coordinate(raw.get("lat")),
            lng=_as_coordinate(raw.get("lng")),
            name_jp=str(raw.get("name_jp") or ""),
            icon=raw.get("icon"),
        )


@dataclass(frozen=True)
class CameoEntry:
    """Human-readable label for a CAMEO event code or root code."""

    name_ja: str

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CameoEntry":
        return cls(name_ja=str(raw.get("name_ja") or ""))


@dataclass
class ReferenceData:
    """All reference tables needed to interpret one cycle's events."""

    cameo: Dict[str, CameoEntry] = field(default_factory=dict)
    countries: Dict[str, GeoEntry] = field(default_factory=dict)
    country_features: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_raw(
        cls,
        cameo_raw: Dict[str, Any],
        countries_raw: Dict[str, Any],
        geojson_raw: Optional[Dict[str, Any]] = None,
    ) -> "ReferenceData":
        """Build typed reference tables from the raw JSON documents.

        Entries that are not JSON objects are skipped with a debug log line.
        """
        cameo: Dict[str, CameoEntry] = {}
        for code, raw in cameo_raw.items():
            if isinstance(raw, dict):
                cameo[str(code)] = CameoEntry.from_dict(raw)
            else:
                logger.debug("Skipping malformed CAMEO entry %r", code)

        countries: Dict[str, GeoEntry] = {}
        for code, raw in countries_raw.items():
            if isinstance(raw, dict):
                countries[str(code)] = GeoEntry.from_dict(raw)
            else:
                logger.debug("Skipping malformed country entry %r", code)

        features = list((geojson_raw or {}).get("features") or [])
        return cls(cameo=cameo, countries=countries, country_features=features)

    def cameo_name(self, code: Optional[str]) -> Optional[str]:
        """Return the Japanese label for an event or root code, or None if unknown."""
        if not code:
            return None
        entry = self.cameo.get(code)
        return entry.name_ja if entry and entry.name_ja else None

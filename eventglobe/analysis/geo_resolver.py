"""Country-code geo resolution for the GDELT Event Globe.

Pure lookup against the loaded country reference table — no I/O, no network,
no caching beyond the table itself. Unknown codes resolve to None, never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from eventglobe.models.reference import GeoEntry


@dataclass(frozen=True)
class ResolvedLocation:
    """A concrete coordinate and display name for a country code."""

    lat: float
    lng: float
    name: str


class GeoResolver:
    """Resolve 3-letter country codes to coordinates via the reference table.

    Lookups are exact and case-sensitive. An entry without numeric lat and lng
    counts as unresolvable.

    Args:
        countries: Country code → GeoEntry reference table.
    """

    def __init__(self, countries: Dict[str, GeoEntry]) -> None:
        self._countries = countries
        self._iso_by_name: Optional[Dict[str, str]] = None

    def resolve(self, country_code: Optional[str]) -> Optional[ResolvedLocation]:
        """Return the coordinate for a country code, or None if unknown."""
        if not country_code:
            return None
        entry = self._countries.get(country_code)
        if entry is None or entry.lat is None or entry.lng is None:
            return None
        return ResolvedLocation(lat=entry.lat, lng=entry.lng, name=entry.name_jp)

    def is_resolvable(self, country_code: Optional[str]) -> bool:
        return self.resolve(country_code) is not None

    def display_name(self, country_code: Optional[str]) -> str:
        """Japanese name for a code, falling back to the code itself."""
        if not country_code:
            return ""
        entry = self._countries.get(country_code)
        if entry is not None and entry.name_jp:
            return entry.name_jp
        return country_code

    def iso_for_name(self, name_jp: str) -> Optional[str]:
        """Reverse lookup from Japanese display name to country code."""
        if self._iso_by_name is None:
            self._iso_by_name = {}
            for code, entry in self._countries.items():
                if entry.name_jp:
                    self._iso_by_name[entry.name_jp] = code
        return self._iso_by_name.get(name_jp.strip())

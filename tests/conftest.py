"""Shared pytest fixtures for GDELT Event Globe tests.

Conventions:
- Export rows are synthesised in memory with the 61-column GDELT 2.0 layout
- Reference data is a small in-memory table (USA, CHN, JPN, GBR plus edge entries)
- mock_feed_client replaces GDELTFeedClient without real HTTP calls
- No real external HTTP calls are made in any test
"""

from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path
from typing import Any, Callable, Dict
from unittest.mock import MagicMock

import pytest

from eventglobe.analysis import record_parser as rp

_FIELD_COLUMNS: Dict[str, int] = {
    "event_id": rp.COL_GLOBAL_EVENT_ID,
    "day": rp.COL_SQLDATE,
    "actor1_code": rp.COL_ACTOR1_CODE,
    "actor1_name": rp.COL_ACTOR1_NAME,
    "actor1_country": rp.COL_ACTOR1_COUNTRY,
    "actor2_code": rp.COL_ACTOR2_CODE,
    "actor2_name": rp.COL_ACTOR2_NAME,
    "actor2_country": rp.COL_ACTOR2_COUNTRY,
    "is_root_event": rp.COL_IS_ROOT_EVENT,
    "event_code": rp.COL_EVENT_CODE,
    "event_base_code": rp.COL_EVENT_BASE_CODE,
    "quad_class": rp.COL_QUAD_CLASS,
    "goldstein": rp.COL_GOLDSTEIN,
    "num_mentions": rp.COL_NUM_MENTIONS,
    "num_sources": rp.COL_NUM_SOURCES,
    "num_articles": rp.COL_NUM_ARTICLES,
    "avg_tone": rp.COL_AVG_TONE,
    "action_geo_full_name": rp.COL_ACTION_GEO_FULLNAME,
    "action_geo_country": rp.COL_ACTION_GEO_COUNTRY,
    "action_lat": rp.COL_ACTION_GEO_LAT,
    "action_lng": rp.COL_ACTION_GEO_LONG,
    "date_added": rp.COL_DATEADDED,
    "source_url": rp.COL_SOURCEURL,
}

_ROW_DEFAULTS: Dict[str, str] = {
    "event_id": "1000001",
    "day": "20240101",
    "event_code": "042",
    "goldstein": "1.9",
    "avg_tone": "2.5",
    "source_url": "https://example.com/news/1",
}

ARCHIVE_URL = "http://data.gdeltproject.org/gdeltv2/20240101120000.translation.export.CSV.zip"

POINTER_TEXT = (
    "150383 297a16b493de7cf6ca809a7cc31d0b93 "
    "http://data.gdeltproject.org/gdeltv2/20240101120000.translation.export.CSV.zip\n"
    "318084 bb27f78ba45f69a17ea6ed7755e9f8ff "
    "http://data.gdeltproject.org/gdeltv2/20240101120000.translation.mentions.CSV.zip\n"
    "10768507 ea8dde0beb0ba98810a92db068c0ce99 "
    "http://data.gdeltproject.org/gdeltv2/20240101120000.translation.gkg.csv.zip\n"
)


@pytest.fixture
def archive_url() -> str:
    return ARCHIVE_URL


@pytest.fixture
def pointer_text() -> str:
    return POINTER_TEXT


# ── Row synthesis ────────────────────────────────────────────────────────────────

def build_row(**fields: str) -> str:
    """One tab-separated export row with the named fields set and the rest empty."""
    columns = [""] * 61
    for name, value in {**_ROW_DEFAULTS, **fields}.items():
        columns[_FIELD_COLUMNS[name]] = value
    return "\t".join(columns)


@pytest.fixture
def make_row() -> Callable[..., str]:
    """Factory fixture: make_row(actor1_country="USA", ...) → 61-column row string."""
    return build_row


@pytest.fixture
def make_zip() -> Callable[..., bytes]:
    """Factory fixture: in-memory ZIP archive with the given members."""

    def _make(*members: tuple) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for name, text in members:
                archive.writestr(name, text)
        return buffer.getvalue()

    return _make


# ── Reference data ───────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def cameo_raw() -> Dict[str, Any]:
    return {
        "04": {"name_ja": "協議"},
        "042": {"name_ja": "訪問"},
        "14": {"name_ja": "抗議"},
        "141": {"name_ja": "デモ・集会"},
        "19": {"name_ja": "戦闘"},
    }


@pytest.fixture(scope="session")
def countries_raw() -> Dict[str, Any]:
    return {
        "USA": {"lat": 37.09, "lng": -95.71, "name_jp": "アメリカ合衆国"},
        "CHN": {"lat": 35.86, "lng": 104.2, "name_jp": "中国"},
        "JPN": {"lat": 36.2, "lng": 138.25, "name_jp": "日本"},
        "GBR": {"lat": 55.38, "lng": -3.44, "name_jp": "イギリス"},
        # Entry with no usable coordinate
        "XXX": {"lat": "unknown", "lng": None, "name_jp": "不明国"},
    }


@pytest.fixture(scope="session")
def geojson_raw() -> Dict[str, Any]:
    def _feature(iso: str, admin: str, lng: float, lat: float) -> Dict[str, Any]:
        ring = [[lng - 1, lat - 1], [lng + 1, lat - 1], [lng + 1, lat + 1], [lng - 1, lat + 1], [lng - 1, lat - 1]]
        return {
            "type": "Feature",
            "properties": {"ISO_A3": iso, "ADMIN": admin},
            "geometry": {"type": "Polygon", "coordinates": [ring]},
        }

    return {
        "type": "FeatureCollection",
        "features": [
            _feature("USA", "United States of America", -95.71, 37.09),
            _feature("CHN", "China", 104.2, 35.86),
            _feature("JPN", "Japan", 138.25, 36.2),
        ],
    }


@pytest.fixture(scope="session")
def reference(cameo_raw, countries_raw, geojson_raw):
    """ReferenceData built from the in-memory tables."""
    from eventglobe.models.reference import ReferenceData

    return ReferenceData.from_raw(cameo_raw, countries_raw, geojson_raw)


@pytest.fixture(scope="session")
def resolver(reference):
    from eventglobe.analysis.geo_resolver import GeoResolver

    return GeoResolver(reference.countries)


@pytest.fixture
def reference_files(tmp_path: Path, cameo_raw, countries_raw, geojson_raw) -> Dict[str, Path]:
    """The three reference documents written to a temp directory."""
    paths = {}
    for name, data in (("cameo", cameo_raw), ("countries", countries_raw), ("geojson", geojson_raw)):
        path = tmp_path / f"{name}.json"
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        paths[name] = path
    return paths


@pytest.fixture
def viewer_config(reference_files, tmp_path: Path):
    """ViewerConfig pointing at local reference files and a temp output root."""
    from config.settings import ViewerConfig

    return ViewerConfig(
        cameo_source=str(reference_files["cameo"]),
        country_source=str(reference_files["countries"]),
        geojson_source=str(reference_files["geojson"]),
        lastupdate_url="http://data.gdeltproject.org/gdeltv2/lastupdate-translation.txt",
        output_root=str(tmp_path / "outputs"),
        backoff_base=0.0,
    )


# ── Mock feed client ─────────────────────────────────────────────────────────────

@pytest.fixture
def mock_feed_client():
    """MagicMock GDELTFeedClient serving the standard pointer file.

    Tests set ``fetch_archive_text.return_value`` to the export text they need.
    """
    from eventglobe.clients.gdelt_client import GDELTFeedClient

    client = MagicMock(spec=GDELTFeedClient)
    client.fetch_text.return_value = POINTER_TEXT
    client.fetch_archive_text.return_value = ""
    return client

"""Unit tests for eventglobe.io.reference_loader."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from eventglobe.clients.gdelt_client import GDELTFeedClient
from eventglobe.errors import FeedRequestError, ReferenceLoadError
from eventglobe.io.reference_loader import load_reference_data, load_source


def test_loads_local_files(viewer_config):
    client = MagicMock(spec=GDELTFeedClient)
    reference = load_reference_data(viewer_config, client)

    assert reference.cameo_name("042") == "訪問"
    assert reference.countries["JPN"].name_jp == "日本"
    assert len(reference.country_features) == 3
    client.fetch_json.assert_not_called()


def test_url_sources_use_client(viewer_config, geojson_raw):
    viewer_config.geojson_source = "https://example.test/countries.geojson"
    client = MagicMock(spec=GDELTFeedClient)
    client.fetch_json.return_value = geojson_raw

    reference = load_reference_data(viewer_config, client)

    client.fetch_json.assert_called_once_with("https://example.test/countries.geojson")
    assert len(reference.country_features) == 3


def test_missing_file_raises(tmp_path):
    with pytest.raises(ReferenceLoadError, match="CAMEO"):
        load_source(str(tmp_path / "nope.json"), MagicMock(spec=GDELTFeedClient), "CAMEO event code definitions")


def test_non_object_json_raises(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ReferenceLoadError):
        load_source(str(path), MagicMock(spec=GDELTFeedClient), "country coordinate definitions")


def test_http_failure_is_wrapped(viewer_config):
    viewer_config.geojson_source = "https://example.test/countries.geojson"
    client = MagicMock(spec=GDELTFeedClient)
    client.fetch_json.side_effect = FeedRequestError("https://example.test/countries.geojson", status_code=404)

    with pytest.raises(ReferenceLoadError, match="boundary GeoJSON"):
        load_reference_data(viewer_config, client)


def test_bundled_reference_data_is_consistent():
    """Every sidebar country resolves through the bundled country table."""
    from config.settings import ViewerConfig
    from eventglobe.analysis.geo_resolver import GeoResolver
    from eventglobe.state import REGIONS

    config = ViewerConfig(geojson_source=ViewerConfig().country_source)
    client = MagicMock(spec=GDELTFeedClient)
    reference = load_reference_data(config, client)
    resolver = GeoResolver(reference.countries)

    for countries in REGIONS.values():
        for name in countries:
            assert resolver.is_resolvable(resolver.iso_for_name(name)), name
    for code in [f"{n:02d}" for n in range(1, 21)]:
        assert reference.cameo_name(code), code

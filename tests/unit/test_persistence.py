"""Unit tests for eventglobe.io.persistence."""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone

import pytest

from eventglobe.io.persistence import cycle_directory, read_reference_file, write_snapshot_payload


def test_payload_written_as_utf8_json(tmp_path):
    path = tmp_path / "20240101120000" / "snapshot.json"
    written = write_snapshot_payload({"categoryLabel": "協議", "index": 0}, path)

    assert written == path
    assert "協議" in path.read_text(encoding="utf-8")
    assert json.loads(path.read_text(encoding="utf-8")) == {"categoryLabel": "協議", "index": 0}


def test_payload_replaces_previous_file_without_leftovers(tmp_path):
    path = tmp_path / "snapshot.json"
    write_snapshot_payload({"status": "EMPTY"}, path)
    write_snapshot_payload({"status": "OK"}, path)

    assert json.loads(path.read_text(encoding="utf-8")) == {"status": "OK"}
    assert [p.name for p in tmp_path.iterdir()] == ["snapshot.json"]


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_payload_is_refused(tmp_path, value):
    path = tmp_path / "snapshot.json"
    with pytest.raises(ValueError):
        write_snapshot_payload({"avgTone": value}, path)
    assert not path.exists()


def test_cycle_directory_named_after_file_timestamp(tmp_path):
    stamp = datetime(2024, 1, 1, 12, 15, 0, tzinfo=timezone.utc)
    directory = cycle_directory(tmp_path / "outputs", stamp)

    assert directory.is_dir()
    assert directory.name == "20240101121500"


def test_read_reference_file(tmp_path):
    path = tmp_path / "countries.json"
    path.write_text(json.dumps({"JPN": {"name_jp": "日本"}}, ensure_ascii=False), encoding="utf-8")
    assert read_reference_file(path) == {"JPN": {"name_jp": "日本"}}


def test_missing_reference_file_returns_none(tmp_path):
    assert read_reference_file(tmp_path / "missing.json") is None


def test_corrupt_reference_file_returns_none(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    assert read_reference_file(path) is None

"""Integration tests for the full fetch cycle.

Exercises run_cycle and EventViewer end-to-end against local reference files
and a mocked feed client:
- pointer file → archive → parse → aggregate → snapshot
- every failure stage surfaces as a single error row
- rescheduling on success, no pending timer after failure
- view switches rebuild derived data from the current events
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from eventglobe.errors import ArchiveError, FeedRequestError
from eventglobe.models.pipeline import CycleStatus
from eventglobe.pipeline import EventViewer, run_cycle
from eventglobe.scheduler import UpdateScheduler
from eventglobe.visualization.globe_payload import build_globe_payload, export_snapshot

NOW = datetime(2024, 1, 1, 12, 5, 0, tzinfo=timezone.utc)


def _reject_constant(token: str):
    raise ValueError(f"non-standard JSON constant {token}")


def _export(make_row, goldstein: str = "1.9") -> str:
    """One valid US→CN consultation row plus a malformed 10-field row."""
    valid = make_row(
        event_id="1100001",
        day="20240101",
        actor1_code="USA",
        actor1_name="UNITED STATES",
        actor1_country="USA",
        actor2_code="CHN",
        actor2_name="CHINA",
        actor2_country="CHN",
        event_code="042",
        goldstein=goldstein,
        avg_tone="2.5",
        source_url="https://example.com/news/us-china",
    )
    short = "\t".join(["x"] * 10)
    return valid + "\n" + short + "\n"


class TestRunCycle:
    def test_end_to_end(self, viewer_config, mock_feed_client, make_row, archive_url):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.ok and result.status == CycleStatus.OK
        mock_feed_client.fetch_text.assert_called_once_with(viewer_config.lastupdate_url)
        mock_feed_client.fetch_archive_text.assert_called_once_with(archive_url)

        snapshot = result.snapshot
        assert len(snapshot.events) == 1
        event = snapshot.events[0]
        assert event.event_root_code == "04"

        (arc,) = snapshot.arcs
        assert arc.color == "rgba(118, 118, 118, 0.8)"
        assert not snapshot.points

        (row,) = snapshot.table_rows
        assert row.actor_summary == "アメリカ合衆国 → 中国"
        assert row.event_label == "訪問"
        assert row.background_color == "rgba(224, 235, 255, 0.12)"

        assert snapshot.archive_url == archive_url
        assert snapshot.file_timestamp == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert snapshot.fetched_at == NOW
        assert [p.phase_name for p in result.phase_log] == ["reference", "pointer", "archive", "parse", "aggregate"]

    def test_goldstein_five_background(self, viewer_config, mock_feed_client, make_row):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row, goldstein="5.0")

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert len(result.snapshot.events) == 1
        assert result.snapshot.events[0].event_root_code == "04"
        (row,) = result.snapshot.table_rows
        assert row.background_color == "rgba(215, 243, 255, 0.12)"

    def test_infinite_scores_export_as_strict_json(self, viewer_config, mock_feed_client, make_row, tmp_path):
        mock_feed_client.fetch_archive_text.return_value = make_row(
            actor1_country="USA", actor2_country="CHN", avg_tone="inf", goldstein="-Infinity"
        )

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)
        event = build_globe_payload(result.snapshot)["arcs"][0]["event"]
        path = export_snapshot(result.snapshot, tmp_path)

        assert event["avgTone"] is None and event["goldsteinScale"] is None
        assert result.snapshot.table_rows[0].background_color == "transparent"
        json.loads(path.read_text(encoding="utf-8"), parse_constant=_reject_constant)

    def test_no_renderable_events(self, viewer_config, mock_feed_client, make_row):
        mock_feed_client.fetch_archive_text.return_value = make_row(actor1_country="XXX")

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.ok
        assert result.status == CycleStatus.EMPTY
        assert result.snapshot.table_rows == ()
        assert result.snapshot.message == "表示可能なイベントが見つかりませんでした。"

    def test_reference_failure(self, viewer_config, mock_feed_client, tmp_path):
        viewer_config.cameo_source = str(tmp_path / "missing.json")

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.status == CycleStatus.FAILED
        (row,) = result.snapshot.table_rows
        assert row.error.startswith("Error: failed to load CAMEO")
        mock_feed_client.fetch_text.assert_not_called()

    def test_pointer_http_failure(self, viewer_config, mock_feed_client):
        mock_feed_client.fetch_text.side_effect = FeedRequestError(viewer_config.lastupdate_url, status_code=503)

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.status == CycleStatus.FAILED
        assert "status 503" in result.error
        assert not result.snapshot.events and not result.snapshot.arcs
        mock_feed_client.fetch_archive_text.assert_not_called()

    def test_pointer_without_archive_url(self, viewer_config, mock_feed_client):
        mock_feed_client.fetch_text.return_value = "nothing useful"

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.status == CycleStatus.FAILED
        assert result.snapshot.table_rows[0].error == "Error: no valid archive URL found in update pointer file"

    def test_archive_download_failure(self, viewer_config, mock_feed_client, archive_url):
        mock_feed_client.fetch_archive_text.side_effect = FeedRequestError(archive_url, status_code=404)

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.status == CycleStatus.FAILED
        assert result.error.startswith("failed to download archive")
        assert result.phase_log[-1].phase_name == "archive"
        assert result.phase_log[-1].status == CycleStatus.FAILED

    def test_corrupt_archive(self, viewer_config, mock_feed_client):
        mock_feed_client.fetch_archive_text.side_effect = ArchiveError("archive could not be decompressed")

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.status == CycleStatus.FAILED
        assert len(result.snapshot.table_rows) == 1

    def test_unexpected_exception_is_contained(self, viewer_config, mock_feed_client):
        mock_feed_client.fetch_archive_text.side_effect = RuntimeError("disk on fire")

        result = run_cycle(viewer_config, mock_feed_client, now=NOW)

        assert result.status == CycleStatus.FAILED
        assert result.snapshot.table_rows[0].error == "Error: disk on fire"

    def test_real_zip_through_client(self, viewer_config, make_row, make_zip, pointer_text):
        """Pointer and archive bytes flow through a real client with a patched session."""
        from eventglobe.clients.gdelt_client import GDELTFeedClient

        archive = make_zip(("20240101120000.translation.export.CSV", _export(make_row)))
        pointer_resp = MagicMock(status_code=200, text=pointer_text)
        archive_resp = MagicMock(status_code=200, content=archive)

        client = GDELTFeedClient(max_retries=0, backoff_base=0.0)
        client._session.get = MagicMock(side_effect=[pointer_resp, archive_resp])

        result = run_cycle(viewer_config, client, now=NOW)

        assert result.status == CycleStatus.OK
        assert len(result.snapshot.arcs) == 1


class TestEventViewer:
    def _viewer(self, viewer_config, mock_feed_client):
        scheduler = MagicMock(spec=UpdateScheduler)
        return EventViewer(viewer_config, client=mock_feed_client, scheduler=scheduler), scheduler

    def test_success_publishes_and_reschedules(self, viewer_config, mock_feed_client, make_row):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer, scheduler = self._viewer(viewer_config, mock_feed_client)

        result = viewer.start()

        assert viewer.snapshot is result.snapshot
        assert viewer.reference is not None
        scheduler.schedule.assert_called_once_with(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        scheduler.cancel.assert_not_called()

    def test_failure_publishes_error_and_cancels(self, viewer_config, mock_feed_client):
        mock_feed_client.fetch_text.return_value = "garbage"
        viewer, scheduler = self._viewer(viewer_config, mock_feed_client)

        viewer.refresh()

        assert viewer.snapshot.status == CycleStatus.FAILED
        assert viewer.snapshot.table_rows[0].is_error
        scheduler.cancel.assert_called_once_with()
        scheduler.schedule.assert_not_called()

    def test_each_cycle_replaces_events_wholesale(self, viewer_config, mock_feed_client, make_row):
        viewer, _ = self._viewer(viewer_config, mock_feed_client)
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer.refresh()
        first = viewer.snapshot

        mock_feed_client.fetch_archive_text.return_value = make_row(event_id="2", actor1_country="JPN")
        viewer.refresh()

        assert [e.global_event_id for e in viewer.snapshot.events] == ["2"]
        assert [e.global_event_id for e in first.events] == ["1100001"]

    def test_view_switch_rebuilds_snapshot(self, viewer_config, mock_feed_client, make_row):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer, _ = self._viewer(viewer_config, mock_feed_client)
        viewer.start()
        before = viewer.snapshot

        state = viewer.switch_view("2d")

        assert state.view_mode == "2d"
        after = viewer.snapshot
        assert after is not before
        assert after.arcs == before.arcs
        assert after.events == before.events

    def test_color_switch_during_fetch_is_applied(self, viewer_config, mock_feed_client, make_row):
        viewer, _ = self._viewer(viewer_config, mock_feed_client)
        export = _export(make_row)

        def _switch_then_serve(url):
            viewer.switch_color_mode("tone")
            return export

        mock_feed_client.fetch_archive_text.side_effect = _switch_then_serve
        viewer.refresh()

        assert viewer.view_state.color_mode == "tone"
        assert viewer.snapshot.color_mode == "tone"
        assert viewer.snapshot.arcs[0].color == "rgb(191, 255, 0)"

    def test_overlapping_refresh_is_skipped(self, viewer_config, mock_feed_client, make_row):
        viewer, scheduler = self._viewer(viewer_config, mock_feed_client)
        export = _export(make_row)
        nested = []

        def _refresh_then_serve(url):
            nested.append(viewer.refresh())
            return export

        mock_feed_client.fetch_archive_text.side_effect = _refresh_then_serve
        result = viewer.refresh()

        assert nested == [None]
        assert result.ok
        assert mock_feed_client.fetch_text.call_count == 1
        scheduler.schedule.assert_called_once()
        # The lock is released again once the cycle finishes
        mock_feed_client.fetch_archive_text.side_effect = None
        mock_feed_client.fetch_archive_text.return_value = export
        assert viewer.refresh() is not None

    def test_color_mode_switch(self, viewer_config, mock_feed_client, make_row):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer, _ = self._viewer(viewer_config, mock_feed_client)
        viewer.start()

        viewer.switch_color_mode("tone")

        # avg_tone 2.5 → factor 0.25 → r = 191.25
        assert viewer.snapshot.arcs[0].color == "rgb(191, 255, 0)"
        assert viewer.snapshot.color_mode == "tone"

    def test_focus_and_regions(self, viewer_config, mock_feed_client, make_row):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer, _ = self._viewer(viewer_config, mock_feed_client)

        # No reference data yet: focusing is a no-op
        assert not viewer.focus_country("日本").is_focused

        viewer.start()
        assert viewer.toggle_region("アジア").selected_region == "アジア"
        state = viewer.focus_country("日本")
        assert state.highlighted_iso == "JPN"
        assert not viewer.clear_focus().is_focused

    def test_outputs(self, viewer_config, mock_feed_client, make_row, tmp_path):
        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer, _ = self._viewer(viewer_config, mock_feed_client)
        viewer.start()

        assert viewer.globe_payload()["arcs"][0]["event"]["globalEventId"] == "1100001"
        exported = viewer.export()
        assert exported is not None and exported.exists()
        assert viewer.render_map(tmp_path / "map.html") == tmp_path / "map.html"

    def test_stop_cancels_timer(self, viewer_config, mock_feed_client):
        viewer, scheduler = self._viewer(viewer_config, mock_feed_client)
        with viewer:
            pass
        scheduler.cancel.assert_called_once_with()
        mock_feed_client.close.assert_not_called()

    def test_scheduler_fire_runs_next_cycle(self, viewer_config, mock_feed_client, make_row):
        """A real scheduler wired to the viewer triggers exactly one refresh per firing."""
        timers = []

        class _Timer:
            def __init__(self, interval, function, args=()):
                self.function, self.args, self.daemon = function, args, False
                timers.append(self)

            def start(self):
                pass

            def cancel(self):
                pass

        mock_feed_client.fetch_archive_text.return_value = _export(make_row)
        viewer = EventViewer(viewer_config, client=mock_feed_client)
        viewer._scheduler = UpdateScheduler(
            viewer.refresh, clock=lambda: NOW, timer_factory=_Timer
        )

        viewer.start()
        assert len(timers) == 1 and viewer.scheduler.pending

        timers[0].function(*timers[0].args)

        assert mock_feed_client.fetch_archive_text.call_count == 2
        assert len(timers) == 2

"""GDELT Event Globe fetch-cycle orchestrator.

One fetch cycle runs these phases strictly in order:
  Phase 1 — reference data (CAMEO labels, country coordinates, boundaries; loaded concurrently)
  Phase 2 — pointer file (locate the newest event archive URL)
  Phase 3 — archive (download and decompress the first member)
  Phase 4 — parse (raw text → Event list, geo resolution inline)
  Phase 5 — aggregate (arcs, jittered points, country colors, table rows)

Any phase failure aborts the cycle; partial data is discarded and the cycle
publishes an error snapshot carrying a single human-readable message.

Usage:
    from config.settings import ViewerConfig
    from eventglobe.pipeline import EventViewer

    viewer = EventViewer(ViewerConfig())
    viewer.start()              # first fetch, then re-fetch on the upstream cadence
    snapshot = viewer.snapshot
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TypeVar

from config.defaults import LABEL_NO_EVENTS
from config.settings import ViewerConfig
from eventglobe.analysis.aggregator import aggregate_events
from eventglobe.analysis.geo_resolver import GeoResolver
from eventglobe.analysis.record_parser import parse_events
from eventglobe.analysis.table_rows import build_error_row, build_table_row
from eventglobe.clients.gdelt_client import GDELTFeedClient, extract_archive_url
from eventglobe.errors import ArchiveError, FeedCycleError, FeedRequestError, PointerFileError
from eventglobe.io.reference_loader import load_reference_data
from eventglobe.models.events import Event
from eventglobe.models.pipeline import CycleContext, CycleResult, CycleStatus, utcnow
from eventglobe.models.reference import ReferenceData
from eventglobe.models.render import RenderSnapshot
from eventglobe.scheduler import UpdateScheduler
from eventglobe.state import (
    ViewState,
    clear_focus,
    focus_country,
    set_color_mode,
    set_view_mode,
    toggle_region,
)
from eventglobe.utils.date_utils import parse_feed_timestamp
from eventglobe.utils.logging_utils import configure_logging, get_run_logger
from eventglobe.visualization.event_map import render_event_map
from eventglobe.visualization.globe_payload import build_globe_payload, export_snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _make_cycle_id(now: datetime) -> str:
    """Sortable cycle ID from the fetch time (``YYYYMMDDHHMMSS``)."""
    return now.strftime("%Y%m%d%H%M%S")


def _run_phase(context: CycleContext, phase_name: str, func: Callable[[], T]) -> T:
    """Execute one cycle phase and record its timing.

    Exceptions propagate to run_cycle after the phase is marked FAILED.
    """
    record = context.log_phase_start(phase_name)
    try:
        result = func()
    except Exception:
        context.log_phase_end(record, status=CycleStatus.FAILED)
        raise
    context.log_phase_end(record)
    logger.debug("Cycle %s: %s complete (%.2fs)", context.cycle_id, phase_name, record.elapsed_seconds)
    return result


def build_snapshot(
    events: Sequence[Event],
    reference: ReferenceData,
    color_mode: str = "category",
    point_size: Optional[float] = None,
    archive_url: str = "",
    file_timestamp: Optional[datetime] = None,
    fetched_at: Optional[datetime] = None,
) -> RenderSnapshot:
    """Derive every renderable structure from an event list.

    Table rows follow event order and cover exactly the events drawn as an
    arc or a point. A list with nothing drawable yields an EMPTY snapshot.
    """
    kwargs = {} if point_size is None else {"point_size": point_size}
    aggregate = aggregate_events(events, reference, color_mode=color_mode, **kwargs)

    resolver = GeoResolver(reference.countries)
    rendered = sorted(
        [(arc.index, arc.event) for arc in aggregate.arcs]
        + [(point.index, point.event) for point in aggregate.points],
        key=lambda pair: pair[0],
    )
    rows = tuple(build_table_row(event, index, reference, resolver) for index, event in rendered)

    status = CycleStatus.OK if rows else CycleStatus.EMPTY
    return RenderSnapshot(
        events=tuple(events),
        arcs=tuple(aggregate.arcs),
        points=tuple(aggregate.points),
        country_colors=dict(aggregate.country_colors),
        table_rows=rows,
        archive_url=archive_url,
        file_timestamp=file_timestamp,
        fetched_at=fetched_at,
        color_mode=color_mode,
        status=status,
        message="" if rows else LABEL_NO_EVENTS,
    )


def build_error_snapshot(message: str, fetched_at: Optional[datetime] = None) -> RenderSnapshot:
    """A data-free snapshot holding only the error row."""
    return RenderSnapshot(
        table_rows=(build_error_row(message),),
        fetched_at=fetched_at,
        status=CycleStatus.FAILED,
        message=message,
    )


def _fetch_archive_url(config: ViewerConfig, client: GDELTFeedClient) -> tuple:
    try:
        pointer_text = client.fetch_text(config.lastupdate_url)
    except FeedRequestError as exc:
        raise PointerFileError(f"failed to fetch update pointer file: {exc}") from exc

    found = extract_archive_url(pointer_text, config.archive_url_pattern)
    if found is None:
        raise PointerFileError("no valid archive URL found in update pointer file")
    return found


def _fetch_archive_text(client: GDELTFeedClient, archive_url: str) -> str:
    try:
        return client.fetch_archive_text(archive_url)
    except FeedRequestError as exc:
        raise ArchiveError(f"failed to download archive: {exc}") from exc


def run_cycle(
    config: ViewerConfig,
    client: GDELTFeedClient,
    now: Optional[datetime] = None,
    color_mode: Optional[str] = None,
) -> CycleResult:
    """Run one complete fetch-and-process cycle.

    Never raises: every failure becomes a FAILED result whose snapshot holds a
    single error row.

    Args:
        config: Viewer configuration (sources, pointer URL, rendering options).
        client: Feed client used for every HTTP request.
        now: Fetch time recorded on the snapshot; defaults to the wall clock.
        color_mode: Overrides ``config.color_mode`` for this cycle.

    Returns:
        CycleResult with the snapshot to publish.
    """
    fetched_at = now or utcnow()
    context = CycleContext(config=config, cycle_id=_make_cycle_id(fetched_at))
    context.start_time = utcnow()
    cycle_log = get_run_logger(__name__, context.cycle_id)
    cycle_log.info("Starting fetch cycle (%s)", config.lastupdate_url)

    try:
        context.reference = _run_phase(
            context, "reference", lambda: load_reference_data(config, client)
        )

        archive_url, digits = _run_phase(
            context, "pointer", lambda: _fetch_archive_url(config, client)
        )
        context.archive_url = archive_url
        cycle_log.info("Latest archive: %s", archive_url)

        context.csv_text = _run_phase(
            context, "archive", lambda: _fetch_archive_text(client, archive_url)
        )

        resolver = GeoResolver(context.reference.countries)
        context.events = _run_phase(
            context, "parse", lambda: parse_events(context.csv_text, resolver)
        )

        snapshot = _run_phase(
            context,
            "aggregate",
            lambda: build_snapshot(
                context.events,
                context.reference,
                color_mode=color_mode or config.color_mode,
                point_size=config.point_size,
                archive_url=archive_url,
                file_timestamp=parse_feed_timestamp(digits),
                fetched_at=fetched_at,
            ),
        )
    except FeedCycleError as exc:
        cycle_log.error("Fetch cycle failed at %s stage: %s", exc.stage, exc)
        return _finalise(context, build_error_snapshot(str(exc), fetched_at), error=str(exc))
    except Exception as exc:
        cycle_log.exception("Fetch cycle raised unhandled exception: %s", exc)
        return _finalise(context, build_error_snapshot(str(exc), fetched_at), error=str(exc))

    cycle_log.info(
        "Cycle complete: %d events, %d arcs, %d points, %d table rows",
        len(snapshot.events),
        len(snapshot.arcs),
        len(snapshot.points),
        len(snapshot.table_rows),
    )
    if snapshot.status == CycleStatus.EMPTY:
        cycle_log.warning("No renderable events in %s", archive_url)
    return _finalise(context, snapshot)


def _finalise(
    context: CycleContext,
    snapshot: RenderSnapshot,
    error: Optional[str] = None,
) -> CycleResult:
    """Record the cycle end time and wrap the snapshot in a CycleResult."""
    context.end_time = utcnow()
    elapsed = (context.end_time - context.start_time).total_seconds() if context.start_time else 0.0
    logger.info(
        "Cycle %s finished in %.1fs | status=%s | phases=%d",
        context.cycle_id,
        elapsed,
        snapshot.status,
        len(context.phase_log),
    )
    return CycleResult(
        cycle_id=context.cycle_id,
        snapshot=snapshot,
        status=snapshot.status,
        error=error,
        reference=context.reference if error is None else None,
        phase_log=list(context.phase_log),
    )


class EventViewer:
    """Owns the published snapshot, the view state and the re-fetch timer.

    The snapshot is immutable and swapped whole under a lock, so readers on
    other threads always see either the previous or the current cycle.
    Constructing a viewer applies the configured log level and log file.

    Args:
        config: Viewer configuration; defaults to ViewerConfig().
        client: Feed client; one is created (and closed on stop) when omitted.
        scheduler: Re-fetch scheduler; one wired to ``refresh`` is created when omitted.
    """

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        client: Optional[GDELTFeedClient] = None,
        scheduler: Optional[UpdateScheduler] = None,
    ) -> None:
        self.config = config or ViewerConfig()
        configure_logging(self.config.log_level, self.config.log_file)
        self._owns_client = client is None
        self._client = client or GDELTFeedClient(
            max_retries=self.config.max_retries,
            backoff_base=self.config.backoff_base,
            request_timeout=self.config.request_timeout,
        )
        self._scheduler = scheduler or UpdateScheduler(
            self.refresh,
            offset_minutes=self.config.next_update_offset_minutes,
            grace_seconds=self.config.update_grace_seconds,
            fallback_seconds=self.config.fallback_retry_seconds,
        )
        self._lock = threading.Lock()
        self._cycle_lock = threading.Lock()
        self._snapshot = RenderSnapshot(status=CycleStatus.EMPTY)
        self._reference: Optional[ReferenceData] = None
        self._view_state = ViewState(view_mode=self.config.view_mode, color_mode=self.config.color_mode)

    @property
    def snapshot(self) -> RenderSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def view_state(self) -> ViewState:
        with self._lock:
            return self._view_state

    @property
    def reference(self) -> Optional[ReferenceData]:
        with self._lock:
            return self._reference

    @property
    def scheduler(self) -> UpdateScheduler:
        return self._scheduler

    def start(self) -> Optional[CycleResult]:
        """Run the first cycle; later cycles follow on the scheduler."""
        return self.refresh()

    def stop(self) -> None:
        """Cancel the pending re-fetch and release the HTTP session."""
        self._scheduler.cancel()
        if self._owns_client:
            self._client.close()

    def refresh(self) -> Optional[CycleResult]:
        """Run one cycle, publish its snapshot and reschedule on success.

        Returns None without fetching when another cycle is still running.
        """
        if not self._cycle_lock.acquire(blocking=False):
            logger.info("Fetch cycle already in progress — skipping refresh")
            return None
        try:
            result = run_cycle(self.config, self._client, color_mode=self.view_state.color_mode)
            with self._lock:
                self._snapshot = result.snapshot
                if result.ok:
                    self._reference = result.reference
                    # The color mode may have changed while the cycle was fetching
                    if result.snapshot.color_mode != self._view_state.color_mode:
                        self._rebuild_locked()

            if result.ok:
                self._scheduler.schedule(result.snapshot.file_timestamp)
            else:
                # A failed cycle is not retried automatically
                self._scheduler.cancel()
            return result
        finally:
            self._cycle_lock.release()

    def _rebuild_locked(self) -> None:
        current = self._snapshot
        if self._reference is None or current.status == CycleStatus.FAILED:
            return
        self._snapshot = build_snapshot(
            current.events,
            self._reference,
            color_mode=self._view_state.color_mode,
            point_size=self.config.point_size,
            archive_url=current.archive_url,
            file_timestamp=current.file_timestamp,
            fetched_at=current.fetched_at,
        )

    def switch_view(self, view_mode: str) -> ViewState:
        """Switch 3D/2D; a real switch rebuilds every derived structure."""
        with self._lock:
            new_state = set_view_mode(self._view_state, view_mode)
            if new_state is not self._view_state:
                self._view_state = new_state
                self._rebuild_locked()
            return self._view_state

    def switch_color_mode(self, color_mode: str) -> ViewState:
        with self._lock:
            new_state = set_color_mode(self._view_state, color_mode)
            if new_state.color_mode != self._view_state.color_mode:
                self._view_state = new_state
                self._rebuild_locked()
            return self._view_state

    def toggle_region(self, region: str) -> ViewState:
        with self._lock:
            self._view_state = toggle_region(self._view_state, region)
            return self._view_state

    def focus_country(self, name_jp: str) -> ViewState:
        with self._lock:
            if self._reference is None:
                return self._view_state
            resolver = GeoResolver(self._reference.countries)
            self._view_state = focus_country(self._view_state, name_jp, resolver)
            return self._view_state

    def clear_focus(self) -> ViewState:
        with self._lock:
            self._view_state = clear_focus(self._view_state)
            return self._view_state

    def render_map(self, output_path: str | Path) -> Optional[Path]:
        """Write the current snapshot as a folium HTML map."""
        with self._lock:
            snapshot, reference, state = self._snapshot, self._reference, self._view_state
        return render_event_map(snapshot, reference, output_path, view_state=state)

    def globe_payload(self) -> dict:
        """The current snapshot in the globe front-end's JSON shape."""
        with self._lock:
            snapshot, state = self._snapshot, self._view_state
        return build_globe_payload(snapshot, view_state=state)

    def export(self, output_root: Optional[str] = None) -> Optional[Path]:
        """Write the current snapshot payload under ``output_root/<cycle>``."""
        with self._lock:
            snapshot, state = self._snapshot, self._view_state
        return export_snapshot(snapshot, output_root or self.config.output_root, view_state=state)

    def __enter__(self) -> "EventViewer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

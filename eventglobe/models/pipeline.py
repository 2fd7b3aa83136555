"""Fetch-cycle orchestration data models for the GDELT Event Globe.

Defines CycleContext (state threaded through one fetch cycle), PhaseRecord
(per-phase timing log) and CycleResult (what a cycle hands back).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, List, Optional

from config.settings import ViewerConfig

if TYPE_CHECKING:
    from eventglobe.models.render import RenderSnapshot


class CycleStatus:
    """Status codes used in PhaseRecord.status and CycleResult.status."""

    OK = "OK"
    EMPTY = "EMPTY"
    FAILED = "FAILED"


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


@dataclass
class PhaseRecord:
    """Timing and status record for a single cycle phase."""

    phase_name: str
    start_time: datetime
    end_time: Optional[datetime] = None
    status: str = CycleStatus.OK

    @property
    def elapsed_seconds(self) -> float:
        """Compute elapsed time in seconds."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()


@dataclass
class CycleContext:
    """State threaded through one fetch cycle.

    Each phase reads what earlier phases stored here and writes its own output.
    Nothing in the context outlives the cycle; a failed cycle's context is
    discarded wholesale.
    """

    config: ViewerConfig
    cycle_id: str

    # ── Phase outputs (populated progressively) ────────────────────────────────
    reference: Optional[Any] = None        # ReferenceData
    archive_url: str = ""
    csv_text: Optional[str] = None
    events: Optional[List[Any]] = None     # List[Event]

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    phase_log: List[PhaseRecord] = field(default_factory=list)

    def log_phase_start(self, phase_name: str) -> PhaseRecord:
        """Record the start of a cycle phase."""
        record = PhaseRecord(phase_name=phase_name, start_time=utcnow())
        self.phase_log.append(record)
        return record

    def log_phase_end(self, record: PhaseRecord, status: str = CycleStatus.OK) -> None:
        """Record the end of a cycle phase."""
        record.end_time = utcnow()
        record.status = status


@dataclass
class CycleResult:
    """Outcome of one fetch-and-process cycle."""

    cycle_id: str
    snapshot: "RenderSnapshot"
    status: str = CycleStatus.OK
    error: Optional[str] = None
    reference: Optional[Any] = None        # ReferenceData loaded by the cycle
    phase_log: List[PhaseRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != CycleStatus.FAILED

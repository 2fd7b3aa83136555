"""Exception types raised inside a fetch cycle.

Every stage failure is raised as a FeedCycleError subclass and caught at the
orchestrator boundary, where it becomes the single user-visible message.
"""

from __future__ import annotations

from typing import Optional


class FeedRequestError(Exception):
    """An HTTP request failed permanently (non-200 status or exhausted retries)."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"status {status_code}" if status_code is not None else (reason or "no response")
        super().__init__(f"request to {url} failed ({detail})")


class FeedCycleError(Exception):
    """Base class for errors that abort a fetch cycle."""

    stage = "cycle"


class ReferenceLoadError(FeedCycleError):
    """CAMEO, country or boundary reference data could not be loaded."""

    stage = "reference"


class PointerFileError(FeedCycleError):
    """The last-update pointer file was unreachable or held no archive URL."""

    stage = "pointer"


class ArchiveError(FeedCycleError):
    """The event archive could not be downloaded or decompressed."""

    stage = "archive"

"""Renderable output models for the GDELT Event Globe.

These are the structures handed to the rendering collaborator. They are
rebuilt from scratch on every fetch cycle and every view-mode switch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple

from eventglobe.models.events import Event


@dataclass(frozen=True)
class RenderableArc:
    """A bilateral event drawn as an arc between two country coordinates."""

    start_lat: float
    start_lng: float
    end_lat: float
    end_lng: float
    event: Event
    index: int            # Position of the event in the parsed event list
    color: str = ""
    label: str = ""


@dataclass(frozen=True)
class RenderablePoint:
    """A single-actor event drawn as a point, jittered when co-located."""

    lat: float
    lng: float
    size: float
    color: str
    label: str
    event: Event
    index: int


@dataclass(frozen=True)
class TableRow:
    """View-model for one row of the event table.

    An error row has ``error`` set and every other field empty; the renderer
    draws it as a single cell spanning all table columns.
    """

    date: str = ""
    actor_summary: str = ""
    event_label: str = ""
    source_link: Optional[str] = None
    actor_action: str = ""
    category_label: str = ""
    background_color: str = "transparent"
    index: int = -1
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RenderSnapshot:
    """Immutable result of one fetch cycle, swapped whole into the viewer."""

    events: Tuple[Event, ...] = ()
    arcs: Tuple[RenderableArc, ...] = ()
    points: Tuple[RenderablePoint, ...] = ()
    country_colors: Dict[str, str] = field(default_factory=dict)
    table_rows: Tuple[TableRow, ...] = ()
    archive_url: str = ""
    file_timestamp: Optional[datetime] = None
    fetched_at: Optional[datetime] = None
    color_mode: str = "category"
    status: str = "OK"            # "OK", "EMPTY", "FAILED"
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status != "FAILED"

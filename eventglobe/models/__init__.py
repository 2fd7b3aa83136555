"""GDELT Event Globe data models package.

All stage input/output schemas are defined here as typed dataclasses.
Never hand raw column lists or dicts to the rendering collaborator.
"""

from eventglobe.models.events import Actor, Event
from eventglobe.models.pipeline import CycleContext, CycleResult, CycleStatus, PhaseRecord
from eventglobe.models.reference import CameoEntry, GeoEntry, ReferenceData
from eventglobe.models.render import RenderableArc, RenderablePoint, RenderSnapshot, TableRow

__all__ = [
    # events
    "Actor",
    "Event",
    # reference
    "CameoEntry",
    "GeoEntry",
    "ReferenceData",
    # render
    "RenderableArc",
    "RenderablePoint",
    "RenderSnapshot",
    "TableRow",
    # pipeline
    "CycleContext",
    "CycleResult",
    "CycleStatus",
    "PhaseRecord",
]

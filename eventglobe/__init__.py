"""GDELT Event Globe — live GDELT 2.0 event feed to renderable globe data.

Public API surface:
    - ViewerConfig: Runtime configuration
    - run_cycle: One fetch-parse-aggregate cycle returning a RenderSnapshot
    - EventViewer: Owns the current snapshot, view state and re-fetch timer
"""

__version__ = "1.0.0"
__author__ = "GDELT Event Globe Contributors"

from config.settings import ViewerConfig
from eventglobe.pipeline import EventViewer, build_snapshot, run_cycle

__all__ = [
    "__version__",
    "ViewerConfig",
    "EventViewer",
    "build_snapshot",
    "run_cycle",
]

"""Top-level package exports.

Public API surface (keep minimal):
 - MainWindow (UI entry point)
 - EditingSession (per-video editing state)
 - calculate, PartitionPoint (partition point calculator)
 - TimeInterval, ExclusionEditor (exclusion model and editor)
"""

from .core.editor import ExclusionEditor  # noqa: F401
from .core.intervals import TimeInterval  # noqa: F401
from .core.partition import PartitionPoint, calculate  # noqa: F401
from .core.session import EditingSession  # noqa: F401
from .ui.main_window import MainWindow  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "MainWindow",
    "EditingSession",
    "calculate",
    "PartitionPoint",
    "TimeInterval",
    "ExclusionEditor",
]

"""heapstep: heap-sort as a narrated, one-step-at-a-time simulation.

The :class:`SiftEngine` breaks in-place heap-sort into atomic steps
(one comparison-and-maybe-swap, one extraction, or one phase change)
and records a human-readable :class:`StepRecord` for each.  Rendering
and pacing are left to the caller; :mod:`heapstep.driver` holds small
reference drivers for batch and timed playback.
"""
from .record import HeapOrder, Phase, StepKind, StepRecord
from .errors import InvariantViolation, HistoryIndexError
from .settings import Settings, DEFAULT_SETTINGS
from .history import StepHistory
from .engine import SiftEngine, DEFAULT_VALUES
from .stats import RunStats, collect_stats
from .serialise import (
    record_to_dict, record_from_dict,
    history_to_json, history_from_json,
)
from .driver import run_to_completion, Autoplay

__version__ = "0.1.0"

__all__ = [
    # Data types
    "HeapOrder", "Phase", "StepKind", "StepRecord",
    # Errors
    "InvariantViolation", "HistoryIndexError",
    # Configuration
    "Settings", "DEFAULT_SETTINGS",
    # Core
    "SiftEngine", "DEFAULT_VALUES", "StepHistory",
    # Analysis & export
    "RunStats", "collect_stats",
    "record_to_dict", "record_from_dict",
    "history_to_json", "history_from_json",
    # Drivers
    "run_to_completion", "Autoplay",
]

"""
engine/
-------
Replay, control & recording layer.

    from engine import ModeController, ReplayEngine, Recorder, compare
"""

from engine.errors     import SortVizError, ConfigurationError, InvariantViolation
from engine.replay     import (
    ReplayEngine,
    ReplayState,
    Counters,
    AnimationDescriptor,
    Snapshot,
    SPEED_PRESETS,
)
from engine.controller import ModeController, MAX_TASKS, DEFAULT_ARRAY_SIZE
from engine.recorder   import Recorder, RunMetrics, ComparisonResult, compare

__all__ = [
    "SortVizError",
    "ConfigurationError",
    "InvariantViolation",
    "ReplayEngine",
    "ReplayState",
    "Counters",
    "AnimationDescriptor",
    "Snapshot",
    "SPEED_PRESETS",
    "ModeController",
    "MAX_TASKS",
    "DEFAULT_ARRAY_SIZE",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
]

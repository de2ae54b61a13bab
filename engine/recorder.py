"""
recorder.py — Run Recorder & Analytics
========================================
Replays a complete ActionLog headlessly, then computes the analytics the
UI needs for the stats panel and Comparison Mode.

Usage:
    rec = Recorder()
    rec.start(mode="merge", values=[5, 3, 9, 1])
    metrics = rec.run_to_completion()   # exhausts the log
    rec.export()                        # serialisable snapshot

Comparison Mode:
    The UI holds two Recorders (one per mode), runs both to completion
    on the SAME values, then calls compare(rec1, rec2) → ComparisonResult.
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from algorithms import ActionKind, ActionLog, AlgoInfo, get_algorithm
from engine.controller import MAX_TASKS, clamp_tasks
from engine.errors import ConfigurationError
from engine.replay import ReplayEngine


# ---------------------------------------------------------------------------
# Metrics dataclass: what the analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    mode:          str   = ""
    label:         str   = ""
    size:          int   = 0
    task_count:    int   = 1
    comparisons:   int   = 0
    operations:    int   = 0          # swaps + writes
    swaps:         int   = 0
    writes:        int   = 0
    peak_memory:   int   = 0          # bytes, as observed during replay
    log_peak:      int   = 0          # bytes, max memory_bytes reported in the log
    merge_phases:  int   = 0
    total_actions: int   = 0
    wall_time_ms:  float = 0.0        # wall-clock time to replay to completion
    sorted_ok:     bool  = False


@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_comparisons: str = ""      # which mode compared less
    winner_operations:  str = ""
    winner_memory:      str = ""


def log_peak_memory(log: ActionLog) -> int:
    """Peak scratch bytes recoverable from the log alone."""
    return max((a.memory_bytes for a in log), default=0)


def kind_counts(log: ActionLog) -> Dict[ActionKind, int]:
    return dict(Counter(a.kind for a in log))


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        log     : The ActionLog of the run.
        metrics : Computed RunMetrics (available after run_to_completion).
        engine  : The underlying ReplayEngine.
    """

    def __init__(self):
        self.log:     ActionLog              = ()
        self.metrics: Optional[RunMetrics]   = None
        self.engine:  Optional[ReplayEngine] = None

        self._algo_info:  Optional[AlgoInfo] = None
        self._values:     List[int]          = []
        self._tasks:      int                = 1

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, mode: str, values: Sequence[int], task_count: int = MAX_TASKS) -> None:
        """Generate the log and attach a fresh engine for this run."""
        info = get_algorithm(mode)
        if info is None:
            raise ConfigurationError(f"Unknown algorithm: {mode}")

        self._algo_info = info
        self._values    = list(values)
        self._tasks     = clamp_tasks(task_count, len(self._values)) if info.is_parallel else 1
        self.metrics    = None

        self.log    = info.generate(self._values, task_count=self._tasks)
        self.engine = ReplayEngine(
            self._values, self.log, parallel=info.is_parallel, task_count=self._tasks,
        )

    def run_to_completion(self) -> RunMetrics:
        """Apply every action, then compute metrics."""
        if self.engine is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.engine.run_to_completion()
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "mode":       self._algo_info.key if self._algo_info else "",
            "values":     list(self._values),
            "task_count": self._tasks,
            "metrics":    self.metrics.__dict__ if self.metrics else {},
            "actions": [
                {
                    "kind":         a.kind.value,
                    "i":            a.i,
                    "j":            a.j,
                    "value":        a.value,
                    "memory_bytes": a.memory_bytes,
                    "temp_slot":    a.temp_slot,
                    "task_id":      a.task_id,
                }
                for a in self.log
            ],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info     = self._algo_info
        engine   = self.engine
        counts   = kind_counts(self.log)
        final    = engine.values()
        counters = engine.counters

        return RunMetrics(
            mode=info.key if info else "",
            label=info.label if info else "",
            size=len(self._values),
            task_count=self._tasks,
            comparisons=counters.comparisons,
            operations=counters.operations,
            swaps=counts.get(ActionKind.SWAP, 0),
            writes=counts.get(ActionKind.WRITE, 0),
            peak_memory=counters.peak_memory,
            log_peak=log_peak_memory(self.log),
            merge_phases=counts.get(ActionKind.MERGE_PHASE, 0),
            total_actions=len(self.log),
            wall_time_ms=round(wall_ms, 2),
            sorted_ok=final == sorted(self._values),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    # lower is better for every metric shown
    def fewer(attr: str) -> str:
        l_val, r_val = getattr(l, attr), getattr(r, attr)
        if l_val == r_val:
            return "tie"
        return l.label if l_val < r_val else r.label

    return ComparisonResult(
        left=l,
        right=r,
        winner_comparisons=fewer("comparisons"),
        winner_operations =fewer("operations"),
        winner_memory     =fewer("peak_memory"),
    )

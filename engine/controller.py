"""
controller.py — Mode Controller
================================
Owns the canonical initial values, picks the generator for the active
mode and rebuilds the ReplayEngine wholesale whenever the mode, the
task count or the values change.

    ctl = ModeController(size=12, mode="merge", seed=7)
    ctl.tick(dt)                 # from the host loop
    ctl.set_mode("bubble")       # same values, fresh log, fresh engine
    ctl.reset()                  # fresh values, same mode
    view = ctl.snapshot()

Regeneration builds the new log and engine first and only then swaps
them in, so callers never see a half-reset state.

Every public method holds `lock`, so the engine has one mutator at a
time even when a threaded host calls in from several requests.  The
lock is re-entrant: a host can hold it across a mutation and the
snapshot that follows it.
"""

import logging
import random
import threading
from dataclasses import replace
from typing import List, Optional, Sequence

from algorithms import AlgoInfo, ActionLog, get_algorithm
from engine.errors import ConfigurationError
from engine.replay import SPEED_PRESETS, ReplayEngine, Snapshot

logger = logging.getLogger(__name__)


DEFAULT_ARRAY_SIZE = 12
DEFAULT_MODE       = "merge"
DEFAULT_SPEED      = "medium"
MAX_TASKS          = 8
MIN_VALUE          = 1
MAX_VALUE          = 1000


def draw_values(size: int, rng: random.Random) -> List[int]:
    """N values drawn uniformly from [MIN_VALUE, MAX_VALUE]."""
    return [rng.randint(MIN_VALUE, MAX_VALUE) for _ in range(size)]


def clamp_tasks(requested: int, size: int) -> int:
    if requested <= 0:
        raise ConfigurationError(f"task count must be positive, got {requested}")
    return max(1, min(requested, MAX_TASKS, size))


class ModeController:
    """
    Attributes:
        mode           : Active registry key.
        initial_values : Canonical input; never mutated by replay.
        task_count     : Requested task count (before clamping).
        log            : ActionLog of the current run.
        engine         : ReplayEngine replaying `log`.
        lock           : Re-entrant lock serialising every mutation.
    """

    def __init__(
        self,
        size: int = DEFAULT_ARRAY_SIZE,
        mode: str = DEFAULT_MODE,
        task_count: int = MAX_TASKS,
        seed: Optional[int] = None,
        values: Optional[Sequence[int]] = None,
    ):
        if values is None and size <= 0:
            raise ConfigurationError(f"array size must be positive, got {size}")
        if task_count <= 0:
            raise ConfigurationError(f"task count must be positive, got {task_count}")

        self.lock        = threading.RLock()
        self._rng        = random.Random(seed)
        self._info       = self._lookup(mode)
        self.mode:       str = mode
        self.task_count: int = task_count
        self.speed:      str = DEFAULT_SPEED
        self.step_interval: float = SPEED_PRESETS[DEFAULT_SPEED]

        self.initial_values: List[int] = []
        self.log:    ActionLog    = ()
        self.engine: ReplayEngine = None  # type: ignore[assignment]

        if values is not None:
            self.load(values)
        else:
            self._install(draw_values(size, self._rng))

    # ------------------------------------------------------------------
    # Mode / values
    # ------------------------------------------------------------------
    def set_mode(self, mode: str) -> bool:
        """Switch algorithm on the same values.  Returns False if unchanged."""
        with self.lock:
            if mode == self.mode:
                return False
            info = self._lookup(mode)
            logger.info("mode change %s -> %s", self.mode, mode)
            self._install(self.initial_values, info=info)
            return True

    def reset(self) -> None:
        """Draw fresh values of the same size and restart the current mode."""
        with self.lock:
            size = len(self.initial_values)
            if size <= 0:
                raise ConfigurationError(f"array size must be positive, got {size}")
            logger.info("reset: drawing %d fresh values for %s", size, self.mode)
            self._install(draw_values(size, self._rng))

    def load(self, values: Sequence[int]) -> None:
        """Install caller-supplied initial values and restart."""
        values = list(values)
        if not values:
            raise ConfigurationError("array size must be positive, got 0")
        bad = [v for v in values if not (MIN_VALUE <= v <= MAX_VALUE)]
        if bad:
            raise ConfigurationError(
                f"values must lie in [{MIN_VALUE}, {MAX_VALUE}], got {bad[:5]}"
            )
        with self.lock:
            self._install(values)

    def set_task_count(self, count: int) -> bool:
        """
        Change the requested task count.  Regenerates only when the
        effective (clamped) count changes while in parallel mode.
        """
        with self.lock:
            before = self.effective_tasks
            after  = clamp_tasks(count, len(self.initial_values))
            if self._info.is_parallel and after != before:
                logger.info("task count %d -> %d, regenerating", before, after)
                self._install(self.initial_values, task_count=count)
                return True
            self.task_count = count
            return False

    # ------------------------------------------------------------------
    # Host pass-through
    # ------------------------------------------------------------------
    def tick(self, dt: float) -> bool:
        with self.lock:
            return self.engine.tick(dt)

    def step(self) -> bool:
        with self.lock:
            return self.engine.step()

    def toggle_play(self) -> bool:
        """Flip play/pause.  Returns True if the engine is now paused."""
        with self.lock:
            self.engine.toggle_play()
            return self.engine.is_paused

    def set_speed(self, preset: str) -> None:
        """Unknown presets fall back to the default speed."""
        if preset not in SPEED_PRESETS:
            preset = DEFAULT_SPEED
        with self.lock:
            self.engine.set_speed(preset)
            self.speed         = preset
            self.step_interval = self.engine.step_interval

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def info(self) -> AlgoInfo:
        return self._info

    @property
    def size(self) -> int:
        return len(self.initial_values)

    @property
    def effective_tasks(self) -> int:
        if not self._info.is_parallel:
            return 1
        return clamp_tasks(self.task_count, len(self.initial_values))

    def values_copy(self) -> List[int]:
        with self.lock:
            return list(self.initial_values)

    def snapshot(self) -> Snapshot:
        with self.lock:
            return replace(self.engine.snapshot(), extra={
                "mode":       self.mode,
                "label":      self._info.label,
                "task_count": self.effective_tasks,
                "parallel":   self._info.is_parallel,
            })

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _lookup(mode: str) -> AlgoInfo:
        info = get_algorithm(mode)
        if info is None:
            raise ConfigurationError(f"Unknown algorithm: {mode}")
        return info

    def _install(
        self,
        values: Sequence[int],
        info: Optional[AlgoInfo] = None,
        task_count: Optional[int] = None,
    ) -> None:
        info       = info or self._info
        task_count = task_count if task_count is not None else self.task_count
        values     = list(values)
        tasks      = clamp_tasks(task_count, len(values)) if info.is_parallel else 1
        log        = info.generate(values, task_count=tasks)
        engine     = ReplayEngine(
            values,
            log,
            parallel=info.is_parallel,
            task_count=tasks,
            step_interval=self.step_interval,
        )
        logger.debug("generated %d actions for %s (n=%d, tasks=%d)",
                     len(log), info.key, len(values), tasks)

        # swap in last so no half-built state is observable
        self._info          = info
        self.mode           = info.key
        self.task_count     = task_count
        self.initial_values = values
        self.log            = log
        self.engine         = engine

"""
replay.py — Action Replay Engine
=================================
The ReplayEngine is the ONLY object that mutates bar state.  It owns
the live bars, the temp regions, the counters and a cursor into an
immutable ActionLog, and it applies exactly one action per gated tick.

State machine:
    PLAYING  →  pause()                  →  PAUSED
    PAUSED   →  play()                   →  PLAYING
    any      →  DONE applied / log end   →  FINISHED   (terminal, idempotent)

Tick contract:
    tick(dt) accumulates dt against `step_interval`.  Below the interval
    nothing changes.  At or above it the accumulator resets and exactly
    one action is applied.  Before every action, all bars that are not
    SORTED go back to IDLE, so the visible marks always belong to the
    most recent action alone.

Lent bars:
    TEMP_PUSH copies a bar's value into a temp region and flags the bar
    as `vacated` until a WRITE lands on it.  The live multiset
    (non-vacated bars + every region) always equals the input.

Thread safety:
    Not thread-safe and never needs to be: simulated parallelism lives
    entirely in the log.  Drive it from one loop.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from algorithms.action import Action, ActionKind
from bars import Bar, BarState, TempRegion
from engine.errors import InvariantViolation

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class ReplayState(Enum):
    PLAYING  = "playing"
    PAUSED   = "paused"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (seconds per action)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   0.5,    # teaching mode
    "medium": 0.1,
    "fast":   0.03,
    "turbo":  0.005,  # demo mode
}

DEFAULT_STEP_INTERVAL = SPEED_PRESETS["medium"]
MIN_STEP_INTERVAL     = 0.001


# ---------------------------------------------------------------------------
# Counters: what the stats panel renders
# ---------------------------------------------------------------------------
@dataclass
class Counters:
    comparisons:         int   = 0
    operations:          int   = 0      # swaps + writes
    current_memory:      int   = 0      # bytes
    peak_memory:         int   = 0      # bytes, never decreases
    elapsed_time:        float = 0.0    # seconds of unpaused replay
    current_merge_level: int   = 0

    def to_dict(self) -> dict:
        return dict(self.__dict__)


# ---------------------------------------------------------------------------
# AnimationDescriptor: valid for the single tick that produced it
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnimationDescriptor:
    active:                   bool  = True
    source_index:             int   = 0
    target_index:             int   = 0
    source_height_normalized: float = 0.0
    is_temp_push:             bool  = False
    temp_target_index:        int   = 0
    task_id:                  int   = 0

    def to_dict(self) -> dict:
        return dict(self.__dict__)


# ---------------------------------------------------------------------------
# Snapshot: read-only view handed to the presentation layer
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Snapshot:
    values:       Tuple[int, ...]
    states:       Tuple[BarState, ...]
    task_ids:     Tuple[Optional[int], ...]
    vacated:      Tuple[bool, ...]
    max_value:    int
    counters:     Counters
    animation:    Optional[AnimationDescriptor]
    temp_regions: Tuple[Tuple[int, ...], ...]
    cursor:       int
    total:        int
    finished:     bool
    paused:       bool
    last_kind:    Optional[ActionKind] = None
    extra:        Dict[str, object]    = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "bars": [
                {"value": v, "state": s.value, "task_id": t, "vacated": h}
                for v, s, t, h in zip(self.values, self.states, self.task_ids, self.vacated)
            ],
            "max_value":    self.max_value,
            "counters":     self.counters.to_dict(),
            "animation":    self.animation.to_dict() if self.animation else None,
            "temp_regions": [list(r) for r in self.temp_regions],
            "cursor":       self.cursor,
            "total":        self.total,
            "finished":     self.finished,
            "paused":       self.paused,
            "last_kind":    self.last_kind.value if self.last_kind else None,
            **self.extra,
        }


# ---------------------------------------------------------------------------
# ReplayEngine
# ---------------------------------------------------------------------------
class ReplayEngine:
    """
    Attributes:
        bars          : Live bars, mirroring the input 1:1.
        regions       : One TempRegion per task (parallel) or a single one.
        actions       : The immutable ActionLog being replayed.
        cursor        : Index of the next action to apply.
        counters      : Running Counters.
        animation     : Descriptor of the last TEMP_PUSH / WRITE, else None.
        state         : Current ReplayState.
        step_interval : Seconds that must accrue before the next action.
    """

    def __init__(
        self,
        values: Sequence[int],
        actions: Sequence[Action],
        parallel: bool = False,
        task_count: int = 1,
        step_interval: float = DEFAULT_STEP_INTERVAL,
    ):
        self.bars:      List[Bar]        = [Bar(v) for v in values]
        self.vacated:   List[bool]       = [False] * len(self.bars)
        self.actions:   Tuple[Action, ...] = tuple(actions)
        self.parallel:  bool             = parallel
        n_regions = max(1, task_count) if parallel else 1
        self.regions:   List[TempRegion] = [TempRegion(t) for t in range(n_regions)]
        self.max_value: int              = max(values, default=0) or 1

        self.cursor:        int                           = 0
        self.counters:      Counters                      = Counters()
        self.animation:     Optional[AnimationDescriptor] = None
        self.last_action:   Optional[Action]              = None
        self.state:         ReplayState                   = ReplayState.PLAYING
        self.step_interval: float                         = step_interval

        self._accumulator: float = 0.0

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state == ReplayState.FINISHED:
            return
        self.state = ReplayState.PLAYING

    def pause(self) -> None:
        if self.state == ReplayState.FINISHED:
            return
        self.state = ReplayState.PAUSED

    def toggle_play(self) -> None:
        if self.state == ReplayState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.step_interval = SPEED_PRESETS.get(preset, DEFAULT_STEP_INTERVAL)

    def set_speed_value(self, seconds: float) -> None:
        self.step_interval = max(MIN_STEP_INTERVAL, seconds)

    # ------------------------------------------------------------------
    # Tick  (call this from your main loop)
    # ------------------------------------------------------------------
    def tick(self, dt: float) -> bool:
        """
        Accumulate `dt` seconds.  Returns True if an action was applied.
        """
        if self.state != ReplayState.PLAYING:
            return False

        self.counters.elapsed_time += dt
        self._accumulator += dt
        if self._accumulator < self.step_interval:
            return False

        self._accumulator = 0.0
        self._apply_next()
        return True

    def step(self) -> bool:
        """Apply one action right now, ignoring the time gate and pause."""
        if self.is_finished:
            return False
        self._apply_next()
        return True

    def run_to_completion(self) -> int:
        """Apply every remaining action.  Returns how many were applied."""
        applied = 0
        while self.step():
            applied += 1
        return applied

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_finished(self) -> bool:
        return self.state == ReplayState.FINISHED

    @property
    def is_paused(self) -> bool:
        return self.state == ReplayState.PAUSED

    @property
    def total_actions(self) -> int:
        return len(self.actions)

    @property
    def current_action(self) -> Optional[Action]:
        return self.last_action

    def values(self) -> List[int]:
        return [bar.value for bar in self.bars]

    def live_values(self) -> List[int]:
        """Values held right now: bars not lent to a region, plus every region."""
        held = [bar.value for bar, lent in zip(self.bars, self.vacated) if not lent]
        for region in self.regions:
            held.extend(region.values)
        return held

    def temp_contents(self) -> List[List[int]]:
        return [region.contents() for region in self.regions]

    def snapshot(self) -> Snapshot:
        return Snapshot(
            values=tuple(bar.value for bar in self.bars),
            states=tuple(bar.state for bar in self.bars),
            task_ids=tuple(bar.task_id for bar in self.bars),
            vacated=tuple(self.vacated),
            max_value=self.max_value,
            counters=replace(self.counters),
            animation=self.animation,
            temp_regions=tuple(tuple(region.values) for region in self.regions),
            cursor=self.cursor,
            total=len(self.actions),
            finished=self.is_finished,
            paused=self.is_paused,
            last_kind=self.last_action.kind if self.last_action else None,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _apply_next(self) -> None:
        if self.cursor >= len(self.actions):
            raise self._violation(
                f"cursor {self.cursor} beyond log length {len(self.actions)}"
            )

        action = self.actions[self.cursor]

        for bar in self.bars:
            bar.clear_mark()
        self.animation = None

        handler = self._HANDLERS[action.kind]
        handler(self, action)

        self.cursor += 1
        self.last_action = action
        if action.kind == ActionKind.DONE or self.cursor == len(self.actions):
            self.state = ReplayState.FINISHED

    # -- per-kind effects --
    def _on_compare(self, a: Action) -> None:
        self.counters.comparisons += 1
        task = self._task(a)
        self._bar(a.i).mark(BarState.COMPARING, task)
        self._bar(a.j).mark(BarState.COMPARING, task)

    def _on_swap(self, a: Action) -> None:
        self.counters.operations += 1
        left, right = self._bar(a.i), self._bar(a.j)
        left.value, right.value = right.value, left.value
        task = self._task(a)
        left.mark(BarState.SWAPPING, task)
        right.mark(BarState.SWAPPING, task)

    def _on_temp_push(self, a: Action) -> None:
        source = self._bar(a.i)
        region = self._region(a)
        region.push(a.value)
        region.nbytes = a.memory_bytes
        self.vacated[a.i] = True
        source.mark(BarState.SOURCING, self._task(a))

        if self.parallel:
            self._set_memory(sum(r.nbytes for r in self.regions))
        else:
            self._set_memory(a.memory_bytes)

        self.animation = AnimationDescriptor(
            active=True,
            source_index=a.i,
            target_index=a.temp_slot,
            source_height_normalized=a.value / self.max_value,
            is_temp_push=True,
            temp_target_index=a.temp_slot,
            task_id=a.task_id,
        )

    def _on_write(self, a: Action) -> None:
        target = self._bar(a.i)
        region = self._region(a)
        if not region.values:
            raise self._violation(
                f"write to bar {a.i} from empty temp region {region.task_id}"
            )
        if region.values[0] != a.value:
            raise self._violation(
                f"write to bar {a.i} carries {a.value}, "
                f"region {region.task_id} holds {region.values[0]}"
            )
        value = region.pop_oldest()
        self.counters.operations += 1
        target.value = value
        self.vacated[a.i] = False
        target.mark(BarState.SWAPPING, self._task(a))

        self.animation = AnimationDescriptor(
            active=True,
            source_index=a.temp_slot,
            target_index=a.i,
            source_height_normalized=value / self.max_value,
            is_temp_push=False,
            temp_target_index=a.temp_slot,
            task_id=a.task_id,
        )

    def _on_temp_clear(self, a: Action) -> None:
        self._region(a).clear()
        self.counters.current_memory = sum(r.nbytes for r in self.regions)

    def _on_merge_phase(self, a: Action) -> None:
        self.counters.current_merge_level = a.value

    def _on_settle(self, a: Action) -> None:
        self._bar(a.i).mark_sorted()

    def _on_done(self, a: Action) -> None:
        self.counters.current_memory = 0
        for region in self.regions:
            region.clear()
        for bar in self.bars:
            bar.mark_sorted()

    _HANDLERS = {
        ActionKind.COMPARE:     _on_compare,
        ActionKind.SWAP:        _on_swap,
        ActionKind.TEMP_PUSH:   _on_temp_push,
        ActionKind.WRITE:       _on_write,
        ActionKind.TEMP_CLEAR:  _on_temp_clear,
        ActionKind.MERGE_PHASE: _on_merge_phase,
        ActionKind.SETTLE:      _on_settle,
        ActionKind.DONE:        _on_done,
    }

    # -- helpers --
    def _task(self, a: Action) -> Optional[int]:
        return a.task_id if self.parallel else None

    def _bar(self, idx: int) -> Bar:
        if not 0 <= idx < len(self.bars):
            raise self._violation(
                f"action {self.cursor} touches bar {idx}, only {len(self.bars)} exist"
            )
        return self.bars[idx]

    def _region(self, a: Action) -> TempRegion:
        if not self.parallel:
            return self.regions[0]
        if not 0 <= a.task_id < len(self.regions):
            raise self._violation(
                f"action {self.cursor} owned by task {a.task_id}, only {len(self.regions)} regions"
            )
        return self.regions[a.task_id]

    def _set_memory(self, nbytes: int) -> None:
        self.counters.current_memory = nbytes
        if nbytes > self.counters.peak_memory:
            self.counters.peak_memory = nbytes

    def _violation(self, message: str) -> InvariantViolation:
        logger.error("replay invariant violated: %s", message)
        return InvariantViolation(message)

"""
action.py — Atomic Sort Action
===============================
Every sort generator produces an ActionLog: a tuple of Action records.
An Action is one atomic, typed step of the sort's execution trace:

    • COMPARE     – bars i and j are compared
    • SWAP        – bars i and j exchange values
    • TEMP_PUSH   – the value at bar i is copied into a scratch region
    • WRITE       – the oldest scratch value is written back to bar i
    • TEMP_CLEAR  – a merge finished, its scratch region is emptied
    • MERGE_PHASE – a new tournament round starts (value = round number)
    • SETTLE      – bar i holds its final value
    • DONE        – the run is over (exactly one, always last)

Design decisions:
  - Action is a frozen dataclass.  Logs are built once and replayed
    many times; nothing downstream may edit them.
  - `memory_bytes` is the scratch memory the emitting task had allocated
    when the action was produced, so peak usage can be read off the log.
  - `task_id` is the logical owner used for coloring in parallel mode.
    It is 0 for every action of a sequential run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


# ---------------------------------------------------------------------------
# Action kinds: closed set
# ---------------------------------------------------------------------------
class ActionKind(Enum):
    COMPARE     = "compare"
    SWAP        = "swap"
    WRITE       = "write"
    TEMP_PUSH   = "temp_push"
    TEMP_CLEAR  = "temp_clear"
    MERGE_PHASE = "merge_phase"
    SETTLE      = "settle"
    DONE        = "done"


# bytes per scratch element (u32)
ELEMENT_SIZE = 4


@dataclass(frozen=True)
class Action:
    """
    Attributes:
        kind         : ActionKind of this step.
        i            : Primary bar index (source for TEMP_PUSH, target for WRITE).
        j            : Secondary bar index (COMPARE / SWAP only).
        value        : Carried value (pushed / written value, merge round, settled value).
        memory_bytes : Scratch bytes allocated by the emitting task at this instant.
        temp_slot    : Position inside the scratch region (TEMP_PUSH).
        task_id      : Logical owner of the action.
    """

    kind:         ActionKind
    i:            int = 0
    j:            int = 0
    value:        int = 0
    memory_bytes: int = 0
    temp_slot:    int = 0
    task_id:      int = 0


ActionLog = Tuple[Action, ...]


def done_action() -> Action:
    return Action(kind=ActionKind.DONE)


# ---------------------------------------------------------------------------
# Convenience builder so generators don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class ActionBuilder:
    """
    Mutable scratch-pad that generators use to emit Actions cleanly.

    It remembers the owning task, the offset that maps local indices to
    global bar indices, and the task's running scratch-memory counter.

    Usage inside a generator:
        ab = ActionBuilder(task_id=2, offset=16)
        ab.compare(0, 1)          # emitted as Compare(16, 17, task_id=2)
        log = ab.build()
    """

    def __init__(self, task_id: int = 0, offset: int = 0):
        self.task_id: int = task_id
        self.offset:  int = offset
        self.reset()

    def reset(self):
        self.actions: List[Action] = []
        self.memory:  int          = 0

    # -- memory accounting --
    def allocate(self, elements: int) -> int:
        nbytes = elements * ELEMENT_SIZE
        self.memory += nbytes
        return nbytes

    def release(self, nbytes: int) -> None:
        self.memory -= nbytes

    # -- emitters --
    def emit(self, kind: ActionKind, i: int = 0, j: Optional[int] = None, value: int = 0,
             temp_slot: int = 0, local: bool = True) -> Action:
        # j only means something for pairwise kinds; others leave it at 0
        if local:
            i += self.offset
            j = 0 if j is None else j + self.offset
        elif j is None:
            j = 0
        action = Action(
            kind=kind,
            i=i,
            j=j,
            value=value,
            memory_bytes=self.memory,
            temp_slot=temp_slot,
            task_id=self.task_id,
        )
        self.actions.append(action)
        return action

    def compare(self, i: int, j: int) -> Action:
        return self.emit(ActionKind.COMPARE, i, j)

    def swap(self, i: int, j: int) -> Action:
        return self.emit(ActionKind.SWAP, i, j)

    def temp_push(self, source: int, value: int, slot: int) -> Action:
        return self.emit(ActionKind.TEMP_PUSH, source, value=value, temp_slot=slot)

    def write(self, target: int, value: int) -> Action:
        return self.emit(ActionKind.WRITE, target, value=value)

    def temp_clear(self) -> Action:
        # i / j are meaningless here; keep them at 0 instead of the offset
        return self.emit(ActionKind.TEMP_CLEAR, local=False)

    def settle(self, index: int, value: int) -> Action:
        return self.emit(ActionKind.SETTLE, index, index, value=value)

    def build(self) -> ActionLog:
        return tuple(self.actions)

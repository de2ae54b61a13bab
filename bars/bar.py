"""
bar.py — One Sequence Element
==============================
A Bar is the visual / logical twin of one value in the sequence being
sorted.  Only the replay engine writes to bars; the renderer reads them.
"""

from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Bar State Enum: maps 1-to-1 with the visual encoding palette
# ---------------------------------------------------------------------------
class BarState(Enum):
    IDLE       = "idle"         # default grey
    COMPARING  = "comparing"    # amber: pair under comparison RIGHT NOW
    SWAPPING   = "swapping"     # red: value just changed
    SOURCING   = "sourcing"     # cyan: value being copied into a temp region
    SORTED     = "sorted"       # green: final position, sticky until reset
    TASK_OWNED = "task_owned"   # task colour: touched by a simulated task this tick


class Bar:
    """
    Attributes:
        value   : Current integer value (1..1000).
        state   : BarState for visual encoding.
        task_id : Owning task when state is TASK_OWNED, else None.
    """

    __slots__ = ("value", "state", "task_id")

    def __init__(self, value: int, state: BarState = BarState.IDLE, task_id: Optional[int] = None):
        self.value:   int           = value
        self.state:   BarState      = state
        self.task_id: Optional[int] = task_id

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    @property
    def is_sorted(self) -> bool:
        return self.state == BarState.SORTED

    def clear_mark(self) -> None:
        """Back to IDLE unless already SORTED."""
        if self.state != BarState.SORTED:
            self.state   = BarState.IDLE
            self.task_id = None

    def mark(self, state: BarState, task_id: Optional[int] = None) -> None:
        """Apply a transient mark; SORTED bars keep their state."""
        if self.state == BarState.SORTED:
            return
        if task_id is not None:
            self.state   = BarState.TASK_OWNED
            self.task_id = task_id
        else:
            self.state   = state
            self.task_id = None

    def mark_sorted(self) -> None:
        self.state   = BarState.SORTED
        self.task_id = None

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "value":   self.value,
            "state":   self.state.value,
            "task_id": self.task_id,
        }

    def __repr__(self) -> str:
        return f"Bar(value={self.value}, state={self.state.value}, task={self.task_id})"

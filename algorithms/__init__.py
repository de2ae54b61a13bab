"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every sort the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict keyed by mode:
    {
        "bubble": AlgoInfo(key, label, fn, pseudocode, kind_lines, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and UI both consume it,
so adding a new sort is: write the generator, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

# ---------------------------------------------------------------------------
# Import all generator modules
# ---------------------------------------------------------------------------
from algorithms.action         import Action, ActionKind, ActionLog, ActionBuilder, ELEMENT_SIZE
from algorithms.bubble         import bubble_sort_actions         as _bubble,   PSEUDOCODE as _bubble_pc, KIND_LINES as _bubble_kl
from algorithms.merge          import merge_sort_actions          as _merge,    PSEUDOCODE as _merge_pc,  KIND_LINES as _merge_kl
from algorithms.parallel_merge import parallel_merge_sort_actions as _pmerge,   PSEUDOCODE as _pmerge_pc, KIND_LINES as _pmerge_kl
from algorithms.interleave     import interleave


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each sort
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                        # registry key, e.g. "merge"
    label:            str                        # human label, e.g. "Merge Sort"
    fn:               Callable[..., ActionLog]   # the log generator
    pseudocode:       List[str]                  # lines for the side-panel
    kind_lines:       Dict[ActionKind, int] = field(default_factory=dict)  # action kind → pseudocode line
    tags:             List[str] = field(default_factory=list)
    is_parallel:      bool     = False           # takes a task count, one temp region per task
    uses_temp:        bool     = False           # emits TEMP_PUSH / WRITE
    complexity_time:  str      = ""
    complexity_space: str      = ""
    description:      str      = ""

    def generate(self, values, task_count: int = 1) -> ActionLog:
        """Build the ActionLog for `values`, passing the task count only where accepted."""
        if self.is_parallel:
            return self.fn(values, task_count=task_count)
        return self.fn(values)

    def line_for(self, kind: Optional[ActionKind]) -> int:
        if kind is None:
            return -1
        return self.kind_lines.get(kind, -1)


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", fn=_bubble,
        pseudocode=_bubble_pc, kind_lines=_bubble_kl,
        tags=["in-place", "stable", "quadratic"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Adjacent swaps float the largest value to the end each pass.",
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", fn=_merge,
        pseudocode=_merge_pc, kind_lines=_merge_kl,
        tags=["stable", "divide-and-conquer", "scratch-memory"],
        uses_temp=True,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Recursively halves the array, then merges runs through a scratch buffer.",
    ),

    "parallel_merge": AlgoInfo(
        key="parallel_merge", label="Parallel Merge Sort", fn=_pmerge,
        pseudocode=_pmerge_pc, kind_lines=_pmerge_kl,
        tags=["stable", "divide-and-conquer", "scratch-memory", "parallel"],
        is_parallel=True, uses_temp=True,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Tasks sort their own chunks side by side, then merge pairwise in rounds.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered sorts in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "Action",
    "ActionKind",
    "ActionLog",
    "ActionBuilder",
    "ELEMENT_SIZE",
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "interleave",
]

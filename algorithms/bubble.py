"""
bubble.py — Bubble Sort
========================
Classic adjacent-comparison bubble sort, recorded as an ActionLog.

Emits:
  1. COMPARE(j, j+1) before every comparison
  2. SWAP(j, j+1) only when the pair is out of order
  3. SETTLE(n-1-i) once outer pass i has bubbled its maximum into place
  4. one final DONE

The generator sorts a private shadow copy so later comparisons see the
already-swapped values.  The caller's list is never touched.
"""

from typing import Dict, List, Sequence

from algorithms.action import ActionBuilder, ActionKind, ActionLog, done_action


# ---------------------------------------------------------------------------
# Pseudocode: each string is one displayed line; index = highlighted line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BubbleSort(arr):",                        # 0
    "    n ← len(arr)",                            # 1
    "    for i in 0 .. n-1:",                      # 2
    "        for j in 0 .. n-2-i:",                # 3
    "            if arr[j] > arr[j+1]:",           # 4
    "                swap(arr[j], arr[j+1])",      # 5
    "        arr[n-1-i] is now in place",          # 6
    "    return arr",                              # 7
]

KIND_LINES: Dict[ActionKind, int] = {
    ActionKind.COMPARE: 4,
    ActionKind.SWAP:    5,
    ActionKind.SETTLE:  6,
    ActionKind.DONE:    7,
}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bubble_sort_actions(values: Sequence[int]) -> ActionLog:
    """
    Args:
        values : The input sequence (left untouched).

    Returns:
        The complete ActionLog, terminated by a single DONE.
    """
    arr = list(values)
    n   = len(arr)
    ab  = ActionBuilder()

    for i in range(n):
        for j in range(n - 1 - i):
            ab.compare(j, j + 1)
            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                ab.swap(j, j + 1)
        last = n - 1 - i
        ab.settle(last, arr[last])

    ab.actions.append(done_action())
    return ab.build()

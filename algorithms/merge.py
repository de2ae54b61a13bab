"""
merge.py — Top-Down Merge Sort
===============================
Recursive merge sort recorded as an ActionLog.

Each merge of [left, mid) and [mid, right):
  1. allocates a scratch buffer of (right - left) elements
  2. COMPARE + TEMP_PUSH while both runs are non-empty (ties take left,
     so the sort is stable)
  3. TEMP_PUSH the remainder of the left run, then of the right run
  4. WRITE every scratch element back, oldest first
  5. TEMP_CLEAR, then frees the buffer

Every action inside a merge carries the builder's memory counter
post-allocation, so the peak can be recovered by scanning the log.

`merge_runs` and `sort_range` are shared with the parallel variant,
which drives them with a task-tagged, offset builder.
"""

from typing import Dict, List, Sequence

from algorithms.action import ActionBuilder, ActionKind, ActionLog, done_action


PSEUDOCODE: List[str] = [
    "def MergeSort(arr, left, right):",             # 0
    "    if right - left <= 1: return",             # 1
    "    mid ← left + (right - left) / 2",          # 2
    "    MergeSort(arr, left, mid)",                # 3
    "    MergeSort(arr, mid, right)",               # 4
    "    temp ← []",                                # 5
    "    while i < mid and j < right:",             # 6
    "        temp.push(min(arr[i], arr[j]))",       # 7
    "    temp.push(rest of both runs)",             # 8
    "    for k, v in temp: arr[left + k] ← v",      # 9
    "    free(temp)",                               # 10
]

KIND_LINES: Dict[ActionKind, int] = {
    ActionKind.COMPARE:    6,
    ActionKind.TEMP_PUSH:  7,
    ActionKind.WRITE:      9,
    ActionKind.TEMP_CLEAR: 10,
}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def merge_sort_actions(values: Sequence[int]) -> ActionLog:
    arr = list(values)
    ab  = ActionBuilder()
    sort_range(arr, 0, len(arr), ab)
    ab.actions.append(done_action())
    return ab.build()


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
def sort_range(arr: List[int], left: int, right: int, ab: ActionBuilder) -> None:
    """Sort arr[left:right] in place, emitting into `ab`."""
    if right - left <= 1:
        return
    mid = left + (right - left) // 2
    sort_range(arr, left, mid, ab)
    sort_range(arr, mid, right, ab)
    merge_runs(arr, left, mid, right, ab)


def merge_runs(arr: List[int], left: int, mid: int, right: int, ab: ActionBuilder) -> None:
    """
    Merge the sorted runs arr[left:mid] and arr[mid:right] in place.

    Indices are local to `arr`; the builder adds its offset when emitting.
    """
    nbytes = ab.allocate(right - left)
    temp: List[int] = []
    i, j = left, mid

    while i < mid and j < right:
        ab.compare(i, j)
        if arr[i] <= arr[j]:
            ab.temp_push(i, arr[i], len(temp))
            temp.append(arr[i])
            i += 1
        else:
            ab.temp_push(j, arr[j], len(temp))
            temp.append(arr[j])
            j += 1

    while i < mid:
        ab.temp_push(i, arr[i], len(temp))
        temp.append(arr[i])
        i += 1

    while j < right:
        ab.temp_push(j, arr[j], len(temp))
        temp.append(arr[j])
        j += 1

    for k, val in enumerate(temp):
        arr[left + k] = val
        ab.write(left + k, val)

    ab.temp_clear()
    ab.release(nbytes)

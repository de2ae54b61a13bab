"""
parallel_merge.py — Chunked "Parallel" Merge Sort
==================================================
Simulates T worker tasks sorting an array together.  No threads are
involved: concurrency is produced entirely by the interleaver and the
task_id tags, so the log stays byte-for-byte reproducible.

Phases:
  1. Split the N values into T = min(tasks, N) chunks of ⌈N/T⌉.
     Each chunk is merge-sorted on its own copy by its own task, with
     local indices shifted to global ones.  The T logs are interleaved.
  2. Tournament: `step` starts at the chunk size and doubles per round.
     Every round emits MERGE_PHASE(round) and then merges adjacent
     sorted runs of size `step` in place, the k-th merge owned by task
     k mod T.  The round's logs are interleaved.  Stops once step ≥ N.
  3. One final DONE.

Each task keeps its own scratch-memory counter, so `memory_bytes`
on an action is that task's allocation, not a global total.
"""

from typing import Dict, List, Sequence

from algorithms.action import Action, ActionBuilder, ActionKind, ActionLog, done_action
from algorithms.interleave import interleave
from algorithms.merge import merge_runs, sort_range


PSEUDOCODE: List[str] = [
    "def ParallelMergeSort(arr, T):",                  # 0
    "    chunk ← ceil(n / T)",                         # 1
    "    parallel for t in 0 .. T-1:",                 # 2
    "        MergeSort(arr, t·chunk, (t+1)·chunk)",    # 3
    "    step ← chunk",                                # 4
    "    while step < n:",                             # 5
    "        parallel for left in 0, 2·step, …:",      # 6
    "            merge(arr, left, left+step, left+2·step)",  # 7
    "        step ← 2 · step",                         # 8
]

KIND_LINES: Dict[ActionKind, int] = {
    ActionKind.COMPARE:     7,
    ActionKind.TEMP_PUSH:   7,
    ActionKind.WRITE:       7,
    ActionKind.TEMP_CLEAR:  7,
    ActionKind.MERGE_PHASE: 5,
}

DEFAULT_TASKS = 8


def chunk_size(n: int, tasks: int) -> int:
    tasks = max(1, min(tasks, n))
    return (n + tasks - 1) // tasks


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def parallel_merge_sort_actions(values: Sequence[int], task_count: int = DEFAULT_TASKS) -> ActionLog:
    """
    Args:
        values     : The input sequence (left untouched).
        task_count : Requested number of simulated tasks (clamped to N).

    Returns:
        The combined ActionLog, terminated by a single DONE.
    """
    n = len(values)
    if n == 0:
        return (done_action(),)

    tasks = max(1, min(task_count, n))
    chunk = chunk_size(n, tasks)
    arr   = list(values)

    # --- phase 1: every task sorts its own chunk ---
    chunk_logs: List[ActionLog] = []
    for task_id in range(tasks):
        start = task_id * chunk
        end   = min(start + chunk, n)
        if start >= n:
            chunk_logs.append(())
            continue

        local = arr[start:end]
        ab = ActionBuilder(task_id=task_id, offset=start)
        sort_range(local, 0, len(local), ab)
        arr[start:end] = local
        chunk_logs.append(ab.build())

    actions: List[Action] = list(interleave(chunk_logs))

    # --- phase 2: tournament rounds ---
    step  = chunk
    level = 1
    while step < n:
        actions.append(Action(kind=ActionKind.MERGE_PHASE, value=level))

        round_logs: List[ActionLog] = []
        left = 0
        while left < n:
            mid   = min(left + step, n)
            right = min(left + 2 * step, n)
            if mid < right:
                ab = ActionBuilder(task_id=len(round_logs) % tasks)
                merge_runs(arr, left, mid, right, ab)
                round_logs.append(ab.build())
            left += 2 * step

        actions.extend(interleave(round_logs))
        step  *= 2
        level += 1

    actions.append(done_action())
    return tuple(actions)


# ---------------------------------------------------------------------------
# Ownership helper (presentation uses it for per-task underlines)
# ---------------------------------------------------------------------------
def segment_owners(n: int, task_count: int, level: int) -> List[int]:
    """
    Task id owning each bar at tournament level `level` (0 = chunk sort).

    At level L the segments are chunk · 2^L wide; segment ids past the
    last task collapse onto it.
    """
    if n == 0:
        return []
    tasks   = max(1, min(task_count, n))
    segment = chunk_size(n, tasks) * (2 ** max(0, level))
    return [min(idx // segment, tasks - 1) for idx in range(n)]

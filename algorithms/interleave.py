"""
interleave.py — Simulated Concurrency
======================================
Merges K independent per-task ActionLogs into one log that looks like
the tasks ran side by side.

Policy: round-robin.  Each round visits logs 0..K-1 in order and takes
the next unconsumed action from every log that still has one.  Exhausted
logs are skipped, so the result has no gaps.  Each input's internal
order is preserved and nothing depends on wall-clock time.
"""

from typing import List, Sequence

from algorithms.action import Action, ActionLog


def interleave(logs: Sequence[Sequence[Action]]) -> ActionLog:
    result:  List[Action] = []
    cursors: List[int]    = [0] * len(logs)

    while True:
        any_remaining = False
        for k, log in enumerate(logs):
            if cursors[k] < len(log):
                result.append(log[cursors[k]])
                cursors[k] += 1
                any_remaining = True
        if not any_remaining:
            break

    return tuple(result)

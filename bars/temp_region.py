"""
temp_region.py — Merge Scratch Buffer
======================================
FIFO queue of values that are mid-merge, plus the scratch bytes the
owning task currently holds.  There is one region per simulated task
(or a single one outside parallel mode).
"""

from collections import deque
from typing import Deque, List


class TempRegion:
    """
    Attributes:
        task_id : Owner of the region.
        values  : Pending values, oldest first.
        nbytes  : Scratch memory the owner currently has allocated.
    """

    __slots__ = ("task_id", "values", "nbytes")

    def __init__(self, task_id: int = 0):
        self.task_id: int        = task_id
        self.values:  Deque[int] = deque()
        self.nbytes:  int        = 0

    def push(self, value: int) -> None:
        self.values.append(value)

    def pop_oldest(self) -> int:
        return self.values.popleft()

    def clear(self) -> None:
        self.values.clear()
        self.nbytes = 0

    def __len__(self) -> int:
        return len(self.values)

    def contents(self) -> List[int]:
        return list(self.values)

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "values":  self.contents(),
            "bytes":   self.nbytes,
        }

    def __repr__(self) -> str:
        return f"TempRegion(task={self.task_id}, values={list(self.values)}, bytes={self.nbytes})"

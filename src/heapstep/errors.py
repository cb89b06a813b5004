"""Exceptions raised by heapstep."""

from __future__ import annotations

__all__ = [
    "InvariantViolation",
    "HistoryIndexError",
]


class InvariantViolation(RuntimeError):
    """Engine state that a correct run can never reach.

    Signals a construction bug; callers should let it propagate and
    abandon the run rather than retry.
    """


class HistoryIndexError(IndexError):
    """Out-of-bounds access into a :class:`~heapstep.history.StepHistory`."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(
            f"History index {index} out of range "
            f"(history holds {length} records)"
        )

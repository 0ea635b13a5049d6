"""Exceptions raised by :mod:`bucket_queue`."""

from __future__ import annotations


class PriorityError(IndexError):
    """Raised when a priority falls outside ``[0, priority_slots)``.

    The queue is never modified when this is raised.
    """

    def __init__(self, priority: int) -> None:
        self.priority = priority
        if priority < 0:
            msg = f"tried to push priority {priority} smaller than lower bound"
        else:
            msg = f"tried to push priority {priority} larger than upper bound"
        super().__init__(msg)

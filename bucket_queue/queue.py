"""Bounded-height priority queue backed by one bucket per priority level."""

from __future__ import annotations

import logging
import operator
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from .errors import PriorityError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TopRef(Generic[T]):
    """Writable handle on the element at the top of a :class:`BucketQueue`.

    Assigning to :attr:`value` replaces the element in place; its position and
    priority are unchanged. Once the bucket holding the element grows or
    shrinks the handle is stale and any access raises ``RuntimeError``.
    """

    __slots__ = ("_bucket", "_size", "priority")

    def __init__(self, bucket: List[T], priority: int) -> None:
        self._bucket = bucket
        self._size = len(bucket)
        self.priority = priority

    def _index(self) -> int:
        if len(self._bucket) != self._size:
            raise RuntimeError(
                f"stale TopRef: bucket {self.priority} changed since peek_mut()"
            )
        return self._size - 1

    @property
    def value(self) -> T:
        return self._bucket[self._index()]

    @value.setter
    def value(self, new: T) -> None:
        self._bucket[self._index()] = new

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"TopRef(priority={self.priority}, size={self._size})"


class BucketQueue(Generic[T]):
    """Priority queue over the integer levels ``[0, priority_slots)``.

    Each level owns a list used as a stack, so values sharing a priority come
    out last-in-first-out. A cursor to the lowest non-empty level (``top``)
    gives :math:`O(1)` pushes; pops rescan forward from ``top`` and cost
    :math:`O(P)` in the worst case, but draining without interleaved lower
    pushes only walks the levels once.

    Parameters
    ----------
    priority_slots:
        Number of priority levels. ``0`` is allowed and yields a queue that
        rejects every push.

    Examples
    --------
    >>> q = BucketQueue(3)
    >>> q.push(2, "c"); q.push(0, "a")
    >>> q.pop()
    'a'
    """

    def __init__(self, priority_slots: int) -> None:
        slots = operator.index(priority_slots)
        if slots < 0:
            raise ValueError("priority_slots must be non-negative")
        self._priority_slots = slots
        self._buckets: List[List[T]] = [[] for _ in range(slots)]
        self._top: Optional[int] = None
        self._count = 0
        # levels handed out by get_priority_mut, mapped to the size last seen
        self._loaned: Dict[int, int] = {}

    # ------------------------------------------------------------------
    @property
    def priority_slots(self) -> int:
        return self._priority_slots

    @property
    def top(self) -> Optional[int]:
        """Lowest priority level currently holding an element."""

        self._sync()
        return self._top

    def __len__(self) -> int:
        self._sync()
        return self._count

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __iter__(self) -> Iterator[T]:
        return self.drain()

    def __repr__(self) -> str:
        self._sync()
        return (
            f"BucketQueue(priority_slots={self._priority_slots}, "
            f"size={self._count}, top={self._top})"
        )

    # ------------------------------------------------------------------
    def _check(self, priority: int) -> int:
        idx = operator.index(priority)
        if not 0 <= idx < self._priority_slots:
            raise PriorityError(idx)
        return idx

    def _search_top(self, start: int) -> Optional[int]:
        for k in range(start, self._priority_slots):
            if self._buckets[k]:
                return k
        return None

    def _seen(self, idx: int) -> None:
        if idx in self._loaned:
            self._loaned[idx] = len(self._buckets[idx])

    def _sync(self) -> None:
        """Fold edits made through handed-out buckets into ``count`` and ``top``."""

        if not self._loaned:
            return
        changed = False
        for idx, seen in self._loaned.items():
            size = len(self._buckets[idx])
            if size == seen:
                continue
            changed = True
            self._count += size - seen
            self._loaned[idx] = size
            if size and (self._top is None or idx < self._top):
                self._top = idx
        if not changed:
            return
        if self._top is not None and not self._buckets[self._top]:
            self._top = self._search_top(self._top)
        logger.debug(
            "resynced bucket queue: size=%d top=%s", self._count, self._top
        )

    # ------------------------------------------------------------------
    def push(self, priority: int, value: T) -> None:
        """Queue ``value`` at ``priority``.

        Raises
        ------
        PriorityError
            If ``priority`` is outside ``[0, priority_slots)``.
        """

        idx = self._check(priority)
        self._sync()
        self._buckets[idx].append(value)
        self._count += 1
        self._seen(idx)
        if self._top is None or idx < self._top:
            self._top = idx

    def pop(self) -> Optional[T]:
        """Remove and return the most urgent value, or ``None`` if empty."""

        self._sync()
        if self._top is None:
            return None
        k = self._top
        value = self._buckets[k].pop()
        self._count -= 1
        self._seen(k)
        # bucket k may still hold values, so the scan starts at k
        self._top = self._search_top(k)
        return value

    def peek(self) -> Optional[T]:
        """Return the value :meth:`pop` would return without removing it."""

        self._sync()
        if self._top is None:
            return None
        return self._buckets[self._top][-1]

    def peek_mut(self) -> Optional[TopRef[T]]:
        """Return a writable :class:`TopRef` on the top value, or ``None``."""

        self._sync()
        if self._top is None:
            return None
        return TopRef(self._buckets[self._top], self._top)

    def is_empty(self) -> bool:
        self._sync()
        return self._count == 0

    def clear(self) -> None:
        """Drop every queued value, visiting only populated levels."""

        self._sync()
        cleared = self._count
        self._count = 0
        while self._top is not None:
            k = self._top
            self._buckets[k].clear()
            self._top = self._search_top(k + 1)
        for idx in self._loaned:
            self._loaned[idx] = 0
        logger.debug("cleared %d values from bucket queue", cleared)

    def get_priority(self, priority: int) -> Tuple[T, ...]:
        """Return the values queued at ``priority``, next-to-pop first."""

        idx = self._check(priority)
        return tuple(reversed(self._buckets[idx]))

    def get_priority_mut(self, priority: int) -> List[T]:
        """Return the backing list for ``priority``.

        The last item of the list is the next one popped from that level.
        Adding or removing items through the list is allowed for as long as
        the list is held: every later queue operation first reconciles its
        size and ``top`` with the handed-out buckets, at a cost proportional
        to the number of levels handed out so far.
        """

        idx = self._check(priority)
        self._sync()
        self._loaned.setdefault(idx, len(self._buckets[idx]))
        return self._buckets[idx]

    def sizes(self) -> List[int]:
        """Return the number of queued values at each priority level."""

        self._sync()
        return [len(b) for b in self._buckets]

    def drain(self) -> Iterator[T]:
        """Yield values in extraction order, popping each one."""

        while not self.is_empty():
            yield self.pop()

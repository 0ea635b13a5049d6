"""Bounded-height priority queue package initialization."""

from __future__ import annotations

from .errors import PriorityError
from .queue import BucketQueue, TopRef

__all__ = ["BucketQueue", "PriorityError", "TopRef"]

"""Occupancy diagnostics for :class:`~bucket_queue.queue.BucketQueue`."""

from __future__ import annotations

from typing import Any, Dict

import numpy as np

from .queue import BucketQueue


def occupancy(queue: BucketQueue) -> np.ndarray:
    """Return the per-level bucket sizes of ``queue`` as an integer array."""

    return np.asarray(queue.sizes(), dtype=np.int64)


def occupancy_summary(queue: BucketQueue) -> Dict[str, Any]:
    """Summarise how values are spread over the priority levels.

    Returns
    -------
    dict
        ``size`` and ``top`` mirror the queue, ``levels_used`` counts
        non-empty buckets, ``mean_priority`` and ``var_priority`` are
        weighted by the number of values per level (``0.0`` when empty) and
        ``max_bucket`` is the largest bucket size.
    """

    counts = occupancy(queue)
    size = int(counts.sum())
    if size == 0:
        mean = var = 0.0
    else:
        levels = np.arange(counts.size, dtype=float)
        mean = float(np.average(levels, weights=counts))
        var = float(np.average((levels - mean) ** 2, weights=counts))
    return {
        "size": size,
        "top": queue.top,
        "levels_used": int(np.count_nonzero(counts)),
        "mean_priority": mean,
        "var_priority": var,
        "max_bucket": int(counts.max()) if counts.size else 0,
    }

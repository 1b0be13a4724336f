"""Average/median reduction of throughput sample series."""

from __future__ import annotations

from typing import Sequence

from .models import AggregateStats


def average(samples: Sequence[float]) -> float:
    if not samples:
        return 0.0
    return sum(samples) / len(samples)


def median(samples: Sequence[float]) -> float:
    """Median of ``samples``; the caller's sequence keeps its order."""
    if not samples:
        return 0.0

    ordered = sorted(samples)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def aggregate(samples: Sequence[float]) -> AggregateStats:
    return AggregateStats(average=average(samples), median=median(samples))

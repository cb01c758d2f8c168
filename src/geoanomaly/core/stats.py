"""
Distance statistics and the standard-deviation outlier test.

The default convention is the population standard deviation (N denominator).
The sample convention (N - 1) is available because it moves the anomaly
boundary, so callers should choose it explicitly rather than inherit it.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Literal, Sequence

StdConvention = Literal["population", "sample"]


@dataclass(frozen=True)
class DistanceStats:
    """Mean and standard deviation of a distance sample."""

    mean: float
    std: float
    n: int
    convention: StdConvention = "population"


def describe(values: Sequence[float], *, convention: StdConvention = "population") -> DistanceStats:
    """Compute mean/std of `values` under the given convention."""
    if not values:
        raise ValueError("Cannot describe an empty sample: mean undefined")

    mean = statistics.fmean(values)
    if convention == "population":
        std = statistics.pstdev(values, mu=mean)
    elif convention == "sample":
        # A single observation has no spread; treat it like the population case.
        std = statistics.stdev(values, xbar=mean) if len(values) > 1 else 0.0
    else:
        raise ValueError(f"Unknown standard deviation convention: {convention!r}")

    return DistanceStats(mean=mean, std=std, n=len(values), convention=convention)


def outlier_mask(values: Sequence[float], stats: DistanceStats, *, threshold: float) -> list[bool]:
    """Flag values deviating from the mean by strictly more than `threshold` stds."""
    boundary = threshold * stats.std
    return [abs(v - stats.mean) > boundary for v in values]

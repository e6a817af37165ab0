"""Batch population statistics for z-score normalization."""

import math
from typing import Iterable, Sequence

from researchbridge.models.score import MetricSet, MetricStats


ZERO_VARIANCE_TOLERANCE = 1e-12


def metric_stats(values: Sequence[float]) -> MetricStats:
    """Mean and population standard deviation of ``values``.

    Standard deviation falls back to 1 for empty, single-member and
    zero-variance inputs so z-scores never divide by zero.
    """
    if not values:
        return MetricStats(mean=0.0, std=1.0)

    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    std = math.sqrt(variance)

    # Identical floats can still leave rounding residue in the variance
    if not math.isfinite(std) or std <= ZERO_VARIANCE_TOLERANCE * max(1.0, abs(mean)):
        std = 1.0

    return MetricStats(mean=mean, std=std)


def compute_population_stats(
    metric_sets: Sequence[MetricSet], metric_names: Iterable[str]
) -> dict[str, MetricStats]:
    """Per-metric batch statistics for the named population metrics."""
    return {
        name: metric_stats(
            [m.population_metrics.get(name, 0.0) for m in metric_sets]
        )
        for name in metric_names
    }


def batch_zscores(
    metric_set: MetricSet, stats: dict[str, MetricStats]
) -> dict[str, float]:
    """z-score of each population metric of one entity against its batch."""
    return {
        name: metric_stat.zscore(metric_set.population_metrics.get(name, 0.0))
        for name, metric_stat in stats.items()
    }

"""Unit tests for batch population statistics and z-scores."""

import math

import pytest

from researchbridge.models.score import MetricSet, MetricStats
from researchbridge.scoring.statistics import (
    batch_zscores,
    compute_population_stats,
    metric_stats,
)


def test_metric_stats_population_std():
    """Standard deviation divides by N, not N-1."""
    stats = metric_stats([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])

    assert stats.mean == pytest.approx(5.0)
    assert stats.std == pytest.approx(2.0)


def test_metric_stats_empty_defaults():
    stats = metric_stats([])

    assert stats.mean == 0.0
    assert stats.std == 1.0


def test_metric_stats_single_value_std_is_one():
    stats = metric_stats([3.7])

    assert stats.mean == pytest.approx(3.7)
    assert stats.std == 1.0


def test_metric_stats_zero_variance_std_is_one():
    stats = metric_stats([math.log1p(10)] * 5)

    assert stats.std == 1.0


def test_metric_stats_near_zero_variance_from_rounding():
    """Floating-point residue on identical values is treated as zero variance."""
    value = 0.1 + 0.2
    stats = metric_stats([value, 0.3, value])

    assert stats.std == 1.0


def test_zscore():
    stats = MetricStats(mean=2.0, std=4.0)

    assert stats.zscore(10.0) == pytest.approx(2.0)
    assert stats.zscore(2.0) == 0.0


def test_metric_stats_rejects_zero_std():
    with pytest.raises(ValueError):
        MetricStats(mean=0.0, std=0.0)


def test_compute_population_stats_missing_metric_defaults_to_zero():
    metric_sets = [
        MetricSet(population_metrics={"impact": 2.0}),
        MetricSet(population_metrics={}),
    ]

    stats = compute_population_stats(metric_sets, ["impact"])

    assert stats["impact"].mean == pytest.approx(1.0)
    assert stats["impact"].std == pytest.approx(1.0)


def test_batch_zscores_all_finite_for_identical_batch():
    metric_sets = [
        MetricSet(population_metrics={"productivity": 1.5, "impact": 3.0})
        for _ in range(4)
    ]
    stats = compute_population_stats(metric_sets, ["productivity", "impact"])

    for metrics in metric_sets:
        zscores = batch_zscores(metrics, stats)
        assert zscores == {"productivity": 0.0, "impact": 0.0}
        assert all(math.isfinite(z) for z in zscores.values())

"""Batch-relative percentile ranking."""

from bisect import bisect_left
from typing import Sequence


SINGLETON_PERCENTILE = 50.0


def percentile_rank(value: float, sorted_values: Sequence[float]) -> float:
    """Percent of ``sorted_values`` strictly below ``value``.

    Ties share a percentile. A batch of one sits at the neutral midpoint.

    Args:
        value: Raw score to rank
        sorted_values: All raw scores of the batch, ascending

    Returns:
        Percentile in [0, 100)
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    if n == 1:
        return SINGLETON_PERCENTILE

    below = bisect_left(sorted_values, value)
    return below / n * 100.0


def percentile_ranks(raw_scores: Sequence[float]) -> list[float]:
    """Percentile of every score in the batch, in input order."""
    sorted_values = sorted(raw_scores)
    return [percentile_rank(value, sorted_values) for value in raw_scores]

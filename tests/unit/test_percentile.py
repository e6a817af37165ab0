"""Unit tests for batch-relative percentile ranking."""

import pytest

from researchbridge.scoring.percentile import (
    SINGLETON_PERCENTILE,
    percentile_rank,
    percentile_ranks,
)


def test_percentile_strictly_below():
    assert percentile_ranks([10.0, 20.0, 30.0, 40.0]) == [0.0, 25.0, 50.0, 75.0]


def test_percentile_preserves_input_order():
    ranks = percentile_ranks([30.0, 10.0, 20.0])

    assert ranks == pytest.approx([200 / 3, 0.0, 100 / 3])


def test_ties_share_percentile():
    ranks = percentile_ranks([5.0, 1.0, 5.0, 9.0])

    assert ranks[0] == ranks[2] == 25.0
    assert ranks[1] == 0.0
    assert ranks[3] == 75.0


def test_singleton_is_neutral():
    assert percentile_ranks([-42.0]) == [SINGLETON_PERCENTILE]
    assert SINGLETON_PERCENTILE == 50.0


def test_empty_batch():
    assert percentile_ranks([]) == []
    assert percentile_rank(1.0, []) == 0.0


def test_top_entity_never_reaches_100():
    ranks = percentile_ranks([float(i) for i in range(10)])

    assert max(ranks) == 90.0


def test_monotonic_in_raw_score():
    raws = [3.2, -1.0, 3.2, 0.0, 7.5, -100.0]
    ranks = percentile_ranks(raws)

    for i, a in enumerate(raws):
        for j, b in enumerate(raws):
            if a > b:
                assert ranks[i] >= ranks[j]
            if a == b:
                assert ranks[i] == ranks[j]

from __future__ import annotations

import pytest

from hiringscreen.core import ScoreAggregator


def test_endpoints():
    aggregator = ScoreAggregator()

    assert aggregator.combine(0, 0) == 0
    assert aggregator.combine(100, 100) == 100


def test_default_weighting():
    aggregator = ScoreAggregator()

    assert aggregator.combine(100, 80) == 88
    assert aggregator.combine(50, 0) == 20
    assert aggregator.combine(0, 50) == 30


def test_monotonic_in_both_scores():
    aggregator = ScoreAggregator()
    for rules in range(0, 101, 5):
        for semantic in range(0, 100, 5):
            assert aggregator.combine(rules, semantic) <= aggregator.combine(rules, semantic + 5)
            if rules < 100:
                assert aggregator.combine(rules, semantic) <= aggregator.combine(rules + 5, semantic)


def test_weights_are_normalized():
    aggregator = ScoreAggregator(rules_weight=2, semantic_weight=2)

    assert aggregator.weights == {"rules": 2.0, "semantic": 2.0}
    assert aggregator.combine(100, 100) == 100
    assert aggregator.combine(100, 0) == 50


def test_rejects_negative_or_empty_weights():
    with pytest.raises(ValueError):
        ScoreAggregator(rules_weight=-0.1)
    with pytest.raises(ValueError):
        ScoreAggregator(rules_weight=0, semantic_weight=0)

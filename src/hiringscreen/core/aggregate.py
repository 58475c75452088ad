"""Canonical combination of rules and semantic scores."""

from __future__ import annotations


class ScoreAggregator:
    """Combine rules and semantic scores into the persisted final score."""

    DEFAULT_WEIGHTS: dict[str, float] = {
        "rules": 0.4,
        "semantic": 0.6,
    }

    def __init__(
        self,
        *,
        rules_weight: float | None = None,
        semantic_weight: float | None = None,
    ) -> None:
        weights = self.DEFAULT_WEIGHTS.copy()
        if rules_weight is not None:
            weights["rules"] = float(rules_weight)
        if semantic_weight is not None:
            weights["semantic"] = float(semantic_weight)
        if any(value < 0 for value in weights.values()):
            raise ValueError("Aggregate weights must be non-negative.")
        if sum(weights.values()) <= 0:
            raise ValueError("At least one aggregate weight must be positive.")
        self._weights = weights

    @property
    def weights(self) -> dict[str, float]:
        return dict(self._weights)

    def combine(self, rules_score: int, semantic_score: int) -> int:
        total = sum(self._weights.values())
        weighted = (
            self._weights["rules"] * rules_score
            + self._weights["semantic"] * semantic_score
        ) / total
        return max(0, min(100, round(weighted)))

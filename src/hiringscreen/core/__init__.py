"""Core screening components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregate import ScoreAggregator
from .rules import RulesBreakdown, RulesScorer, RulesScorerConfig
from .semantic import (
    EvaluationFailed,
    NoopEvaluator,
    RemoteEvaluator,
    SemanticEvaluation,
    SemanticEvaluator,
)
from .state import InvalidTransition, ScreeningStateMachine

__all__ = [
    "EvaluationFailed",
    "InvalidTransition",
    "NoopEvaluator",
    "RemoteEvaluator",
    "RulesBreakdown",
    "RulesScorer",
    "RulesScorerConfig",
    "ScoreAggregator",
    "ScreeningStateMachine",
    "SemanticEvaluation",
    "SemanticEvaluator",
]

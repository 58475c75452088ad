"""Deterministic skill and experience scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..schemas import CandidateFacts, JobFacts


@dataclass
class RulesScorerConfig:
    """Weights applied to the skill overlap and experience ratios."""

    skill_weight: float = 0.7
    experience_weight: float = 0.3


@dataclass(slots=True)
class RulesBreakdown:
    """Intermediate ratios behind a rules score."""

    skill_ratio: float
    experience_ratio: float
    matched_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)


class RulesScorer:
    """Score candidate/job fit from skill overlap and years of experience."""

    def __init__(self, *, config: RulesScorerConfig | None = None) -> None:
        self._config = config or RulesScorerConfig()

    def score(self, candidate: CandidateFacts, job: JobFacts) -> int:
        return self.score_breakdown(self.explain(candidate, job))

    def explain(self, candidate: CandidateFacts, job: JobFacts) -> RulesBreakdown:
        candidate_skills = _normalize(candidate.skills)
        required = {_fold(skill): skill for skill in job.required_skills if skill and skill.strip()}

        matched = [label for key, label in required.items() if key in candidate_skills]
        missing = [label for key, label in required.items() if key not in candidate_skills]
        skill_ratio = len(matched) / max(1, len(required))

        if job.min_years <= 0:
            experience_ratio = 1.0
        else:
            experience_ratio = min(1.0, candidate.experience_years / max(1, job.min_years))

        return RulesBreakdown(
            skill_ratio=skill_ratio,
            experience_ratio=experience_ratio,
            matched_skills=matched,
            missing_skills=missing,
        )

    def score_breakdown(self, breakdown: RulesBreakdown) -> int:
        total_weight = self._config.skill_weight + self._config.experience_weight
        if total_weight <= 0:
            return 0
        combined = (
            self._config.skill_weight * breakdown.skill_ratio
            + self._config.experience_weight * breakdown.experience_ratio
        ) / total_weight
        return _clamp(round(combined * 100))


def _fold(skill: str) -> str:
    return skill.strip().casefold()


def _normalize(skills: Iterable[str] | None) -> set[str]:
    return {_fold(skill) for skill in skills or [] if skill and skill.strip()}


def _clamp(value: int) -> int:
    return max(0, min(100, int(value)))

"""Semantic (language-model) evaluation of candidate/job fit.

Two strategies share the :class:`SemanticEvaluator` contract. The remote one
prompts a chat provider for a JSON verdict; the no-op one answers with a fixed
payload so the pipeline runs without any provider credential.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

import structlog

from ..llm import ChatClient, ChatTransportError
from ..schemas import CandidateFacts, JobFacts

EvaluationSource = Literal["remote", "mock"]

MAX_QUESTIONS = 3
DEFAULT_RESUME_EXCERPT_CHARS = 1000


class EvaluationFailed(RuntimeError):
    """Raised when a semantic evaluation cannot be produced."""


@dataclass(slots=True)
class SemanticEvaluation:
    """Normalized semantic evaluator output."""

    semantic_score: int
    final_score: int
    reasons: list[str] = field(default_factory=list)
    summary: str = ""
    questions: list[str] = field(default_factory=list)
    source: EvaluationSource = "remote"


@runtime_checkable
class SemanticEvaluator(Protocol):
    """Evaluator contract for AI-derived fit scoring."""

    def evaluate(
        self,
        candidate: CandidateFacts,
        job: JobFacts,
        *,
        rules_score: int,
    ) -> SemanticEvaluation:
        """Return a semantic evaluation or raise :class:`EvaluationFailed`."""


class NoopEvaluator:
    """Fixed mock evaluation used when no provider is configured."""

    MOCK_SEMANTIC_SCORE = 80
    MOCK_FINAL_SCORE = 82
    MOCK_REASONS = ("Matches required skills", "Good experience")
    MOCK_SUMMARY = "Strong candidate with relevant experience."
    MOCK_QUESTIONS = (
        "Describe your experience with React.",
        "How do you handle state management?",
        "Walk us through a recent project you are proud of.",
    )

    def evaluate(
        self,
        candidate: CandidateFacts,
        job: JobFacts,
        *,
        rules_score: int,
    ) -> SemanticEvaluation:
        return SemanticEvaluation(
            semantic_score=self.MOCK_SEMANTIC_SCORE,
            final_score=self.MOCK_FINAL_SCORE,
            reasons=list(self.MOCK_REASONS),
            summary=self.MOCK_SUMMARY,
            questions=list(self.MOCK_QUESTIONS),
            source="mock",
        )


class RemoteEvaluator:
    """Ask a chat provider to judge fit and parse its JSON answer."""

    def __init__(
        self,
        client: ChatClient,
        *,
        resume_excerpt_chars: int | None = None,
    ) -> None:
        self._client = client
        self._resume_excerpt_chars = resume_excerpt_chars or DEFAULT_RESUME_EXCERPT_CHARS
        self._logger = structlog.get_logger(__name__)

    def evaluate(
        self,
        candidate: CandidateFacts,
        job: JobFacts,
        *,
        rules_score: int,
    ) -> SemanticEvaluation:
        prompt = build_prompt(
            candidate=candidate,
            job=job,
            rules_score=rules_score,
            resume_excerpt_chars=self._resume_excerpt_chars,
        )
        try:
            raw = self._client.complete(prompt)
        except ChatTransportError as exc:
            raise EvaluationFailed(f"Provider call failed: {exc}") from exc

        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            raise EvaluationFailed("Provider returned unparseable JSON") from exc
        if not isinstance(payload, dict):
            raise EvaluationFailed(
                f"Provider returned {type(payload).__name__}, expected a JSON object"
            )

        evaluation = parse_evaluation(payload)
        self._logger.debug(
            "semantic.evaluated",
            job_id=job.job_id,
            seeker_id=candidate.seeker_id,
            semantic_score=evaluation.semantic_score,
        )
        return evaluation


def build_prompt(
    *,
    candidate: CandidateFacts,
    job: JobFacts,
    rules_score: int,
    resume_excerpt_chars: int = DEFAULT_RESUME_EXCERPT_CHARS,
) -> str:
    """Render the screening prompt for one candidate/job pair."""

    resume = (candidate.resume_text or "")[:resume_excerpt_chars]
    company = f" at company {job.company_id}" if job.company_id is not None else ""
    lines = [
        f"Job: {job.title}{company}",
        f"Description: {job.description}",
        f"Required Skills: {', '.join(job.required_skills)}",
        f"Minimum Experience: {job.min_years} years",
        "",
        f"Candidate: {candidate.email}",
        f"Profile Skills: {', '.join(candidate.skills)}",
        f"Experience: {candidate.experience_years} years",
        f"Resume Text: {resume}",
        "",
        f"Rules-based match score (skills/experience): {rules_score}",
        "",
        "Analyze the candidate's fit for the job. Return JSON:",
        "{",
        '  "semanticScore": number (0-100 based on similarity),',
        '  "finalScore": number (0-100, weighted),',
        '  "reasons": ["reason1", "reason2"],',
        '  "summary": "Short summary",',
        '  "questions": ["Q1", "Q2", "Q3"]',
        "}",
    ]
    return "\n".join(lines)


def parse_evaluation(payload: dict[str, Any]) -> SemanticEvaluation:
    """Normalize a provider payload, substituting defaults for missing fields."""

    return SemanticEvaluation(
        semantic_score=_score(payload.get("semanticScore")),
        final_score=_score(payload.get("finalScore")),
        reasons=_strings(payload.get("reasons")),
        summary=str(payload.get("summary") or ""),
        questions=_strings(payload.get("questions"))[:MAX_QUESTIONS],
        source="remote",
    )


def _score(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, min(100, round(number)))


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]

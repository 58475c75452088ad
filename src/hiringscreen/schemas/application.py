"""Application and screening result records."""

from __future__ import annotations

from typing import Literal, get_args

import pendulum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .candidate import CandidateFacts
from .job import JobFacts

ApplicationStatus = Literal[
    "applied",
    "screened",
    "shortlisted",
    "interview",
    "offer",
    "hired",
    "rejected",
]

AiStatus = Literal["pending", "processing", "complete", "failed"]

APPLICATION_STATUSES: tuple[str, ...] = get_args(ApplicationStatus)
AI_STATUSES: tuple[str, ...] = get_args(AiStatus)


def _utcnow() -> str:
    return pendulum.now("UTC").to_iso8601_string()


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Application(_Record):
    """One seeker's submission to one job."""

    id: int
    job_id: int
    seeker_id: int
    status: ApplicationStatus = "applied"
    note: str | None = None
    created_at: str = Field(default_factory=_utcnow)
    updated_at: str = Field(default_factory=_utcnow)


class ScreeningResult(_Record):
    """Persisted outcome of screening one application."""

    id: int
    application_id: int
    rules_score: int | None = Field(default=None, ge=0, le=100)
    semantic_score: int | None = Field(default=None, ge=0, le=100)
    final_score: int | None = Field(default=None, ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    ai_summary: str | None = None
    ai_questions: list[str] = Field(default_factory=list)
    ai_status: AiStatus = "pending"
    created_at: str = Field(default_factory=_utcnow)
    updated_at: str = Field(default_factory=_utcnow)


class ApplicationContext(BaseModel):
    """Application joined with the facts needed to score it."""

    application: Application
    job: JobFacts
    candidate: CandidateFacts

    model_config = ConfigDict(frozen=True)

"""Pydantic schema definitions shared across the screening pipeline."""

from __future__ import annotations

from .application import (
    AI_STATUSES,
    APPLICATION_STATUSES,
    AiStatus,
    Application,
    ApplicationContext,
    ApplicationStatus,
    ScreeningResult,
)
from .candidate import CandidateFacts, Seeker, SeekerProfile
from .job import Job, JobFacts

__all__ = [
    "AI_STATUSES",
    "APPLICATION_STATUSES",
    "AiStatus",
    "Application",
    "ApplicationContext",
    "ApplicationStatus",
    "CandidateFacts",
    "Job",
    "JobFacts",
    "ScreeningResult",
    "Seeker",
    "SeekerProfile",
]

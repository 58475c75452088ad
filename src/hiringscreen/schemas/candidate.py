"""Candidate facts projected from a seeker and their profile."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SeekerProfile(BaseModel):
    """Job seeker profile as stored by the marketplace."""

    name: str | None = None
    title: str | None = None
    bio: str | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, ge=0)
    resume_text: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Seeker(BaseModel):
    """Seeker account together with an optional profile."""

    id: int
    email: str
    profile: SeekerProfile | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CandidateFacts(BaseModel):
    """Read-only projection of a seeker used for scoring."""

    seeker_id: int
    email: str
    skills: list[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, ge=0)
    resume_text: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_seeker(cls, seeker: Seeker) -> "CandidateFacts":
        profile = seeker.profile or SeekerProfile()
        return cls(
            seeker_id=seeker.id,
            email=seeker.email,
            skills=list(profile.skills),
            experience_years=profile.experience_years,
            resume_text=profile.resume_text,
        )

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Job(BaseModel):
    """Job posting as stored by the marketplace."""

    id: int
    company_id: int | None = None
    title: str
    description: str = ""
    location: str | None = None
    remote: bool = False
    salary_min: int | None = None
    salary_max: int | None = None
    required_skills: list[str] = Field(default_factory=list)
    min_years: int = Field(default=0, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class JobFacts(BaseModel):
    """Read-only projection of a job used for scoring."""

    job_id: int
    company_id: int | None = None
    title: str
    description: str = ""
    required_skills: list[str] = Field(default_factory=list)
    min_years: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_job(cls, job: Job) -> "JobFacts":
        return cls(
            job_id=job.id,
            company_id=job.company_id,
            title=job.title,
            description=job.description,
            required_skills=list(job.required_skills),
            min_years=job.min_years,
        )

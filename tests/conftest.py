from __future__ import annotations

from typing import Any

import pytest

from hiringscreen.storage import InMemoryStore


def seed_store(
    store: InMemoryStore,
    *,
    required_skills: list[str] | None = None,
    min_years: int = 5,
    skills: list[str] | None = None,
    experience_years: int = 6,
    resume_text: str | None = "Built React and Node.js products for six years.",
    seeker_id: int = 10,
    job_id: int = 1,
) -> dict[str, Any]:
    job = store.add_job(
        {
            "id": job_id,
            "company_id": 7,
            "title": "Senior React Developer",
            "description": "We are looking for an expert in React and Node.js.",
            "required_skills": ["React", "Node.js"] if required_skills is None else required_skills,
            "min_years": min_years,
        }
    )
    seeker = store.add_seeker(
        {
            "id": seeker_id,
            "email": f"seeker{seeker_id}@test.com",
            "profile": {
                "name": "Jane Doe",
                "skills": ["React", "Node.js", "TypeScript"] if skills is None else skills,
                "experience_years": experience_years,
                "resume_text": resume_text,
            },
        }
    )
    return {"job": job, "seeker": seeker}


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def seed(store: InMemoryStore):
    def _seed(target: InMemoryStore | None = None, **kwargs: Any) -> dict[str, Any]:
        return seed_store(target or store, **kwargs)

    return _seed


@pytest.fixture(autouse=True)
def _reset_structlog():
    import structlog

    yield
    structlog.reset_defaults()

from __future__ import annotations

import pytest

from hiringscreen.storage import (
    DuplicateApplicationError,
    InMemoryStore,
    NotFoundError,
    ScreeningStore,
)


def test_store_satisfies_screening_store_protocol(store: InMemoryStore):
    assert isinstance(store, ScreeningStore)


def test_context_projects_job_and_candidate_facts(store: InMemoryStore, seed):
    seed(resume_text=None)
    application = store.create_application(1, 10, note="Excited to join")

    context = store.get_application_with_context(application.id)

    assert context.application.note == "Excited to join"
    assert context.job.required_skills == ["React", "Node.js"]
    assert context.job.min_years == 5
    assert context.candidate.email == "seeker10@test.com"
    assert context.candidate.experience_years == 6
    assert context.candidate.resume_text is None


def test_seeker_without_profile_has_empty_facts(store: InMemoryStore, seed):
    seed()
    store.add_seeker({"id": 20, "email": "bare@test.com"})
    application = store.create_application(1, 20)

    candidate = store.get_application_with_context(application.id).candidate

    assert candidate.skills == []
    assert candidate.experience_years == 0


def test_create_application_checks_references(store: InMemoryStore, seed):
    seed()

    with pytest.raises(NotFoundError):
        store.create_application(99, 10)
    with pytest.raises(NotFoundError):
        store.create_application(1, 99)


def test_one_application_per_job_and_seeker(store: InMemoryStore, seed):
    seed()
    store.create_application(1, 10)

    with pytest.raises(DuplicateApplicationError) as excinfo:
        store.create_application(1, 10)

    assert (excinfo.value.job_id, excinfo.value.seeker_id) == (1, 10)


def test_get_or_create_is_idempotent(store: InMemoryStore, seed):
    seed()
    application = store.create_application(1, 10)

    first = store.get_or_create_screening_result(application.id)
    second = store.get_or_create_screening_result(application.id)

    assert first.id == second.id
    assert first.ai_status == "pending"
    assert len(store.screening_results()) == 1


def test_get_or_create_requires_an_application(store: InMemoryStore):
    with pytest.raises(NotFoundError):
        store.get_or_create_screening_result(1)


def test_update_validates_fields(store: InMemoryStore, seed):
    seed()
    result = store.get_or_create_screening_result(store.create_application(1, 10).id)

    with pytest.raises(ValueError):
        store.update_screening_result(result.id, rules_score=101)
    with pytest.raises(ValueError):
        store.update_screening_result(result.id, ai_status="done")
    with pytest.raises(ValueError):
        store.update_screening_result(result.id, application_id=3)
    with pytest.raises(NotFoundError):
        store.update_screening_result(999, ai_status="processing")


def test_status_update_rejects_unknown_status(store: InMemoryStore, seed):
    seed()
    application = store.create_application(1, 10)

    assert store.update_application_status(application.id, "interview").status == "interview"
    with pytest.raises(ValueError):
        store.update_application_status(application.id, "ghosted")


def test_job_listing_ranks_by_final_score(store: InMemoryStore, seed):
    seed(seeker_id=10)
    seed(seeker_id=11)
    seed(seeker_id=12)
    low = store.create_application(1, 10)
    high = store.create_application(1, 11)
    unscreened = store.create_application(1, 12)
    for application, score in ((low, 40), (high, 90)):
        result = store.get_or_create_screening_result(application.id)
        store.update_screening_result(
            result.id,
            rules_score=score,
            semantic_score=score,
            final_score=score,
            ai_status="complete",
        )

    rows = store.list_applications_for_job(1)

    assert [row["application"].id for row in rows] == [high.id, low.id, unscreened.id]
    assert rows[2]["screening"] is None
    assert [row["job"].id for row in store.list_applications_for_seeker(11)] == [1]


def test_snapshot_uses_persisted_field_names(store: InMemoryStore, seed):
    seed()
    application = store.create_application(1, 10)
    result = store.get_or_create_screening_result(application.id)
    store.update_screening_result(result.id, reasons=["a"], ai_questions=["q"], ai_status="processing")

    snapshot = store.snapshot()

    record = snapshot["screeningResults"][0]
    assert record["applicationId"] == application.id
    assert record["aiStatus"] == "processing"
    assert record["aiQuestions"] == ["q"]
    assert record["reasons"] == ["a"]
    assert record["rulesScore"] is None
    assert snapshot["applications"][0]["seekerId"] == 10


def test_records_accept_persisted_camel_case_names(store: InMemoryStore):
    store.add_job(
        {
            "id": 1,
            "companyId": 4,
            "title": "Senior React Developer",
            "requiredSkills": ["React", "Node.js"],
            "minYears": 5,
            "salaryMin": 120000,
        }
    )
    store.add_seeker(
        {
            "id": 10,
            "email": "seeker@test.com",
            "profile": {
                "skills": ["React"],
                "experienceYears": 6,
                "resumeText": "React since 2015.",
            },
        }
    )
    application = store.create_application(1, 10)

    context = store.get_application_with_context(application.id)

    assert context.job.required_skills == ["React", "Node.js"]
    assert context.job.min_years == 5
    assert context.job.company_id == 4
    assert context.candidate.experience_years == 6
    assert context.candidate.resume_text == "React since 2015."
    assert store.snapshot()["jobs"][0]["requiredSkills"] == ["React", "Node.js"]

"""Storage collaborator contract and an in-memory implementation."""

from __future__ import annotations

import threading
from typing import Any, Protocol, runtime_checkable

import pendulum

from .schemas import (
    APPLICATION_STATUSES,
    Application,
    ApplicationContext,
    CandidateFacts,
    Job,
    JobFacts,
    ScreeningResult,
    Seeker,
)


class NotFoundError(LookupError):
    """Raised when an application or one of its dependencies is missing."""


class DuplicateApplicationError(ValueError):
    """Raised when a seeker applies to the same job twice."""

    def __init__(self, job_id: int, seeker_id: int):
        super().__init__(f"Seeker {seeker_id} already applied to job {job_id}")
        self.job_id = job_id
        self.seeker_id = seeker_id


@runtime_checkable
class ScreeningStore(Protocol):
    """Persistence operations the screening pipeline relies on."""

    def get_application_with_context(self, application_id: int) -> ApplicationContext:
        """Return the application with its job and candidate facts."""

    def get_or_create_screening_result(self, application_id: int) -> ScreeningResult:
        """Return the screening result for an application, creating it if absent."""

    def update_screening_result(self, result_id: int, **fields: Any) -> ScreeningResult:
        """Apply ``fields`` to a screening result as a single update."""


class InMemoryStore:
    """Thread-safe dictionary-backed marketplace store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._jobs: dict[int, Job] = {}
        self._seekers: dict[int, Seeker] = {}
        self._applications: dict[int, Application] = {}
        self._results: dict[int, ScreeningResult] = {}
        self._results_by_application: dict[int, int] = {}
        self._next_application_id = 1
        self._next_result_id = 1

    # Jobs and seekers

    def add_job(self, job: Job | dict[str, Any]) -> Job:
        record = Job.model_validate(job)
        with self._lock:
            self._jobs[record.id] = record
        return record

    def add_seeker(self, seeker: Seeker | dict[str, Any]) -> Seeker:
        record = Seeker.model_validate(seeker)
        with self._lock:
            self._seekers[record.id] = record
        return record

    def get_job(self, job_id: int) -> Job:
        with self._lock:
            try:
                return self._jobs[job_id]
            except KeyError as exc:
                raise NotFoundError(f"Job {job_id} not found") from exc

    def get_seeker(self, seeker_id: int) -> Seeker:
        with self._lock:
            try:
                return self._seekers[seeker_id]
            except KeyError as exc:
                raise NotFoundError(f"Seeker {seeker_id} not found") from exc

    # Applications

    def create_application(
        self,
        job_id: int,
        seeker_id: int,
        *,
        note: str | None = None,
    ) -> Application:
        with self._lock:
            self.get_job(job_id)
            self.get_seeker(seeker_id)
            for existing in self._applications.values():
                if existing.job_id == job_id and existing.seeker_id == seeker_id:
                    raise DuplicateApplicationError(job_id, seeker_id)
            application = Application(
                id=self._next_application_id,
                job_id=job_id,
                seeker_id=seeker_id,
                note=note,
            )
            self._applications[application.id] = application
            self._next_application_id += 1
            return application

    def get_application(self, application_id: int) -> Application:
        with self._lock:
            try:
                return self._applications[application_id]
            except KeyError as exc:
                raise NotFoundError(f"Application {application_id} not found") from exc

    def update_application_status(self, application_id: int, status: str) -> Application:
        if status not in APPLICATION_STATUSES:
            raise ValueError(f"Unknown application status: {status!r}")
        with self._lock:
            current = self.get_application(application_id)
            updated = Application.model_validate(
                {**current.model_dump(), "status": status, "updated_at": _now()}
            )
            self._applications[application_id] = updated
            return updated

    def get_application_with_context(self, application_id: int) -> ApplicationContext:
        with self._lock:
            application = self.get_application(application_id)
            job = self.get_job(application.job_id)
            seeker = self.get_seeker(application.seeker_id)
        return ApplicationContext(
            application=application,
            job=JobFacts.from_job(job),
            candidate=CandidateFacts.from_seeker(seeker),
        )

    def list_applications_for_job(self, job_id: int) -> list[dict[str, Any]]:
        """Employer listing: applications with seeker and screening, best first."""
        with self._lock:
            rows = [
                {
                    "application": app,
                    "seeker": self._seekers.get(app.seeker_id),
                    "screening": self._screening_for(app.id),
                }
                for app in self._applications.values()
                if app.job_id == job_id
            ]
        return sorted(rows, key=_ranking_key)

    def list_applications_for_seeker(self, seeker_id: int) -> list[dict[str, Any]]:
        with self._lock:
            return [
                {
                    "application": app,
                    "job": self._jobs.get(app.job_id),
                    "screening": self._screening_for(app.id),
                }
                for app in self._applications.values()
                if app.seeker_id == seeker_id
            ]

    # Screening results

    def get_screening_result(self, application_id: int) -> ScreeningResult | None:
        with self._lock:
            return self._screening_for(application_id)

    def get_or_create_screening_result(self, application_id: int) -> ScreeningResult:
        with self._lock:
            self.get_application(application_id)
            existing = self._screening_for(application_id)
            if existing is not None:
                return existing
            result = ScreeningResult(id=self._next_result_id, application_id=application_id)
            self._results[result.id] = result
            self._results_by_application[application_id] = result.id
            self._next_result_id += 1
            return result

    def update_screening_result(self, result_id: int, **fields: Any) -> ScreeningResult:
        forbidden = {"id", "application_id", "created_at"} & fields.keys()
        if forbidden:
            raise ValueError(f"Immutable screening fields: {sorted(forbidden)}")
        with self._lock:
            try:
                current = self._results[result_id]
            except KeyError as exc:
                raise NotFoundError(f"Screening result {result_id} not found") from exc
            updated = ScreeningResult.model_validate(
                {**current.model_dump(), **fields, "updated_at": _now()}
            )
            self._results[result_id] = updated
            return updated

    def screening_results(self) -> list[ScreeningResult]:
        with self._lock:
            return list(self._results.values())

    def snapshot(self) -> dict[str, Any]:
        """Serialize every record with the persisted (camelCase) field names."""
        with self._lock:
            return {
                "jobs": [job.model_dump(mode="json", by_alias=True) for job in self._jobs.values()],
                "applications": [
                    app.model_dump(mode="json", by_alias=True)
                    for app in self._applications.values()
                ],
                "screeningResults": [
                    result.model_dump(mode="json", by_alias=True)
                    for result in self._results.values()
                ],
            }

    def _screening_for(self, application_id: int) -> ScreeningResult | None:
        result_id = self._results_by_application.get(application_id)
        if result_id is None:
            return None
        return self._results[result_id]


def _now() -> str:
    return pendulum.now("UTC").to_iso8601_string()


def _ranking_key(row: dict[str, Any]) -> tuple[int, int, int]:
    screening = row["screening"]
    score = screening.final_score if screening is not None else None
    if score is None:
        return (1, 0, row["application"].id)
    return (0, -score, row["application"].id)

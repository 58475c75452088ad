"""Screening pipeline assembly and execution."""

from __future__ import annotations

import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

import structlog

from .core import (
    NoopEvaluator,
    RulesScorer,
    ScoreAggregator,
    ScreeningStateMachine,
    SemanticEvaluator,
)
from .schemas import Application, ScreeningResult
from .storage import InMemoryStore, NotFoundError, ScreeningStore


class InvalidTriggerInput(ValueError):
    """Raised synchronously when a trigger receives a malformed identifier."""


def parse_application_id(raw: Any) -> int:
    """Coerce a trigger argument into a positive application id."""
    if isinstance(raw, bool):
        raise InvalidTriggerInput(f"Invalid application id: {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise InvalidTriggerInput(f"Invalid application id: {raw!r}")
    if value <= 0:
        raise InvalidTriggerInput(f"Application id must be positive, got {value}")
    return value


class ScreeningOrchestrator:
    """Run one screening: gather facts, score, and settle the result."""

    def __init__(
        self,
        *,
        store: ScreeningStore,
        rules_scorer: RulesScorer | None = None,
        semantic_evaluator: SemanticEvaluator | None = None,
        aggregator: ScoreAggregator | None = None,
        state_machine: ScreeningStateMachine | None = None,
    ) -> None:
        self._store = store
        self._rules = rules_scorer or RulesScorer()
        self._semantic = semantic_evaluator or NoopEvaluator()
        self._aggregator = aggregator or ScoreAggregator()
        self._states = state_machine or ScreeningStateMachine(store)
        self._logger = structlog.get_logger(__name__)

    def run_screening(self, application_id: int) -> ScreeningResult | None:
        """Screen an application; never raises.

        Returns the settled result, or ``None`` when the application (or its
        job/seeker) does not exist or the result could not be written at all.
        """
        log = self._logger.bind(application_id=application_id)
        try:
            context = self._store.get_application_with_context(application_id)
        except NotFoundError as exc:
            log.warning("screening.not_found", error=str(exc))
            return None
        except Exception:  # noqa: BLE001
            log.error("screening.context_failed", exc_info=True)
            return None

        try:
            result = self._states.begin(application_id)
        except Exception:  # noqa: BLE001
            log.error("screening.begin_failed", exc_info=True)
            return None

        log.info("screening.started", result_id=result.id)
        try:
            breakdown = self._rules.explain(context.candidate, context.job)
            rules_score = self._rules.score_breakdown(breakdown)
            evaluation = self._semantic.evaluate(
                context.candidate,
                context.job,
                rules_score=rules_score,
            )
            final_score = self._aggregator.combine(rules_score, evaluation.semantic_score)
            settled = self._states.complete(
                result,
                rules_score=rules_score,
                semantic_score=evaluation.semantic_score,
                final_score=final_score,
                reasons=evaluation.reasons,
                summary=evaluation.summary,
                questions=evaluation.questions,
            )
        except Exception as exc:  # noqa: BLE001
            log.error("screening.failed", error=str(exc), exc_info=True)
            return self._settle_failed(result, log)

        log.info(
            "screening.complete",
            rules_score=rules_score,
            semantic_score=evaluation.semantic_score,
            final_score=final_score,
            provider_final_score=evaluation.final_score,
            source=evaluation.source,
            matched_skills=breakdown.matched_skills,
            missing_skills=breakdown.missing_skills,
        )
        return settled

    def _settle_failed(self, result: ScreeningResult, log: Any) -> ScreeningResult | None:
        try:
            return self._states.fail(result)
        except Exception:  # noqa: BLE001
            log.error("screening.fail_write_failed", result_id=result.id, exc_info=True)
            return None


class ScreeningDispatcher:
    """Submit screenings as background tasks, one in flight per application.

    A trigger that arrives while a run is in flight queues a single follow-up
    run, started once the current one settles, so later edits to the
    application's facts are always scored. Further triggers before the
    follow-up starts share it.
    """

    def __init__(
        self,
        *,
        orchestrator: ScreeningOrchestrator,
        max_workers: int | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or 4,
            thread_name_prefix="screening",
        )
        # Reentrant: a done-callback may fire synchronously while the lock is held.
        self._lock = threading.RLock()
        self._inflight: dict[int, Future] = {}
        self._follow_ups: dict[int, Future] = {}
        self._logger = structlog.get_logger(__name__)

    def trigger(self, application_id: Any) -> Future:
        """Schedule a screening run and return immediately.

        Raises :class:`InvalidTriggerInput` for malformed ids.
        """
        app_id = parse_application_id(application_id)
        with self._lock:
            running = self._inflight.get(app_id)
            if running is None or running.done():
                return self._submit(app_id)
            follow_up = self._follow_ups.get(app_id)
            if follow_up is None:
                follow_up = Future()
                self._follow_ups[app_id] = follow_up
                self._logger.info("screening.follow_up_queued", application_id=app_id)
            return follow_up

    def pending(self) -> list[Future]:
        with self._lock:
            running = [future for future in self._inflight.values() if not future.done()]
            return running + list(self._follow_ups.values())

    def wait(self) -> None:
        """Block until every scheduled run, follow-ups included, has settled."""
        while True:
            futures = self.pending()
            if not futures:
                return
            for future in futures:
                future.result()

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _submit(self, application_id: int) -> Future:
        future = self._executor.submit(self._run, application_id)
        self._inflight[application_id] = future
        future.add_done_callback(lambda done, key=application_id: self._settled(key, done))
        return future

    def _run(self, application_id: int) -> ScreeningResult | None:
        try:
            return self._orchestrator.run_screening(application_id)
        except Exception:  # noqa: BLE001
            self._logger.error("screening.task_crashed", application_id=application_id, exc_info=True)
            return None

    def _settled(self, application_id: int, future: Future) -> None:
        with self._lock:
            if self._inflight.get(application_id) is not future:
                return
            del self._inflight[application_id]
            follow_up = self._follow_ups.pop(application_id, None)
            if follow_up is None or not follow_up.set_running_or_notify_cancel():
                return
            try:
                next_run = self._submit(application_id)
            except RuntimeError as exc:
                # Executor already shut down.
                follow_up.set_exception(exc)
                return
        next_run.add_done_callback(lambda done: _transfer(done, follow_up))


def _transfer(source: Future, target: Future) -> None:
    exc = source.exception()
    if exc is not None:
        target.set_exception(exc)
    else:
        target.set_result(source.result())


class HiringService:
    """Entry points that create applications and trigger their screening."""

    def __init__(self, *, store: InMemoryStore, dispatcher: ScreeningDispatcher) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._logger = structlog.get_logger(__name__)

    def submit_application(
        self,
        job_id: int,
        seeker_id: int,
        *,
        note: str | None = None,
    ) -> Application:
        application = self._store.create_application(job_id, seeker_id, note=note)
        self._logger.info(
            "application.created",
            application_id=application.id,
            job_id=job_id,
            seeker_id=seeker_id,
        )
        self.trigger_screening(application.id)
        return application

    def trigger_screening(self, application_id: Any) -> Future:
        return self._dispatcher.trigger(application_id)

    def reprocess(self, application_id: Any) -> Future:
        app_id = parse_application_id(application_id)
        self._store.get_application(app_id)
        return self.trigger_screening(app_id)

    def update_status(self, application_id: int, status: str) -> Application:
        return self._store.update_application_status(application_id, status)

    def get_screening(self, application_id: int) -> ScreeningResult | None:
        return self._store.get_screening_result(application_id)


class SeedLoadError(ValueError):
    """Raised when a seed document is malformed."""


class SeedLoader:
    """Load jobs and seekers, and list application requests, from JSON."""

    def load(self, path: Path, store: InMemoryStore) -> list[dict[str, Any]]:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise SeedLoadError(f"Invalid seed JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SeedLoadError("Seed document must be a JSON object")

        for job in data.get("jobs", []):
            store.add_job(job)
        for seeker in data.get("seekers", []):
            store.add_seeker(seeker)

        requests: list[dict[str, Any]] = []
        for idx, entry in enumerate(data.get("applications", []), start=1):
            if not isinstance(entry, dict) or "jobId" not in entry or "seekerId" not in entry:
                raise SeedLoadError(f"application {idx}: jobId and seekerId are required")
            try:
                job_id = int(entry["jobId"])
                seeker_id = int(entry["seekerId"])
            except (TypeError, ValueError) as exc:
                raise SeedLoadError(f"application {idx}: jobId and seekerId must be integers") from exc
            requests.append({"job_id": job_id, "seeker_id": seeker_id, "note": entry.get("note")})
        return requests


class OutputWriter:
    """Persist screening outcomes."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

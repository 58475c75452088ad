"""Lifecycle of a screening result's ``ai_status``."""

from __future__ import annotations

from typing import Any

import structlog

from ..schemas import AiStatus, ScreeningResult
from ..storage import ScreeningStore

TERMINAL_STATES: frozenset[str] = frozenset({"complete", "failed"})

TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"processing"}),
    "processing": frozenset({"processing", "complete", "failed"}),
    "complete": frozenset({"processing"}),
    "failed": frozenset({"processing"}),
}


class InvalidTransition(RuntimeError):
    """Raised when a screening result is moved to an unreachable state."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move screening from {current!r} to {target!r}")
        self.current = current
        self.target = target


class ScreeningStateMachine:
    """Apply lifecycle transitions to screening results through the store."""

    def __init__(self, store: ScreeningStore) -> None:
        self._store = store
        self._logger = structlog.get_logger(__name__)

    def begin(self, application_id: int) -> ScreeningResult:
        """Ensure a result exists for the application and mark it processing."""
        result = self._store.get_or_create_screening_result(application_id)
        return self._transition(result, "processing")

    def complete(
        self,
        result: ScreeningResult,
        *,
        rules_score: int,
        semantic_score: int,
        final_score: int,
        reasons: list[str],
        summary: str,
        questions: list[str],
    ) -> ScreeningResult:
        """Write every score field and ``complete`` as one update."""
        return self._transition(
            result,
            "complete",
            rules_score=rules_score,
            semantic_score=semantic_score,
            final_score=final_score,
            reasons=list(reasons),
            ai_summary=summary,
            ai_questions=list(questions),
        )

    def fail(self, result: ScreeningResult) -> ScreeningResult:
        """Mark the run failed; previous scores stay as they were."""
        return self._transition(result, "failed")

    def _transition(
        self,
        result: ScreeningResult,
        target: AiStatus,
        **fields: Any,
    ) -> ScreeningResult:
        # Re-read: another run may have moved the record since ``result`` was fetched.
        current = self._store.get_or_create_screening_result(result.application_id)
        check_transition(current.ai_status, target)
        if current.ai_status in TERMINAL_STATES and target in TERMINAL_STATES:
            self._logger.warning(
                "state.concurrent_settle",
                application_id=result.application_id,
                current=current.ai_status,
                target=target,
            )
        return self._store.update_screening_result(current.id, ai_status=target, **fields)


def check_transition(current: str, target: str) -> None:
    """Raise :class:`InvalidTransition` unless ``current -> target`` is allowed.

    Terminal to terminal is accepted: two overlapping runs settle with
    last-write-wins.
    """
    if target in TRANSITIONS.get(current, frozenset()):
        return
    if current in TERMINAL_STATES and target in TERMINAL_STATES:
        return
    raise InvalidTransition(current, target)

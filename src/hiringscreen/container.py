"""Dependency injection container for the screening pipeline."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    NoopEvaluator,
    RemoteEvaluator,
    RulesScorer,
    RulesScorerConfig,
    ScoreAggregator,
    ScreeningStateMachine,
)
from .llm import HTTPChatClient
from .pipeline import HiringService, ScreeningDispatcher, ScreeningOrchestrator
from .storage import InMemoryStore


class ScreeningContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    store = providers.Singleton(InMemoryStore)

    rules_scorer = providers.Singleton(RulesScorer)

    aggregator = providers.Singleton(
        ScoreAggregator,
        rules_weight=config.aggregate.rules_weight,
        semantic_weight=config.aggregate.semantic_weight,
    )

    semantic_evaluator = providers.Singleton(NoopEvaluator)

    state_machine = providers.Singleton(ScreeningStateMachine, store=store)

    orchestrator = providers.Singleton(
        ScreeningOrchestrator,
        store=store,
        rules_scorer=rules_scorer,
        semantic_evaluator=semantic_evaluator,
        aggregator=aggregator,
        state_machine=state_machine,
    )

    dispatcher = providers.Singleton(
        ScreeningDispatcher,
        orchestrator=orchestrator,
        max_workers=config.dispatcher.max_workers,
    )

    service = providers.Factory(
        HiringService,
        store=store,
        dispatcher=dispatcher,
    )


def create_container(
    *,
    settings: dict | None = None,
    api_key: str | None = None,
) -> ScreeningContainer:
    """Instantiate container with optional overrides.

    The semantic evaluator is chosen here, once: a configured ``api_key``
    selects the remote provider, otherwise the fixed mock is used.
    """

    container = ScreeningContainer()
    settings = settings if isinstance(settings, dict) else {}

    section_settings = {
        key: settings[key] for key in ("aggregate", "dispatcher") if settings.get(key)
    }
    if section_settings:
        container.config.override(section_settings)

    if settings.get("rules"):
        rules_config = RulesScorerConfig(**settings["rules"])
        container.rules_scorer.override(providers.Singleton(RulesScorer, config=rules_config))

    if api_key:
        llm_settings = settings.get("llm") or {}
        client = providers.Singleton(
            HTTPChatClient,
            api_key,
            endpoint=llm_settings.get("endpoint"),
            model=llm_settings.get("model"),
            timeout=llm_settings.get("timeout"),
        )
        container.semantic_evaluator.override(
            providers.Singleton(
                RemoteEvaluator,
                client=client,
                resume_excerpt_chars=llm_settings.get("resume_excerpt_chars"),
            )
        )

    return container

"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class RulesConfig(BaseModel):
    skill_weight: float | None = Field(default=None, ge=0.0)
    experience_weight: float | None = Field(default=None, ge=0.0)


class AggregateConfig(BaseModel):
    rules_weight: float | None = Field(default=None, ge=0.0)
    semantic_weight: float | None = Field(default=None, ge=0.0)


class LLMConfig(BaseModel):
    endpoint: str | None = None
    model: str | None = None
    timeout: float | None = Field(default=None, gt=0.0)
    resume_excerpt_chars: int | None = Field(default=None, gt=0)


class DispatcherConfig(BaseModel):
    max_workers: int | None = Field(default=None, ge=1)


class AppConfig(BaseModel):
    rules: RulesConfig = Field(default_factory=RulesConfig)
    aggregate: AggregateConfig = Field(default_factory=AggregateConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    dispatcher: DispatcherConfig = Field(default_factory=DispatcherConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("rules", "aggregate", "llm", "dispatcher"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)

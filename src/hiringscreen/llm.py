"""Chat completion client used by the remote semantic evaluator."""

from __future__ import annotations

import http.client
import json
from typing import Any, Protocol, runtime_checkable
from urllib import request

import structlog

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o"


class ChatTransportError(RuntimeError):
    """Raised when the chat provider cannot be reached or answers badly."""


@runtime_checkable
class ChatClient(Protocol):
    """Natural-language provider contract."""

    def complete(self, prompt: str) -> str:
        """Return the raw text of a JSON-shaped completion for ``prompt``."""


class HTTPChatClient:
    """Minimal HTTP client for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint or DEFAULT_ENDPOINT
        self._model = model or DEFAULT_MODEL
        self._timeout = timeout or 30.0
        self._logger = structlog.get_logger(__name__)

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
        }

    def complete(self, prompt: str) -> str:
        data = json.dumps(self.build_payload(prompt), ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except (OSError, http.client.HTTPException, UnicodeDecodeError) as exc:
            self._logger.warning("llm.request_failed", endpoint=self._endpoint, error=str(exc))
            raise ChatTransportError(f"Chat completion request failed: {exc}") from exc

        try:
            envelope = json.loads(body)
            content = envelope["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
            self._logger.warning("llm.bad_envelope", endpoint=self._endpoint, error=str(exc))
            raise ChatTransportError("Chat completion response had an unexpected shape") from exc
        return content or "{}"

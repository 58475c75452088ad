from __future__ import annotations

import io
import json
import socket
import threading
from urllib import error

import pytest

from hiringscreen import llm
from hiringscreen.core import EvaluationFailed, RemoteEvaluator
from hiringscreen.llm import ChatClient, ChatTransportError, HTTPChatClient
from hiringscreen.schemas import CandidateFacts, JobFacts


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def test_complete_posts_chat_request_and_returns_message(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    def fake_urlopen(req, timeout):
        captured["url"] = req.full_url
        captured["timeout"] = timeout
        captured["headers"] = dict(req.header_items())
        captured["body"] = json.loads(req.data.decode("utf-8"))
        envelope = {"choices": [{"message": {"content": '{"semanticScore": 70}'}}]}
        return FakeResponse(json.dumps(envelope).encode("utf-8"))

    monkeypatch.setattr(llm.request, "urlopen", fake_urlopen)
    client = HTTPChatClient("sk-test", endpoint="http://llm.local/v1/chat", timeout=3)

    content = client.complete("Analyze fit.")

    assert isinstance(client, ChatClient)
    assert content == '{"semanticScore": 70}'
    assert captured["url"] == "http://llm.local/v1/chat"
    assert captured["timeout"] == 3
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["body"]["model"] == llm.DEFAULT_MODEL
    assert captured["body"]["messages"] == [{"role": "user", "content": "Analyze fit."}]
    assert captured["body"]["response_format"] == {"type": "json_object"}


def test_transport_failure_raises_chat_transport_error(monkeypatch: pytest.MonkeyPatch):
    def fake_urlopen(req, timeout):
        raise error.URLError("connection refused")

    monkeypatch.setattr(llm.request, "urlopen", fake_urlopen)

    with pytest.raises(ChatTransportError):
        HTTPChatClient("sk-test").complete("prompt")


def test_unexpected_envelope_raises_chat_transport_error(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        llm.request,
        "urlopen",
        lambda req, timeout: FakeResponse(b'{"error": "rate limited"}'),
    )

    with pytest.raises(ChatTransportError):
        HTTPChatClient("sk-test").complete("prompt")


@pytest.fixture
def hangup_endpoint():
    """Local endpoint that reads the request and closes without answering."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    server.settimeout(5)

    def serve():
        try:
            conn, _ = server.accept()
        except OSError:
            return
        with conn:
            conn.recv(65536)

    worker = threading.Thread(target=serve, daemon=True)
    worker.start()
    host, port = server.getsockname()
    yield f"http://{host}:{port}/v1/chat/completions"
    worker.join(timeout=5)
    server.close()


def test_closed_connection_surfaces_as_evaluation_failed(hangup_endpoint: str):
    client = HTTPChatClient("sk-test", endpoint=hangup_endpoint, timeout=5)
    evaluator = RemoteEvaluator(client)

    with pytest.raises(EvaluationFailed) as excinfo:
        evaluator.evaluate(
            CandidateFacts(seeker_id=1, email="seeker@test.com"),
            JobFacts(job_id=1, title="Engineer"),
            rules_score=50,
        )

    assert isinstance(excinfo.value.__cause__, ChatTransportError)


def test_undecodable_body_raises_chat_transport_error(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(llm.request, "urlopen", lambda req, timeout: FakeResponse(b"\xff\xfe\xfa"))

    with pytest.raises(ChatTransportError):
        HTTPChatClient("sk-test").complete("prompt")

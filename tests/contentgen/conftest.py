import sys
from pathlib import Path

import httpx
import pytest


def pytest_configure():
    # src/ layout: make the package importable without an editable install.
    repo_root = Path(__file__).resolve().parents[2]
    src_path = str(repo_root / "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture
def settings():
    """Fixture: factory for GenerationSettings with sensible defaults."""

    def _factory(**overrides):
        from contentgen.llm.types import GenerationSettings

        values = {
            "tone": "casual",
            "creativity_level": "50",
            "target_audience": "general",
            "content_length": 60,
        }
        values.update(overrides)
        return GenerationSettings(**values)

    return _factory


@pytest.fixture
def mock_http():
    """Fixture: factory for an httpx.AsyncClient backed by a MockTransport.

    The returned client records every request in `client.seen`.
    """

    def _factory(handler):
        seen = []

        def _recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
        client.seen = seen  # type: ignore[attr-defined]
        return client

    return _factory


@pytest.fixture
def chat_completion():
    """Fixture: OpenAI-style chat completion body with the given content."""

    def _factory(content):
        return {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "llama3-8b-8192",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }

    return _factory


@pytest.fixture
def gemini_body():
    def _factory(text):
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}

    return _factory

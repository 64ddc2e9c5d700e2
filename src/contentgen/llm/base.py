from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from .types import GenerationSettings, ParseResult

JSON_SHAPE = '{"title": "string", "body": "string", "tags": ["array"], "mediaUrl": "string"}'
GENERIC_ERROR_MESSAGE = "API request failed"


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    model: str
    # None when the provider exposes no output cap
    max_output_tokens: int | None = None


class ContentProvider(Protocol):
    """One external LLM service that turns a prompt into a content record."""

    config: ProviderConfig

    async def generate(self, prompt: str, settings: GenerationSettings) -> ParseResult:
        raise NotImplementedError


def style_instruction(settings: GenerationSettings, *, creativity_label: str = "creativity level") -> str:
    """Describe tone, creativity and audience and demand the JSON shape."""
    return (
        f"Generate content with {settings.tone} tone, "
        f"{settings.creativity_level}% {creativity_label}, "
        f"and target audience: {settings.target_audience}. "
        f"Always return valid JSON with the exact structure: {JSON_SHAPE}."
    )


def error_message_from(response: httpx.Response, *path: str) -> str:
    """Dig the provider's error message out of a failed response body."""
    try:
        data: Any = response.json()
    except ValueError:
        return GENERIC_ERROR_MESSAGE

    for key in path:
        if not isinstance(data, dict):
            return GENERIC_ERROR_MESSAGE
        data = data.get(key)

    if isinstance(data, str) and data:
        return data
    return GENERIC_ERROR_MESSAGE

from __future__ import annotations

from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from contentgen import config
from contentgen import logger as logger_mod

from ._json import parse_ai_response
from .base import GENERIC_ERROR_MESSAGE, ContentProvider, ProviderConfig, style_instruction
from .errors import ProviderError
from .types import GenerationSettings, ParseResult

log = logger_mod.get_logger()

DEFAULT_CONFIG = ProviderConfig(
    provider="groq",
    model=config.GROQ_MODEL,
    max_output_tokens=config.MAX_OUTPUT_TOKENS,
)


class GroqLLM(ContentProvider):
    """Groq chat completions through its OpenAI-compatible endpoint.

    SDK-level retries are disabled; deadlines and retries belong to the
    orchestrator's retry wrapper.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        provider_config: ProviderConfig = DEFAULT_CONFIG,
    ):
        self.config = provider_config
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=config.GROQ_BASE_URL,
            http_client=http_client,
            max_retries=0,
        )

    @staticmethod
    def _status_error_message(error: APIStatusError) -> str:
        body: Any = error.body
        if isinstance(body, dict):
            # The SDK unwraps {"error": {...}}; tolerate both shapes.
            inner = body.get("error", body)
            message = inner.get("message") if isinstance(inner, dict) else None
            if isinstance(message, str) and message:
                return message
        return GENERIC_ERROR_MESSAGE

    async def generate(self, prompt: str, settings: GenerationSettings) -> ParseResult:
        try:
            resp = await self._client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {
                        "role": "system",
                        "content": f"You are a content generator. {style_instruction(settings)}",
                    },
                    {"role": "user", "content": prompt},
                ],
                temperature=settings.temperature,
                max_tokens=self.config.max_output_tokens,
            )
        except APIStatusError as e:
            raise ProviderError(f"Groq API error: {self._status_error_message(e)}") from e
        except APIConnectionError as e:
            raise ProviderError(f"Groq API error: {e}") from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None
        if not content:
            raise ProviderError("Groq API returned no content")

        log.debug(f"Groq returned {len(content)} chars from {self.config.model}")
        return parse_ai_response(content)
from __future__ import annotations

from typing import Any

import httpx

from contentgen import config
from contentgen import logger as logger_mod

from ._json import parse_ai_response
from .base import ContentProvider, ProviderConfig, error_message_from, style_instruction
from .errors import ProviderError
from .types import GenerationSettings, ParseResult

log = logger_mod.get_logger()

DEFAULT_CONFIG = ProviderConfig(
    provider="gemini",
    model=config.GEMINI_MODEL,
    max_output_tokens=config.MAX_OUTPUT_TOKENS,
)

# Fixed policy, not configurable per request.
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiLLM(ContentProvider):
    """Google Gemini generateContent over REST."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        provider_config: ProviderConfig = DEFAULT_CONFIG,
    ):
        self.config = provider_config
        self._api_key = api_key
        self._http = http_client

    def _endpoint(self) -> str:
        return f"{config.GEMINI_BASE_URL}/models/{self.config.model}:generateContent"

    def build_payload(self, prompt: str, settings: GenerationSettings) -> dict[str, Any]:
        text = f"{prompt}\n\n{style_instruction(settings, creativity_label='creativity')}"
        return {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "temperature": settings.temperature,
                "maxOutputTokens": self.config.max_output_tokens,
                "topP": 0.8,
                "topK": 40,
            },
            "safetySettings": SAFETY_SETTINGS,
        }

    @staticmethod
    def _extract_text(data: Any) -> str | None:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) else None

    async def generate(self, prompt: str, settings: GenerationSettings) -> ParseResult:
        try:
            response = await self._http.post(
                self._endpoint(),
                params={"key": self._api_key},
                json=self.build_payload(prompt, settings),
            )
        except httpx.HTTPError as e:
            # Avoid str(e): httpx may render the request URL, which carries the key.
            raise ProviderError(f"Gemini API error: {type(e).__name__}") from e

        if not response.is_success:
            message = error_message_from(response, "error", "message")
            raise ProviderError(f"Gemini API error: {message}")

        try:
            data = response.json()
        except ValueError:
            data = None
        content = self._extract_text(data)
        if not content:
            raise ProviderError("Gemini API returned no content")

        log.debug(f"Gemini returned {len(content)} chars from {self.config.model}")
        return parse_ai_response(content)

from __future__ import annotations

import httpx

from contentgen import config
from contentgen import logger as logger_mod

from ._json import parse_ai_response
from .base import ContentProvider, ProviderConfig, error_message_from, style_instruction
from .errors import ProviderError
from .types import GenerationSettings, ParseResult

log = logger_mod.get_logger()

# The proxy accepts only messages and web_access, so no output cap is configured.
DEFAULT_CONFIG = ProviderConfig(provider="rapidapi", model="gpt4")


class RapidAPILLM(ContentProvider):
    """ChatGPT proxy hosted on RapidAPI."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        provider_config: ProviderConfig = DEFAULT_CONFIG,
    ):
        self.config = provider_config
        self._api_key = api_key
        self._http = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "x-rapidapi-key": self._api_key,
            "x-rapidapi-host": config.RAPIDAPI_HOST,
            "Content-Type": "application/json",
        }

    async def generate(self, prompt: str, settings: GenerationSettings) -> ParseResult:
        payload = {
            "messages": [
                {"role": "user", "content": f"{prompt}\n\n{style_instruction(settings)}"}
            ],
            "web_access": False,
        }
        try:
            response = await self._http.post(config.RAPIDAPI_URL, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            raise ProviderError(f"RapidAPI error: {e}") from e

        if not response.is_success:
            raise ProviderError(f"RapidAPI error: {error_message_from(response, 'message')}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("Invalid response from RapidAPI") from e
        if not isinstance(data, dict) or not data.get("status") or not data.get("result"):
            raise ProviderError("Invalid response from RapidAPI")

        result = data["result"]
        if not isinstance(result, str):
            result = str(result)
        log.debug(f"RapidAPI returned {len(result)} chars")
        return parse_ai_response(result)

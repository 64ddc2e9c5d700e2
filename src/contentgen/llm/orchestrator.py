from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

import httpx

from contentgen import logger as logger_mod

from ._retry import with_timeout
from .errors import AllProvidersFailedError, ConfigurationError, ContentGenerationError
from .factory import PROVIDERS, ProviderSpec, build_provider
from .types import GeneratedContent, GenerationRequest
from .validation import validate_content_quality

log = logger_mod.get_logger()

# (substrings, provider); first match wins
_MODEL_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("groq", "llama"), "groq"),
    (("gemini",), "gemini"),
    (("rapidapi", "gpt"), "rapidapi"),
)


def normalize_model_hint(hint: Optional[str]) -> Optional[str]:
    """Map a free-form model name onto a provider name, or None."""
    if not hint:
        return None
    for needles, provider in _MODEL_HINTS:
        if any(n in hint for n in needles):
            return provider
    return None


def prioritize_providers(available: Sequence[str], hint: Optional[str]) -> list[str]:
    """Move the hinted provider to the front when it is available."""
    preferred = normalize_model_hint(hint)
    if preferred is None or preferred not in available:
        return list(available)
    return [preferred] + [p for p in available if p != preferred]


@dataclass(frozen=True)
class ProviderAttempt:
    provider: str
    error: str


class FallbackOrchestrator:
    """Try providers in priority order until one produces valid content."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        registry: Mapping[str, ProviderSpec] = PROVIDERS,
    ):
        self._http = http_client
        self._registry = registry

    async def _attempt(
        self, provider: str, request: GenerationRequest, api_key: str
    ) -> GeneratedContent:
        spec = self._registry[provider]
        client = build_provider(
            provider, api_key=api_key, http_client=self._http, registry=self._registry
        )
        parsed = await with_timeout(
            lambda: client.generate(request.prompt, request.settings),
            spec.retry,
            context=provider,
        )
        if parsed.is_fallback:
            log.info(f"{provider} response was not JSON; using raw text as body")
        return validate_content_quality(parsed.record, request.settings)

    async def generate(
        self,
        request: GenerationRequest,
        credentials: Mapping[str, str],
        available: Optional[Iterable[str]] = None,
    ) -> GeneratedContent:
        """Return the first validated result across `available` providers.

        `available` defaults to every registered provider with a credential,
        in registry order.

        Raises ConfigurationError when no provider is available and
        AllProvidersFailedError when every provider failed.
        """

        if available is None:
            available = [p for p in self._registry if credentials.get(p)]
        ordered = prioritize_providers(
            [p for p in available if p in self._registry], request.requested_model
        )
        if not ordered:
            raise ConfigurationError(
                "No LLM API keys configured. Please set up at least one AI API key."
            )

        attempts: list[ProviderAttempt] = []
        last_error: Optional[Exception] = None
        for provider in ordered:
            log.info(f"Attempting to generate content with {provider}...")
            try:
                content = await self._attempt(provider, request, credentials[provider])
            except ContentGenerationError as e:
                log.error(f"LLM {provider} failed: {e}")
                attempts.append(ProviderAttempt(provider, str(e)))
                last_error = e
                continue
            except Exception as e:  # noqa: BLE001
                # Adapter bugs or client-side failures (e.g. a key that cannot be
                # encoded into a header) still fall through to the next provider.
                log.exception(f"LLM {provider} failed unexpectedly: {e}")
                attempts.append(ProviderAttempt(provider, str(e)))
                last_error = e
                continue

            log.info(f"Successfully generated content with {provider}")
            return content

        raise AllProvidersFailedError(
            f"All available LLMs failed: {last_error}", attempts=attempts
        ) from last_error

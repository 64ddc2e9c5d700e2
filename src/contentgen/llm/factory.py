from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

import httpx

from ._retry import RetryPolicy
from .base import ContentProvider
from .errors import ConfigurationError
from .gemini_client import GeminiLLM
from .groq_client import GroqLLM
from .rapidapi_client import RapidAPILLM

ProviderFactory = Callable[[str, httpx.AsyncClient], ContentProvider]


@dataclass(frozen=True)
class ProviderSpec:
    """How to build one provider and how long to wait for it."""

    name: str
    factory: ProviderFactory
    retry: RetryPolicy


# Natural order; a provider's position here is its default priority.
PROVIDERS: Mapping[str, ProviderSpec] = {
    "groq": ProviderSpec("groq", GroqLLM, RetryPolicy(timeout_s=8.0, retries=1)),
    "gemini": ProviderSpec("gemini", GeminiLLM, RetryPolicy(timeout_s=12.0, retries=2)),
    "rapidapi": ProviderSpec("rapidapi", RapidAPILLM, RetryPolicy(timeout_s=10.0, retries=1)),
}


def build_provider(
    name: str,
    *,
    api_key: str,
    http_client: httpx.AsyncClient,
    registry: Mapping[str, ProviderSpec] = PROVIDERS,
) -> ContentProvider:
    """Factory for provider clients.

    Providers:
    - groq
    - gemini
    - rapidapi

    Extend by adding a client and a ProviderSpec entry in PROVIDERS.
    """

    p = name.lower().strip()
    spec = registry.get(p)
    if spec is None:
        raise ConfigurationError(f"Unknown LLM provider: {name}", status_code=500)
    return spec.factory(api_key, http_client)

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Protocol

import httpx

from contentgen import config
from contentgen import logger as logger_mod
from contentgen.llm.errors import ConfigurationError, CredentialStoreError
from contentgen.llm.factory import PROVIDERS

log = logger_mod.get_logger()


@dataclass(frozen=True)
class ServerConfig:
    """Secrets needed to reach the credential store.

    Read from the environment on each invocation, never mutated afterwards.
    """

    supabase_url: str
    supabase_key: str

    @classmethod
    def from_env(cls) -> "ServerConfig":
        url = os.getenv("SUPABASE_URL", "").strip()
        key = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "").strip()
        if not url or not key:
            log.error("Supabase environment variables missing")
            raise ConfigurationError("Server misconfiguration", status_code=500)
        return cls(supabase_url=url.rstrip("/"), supabase_key=key)


@dataclass(frozen=True)
class CredentialRow:
    api_name: str
    api_key: str


class CredentialStore(Protocol):
    async def fetch(self, user_id: str) -> list[CredentialRow]:
        raise NotImplementedError


class SupabaseCredentialStore(CredentialStore):
    """Reads per-user provider keys from the `llm_api_credentials` table via PostgREST."""

    def __init__(self, server: ServerConfig, http_client: httpx.AsyncClient):
        self._server = server
        self._http = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._server.supabase_key,
            "Authorization": f"Bearer {self._server.supabase_key}",
            "Accept": "application/json",
        }

    async def fetch(self, user_id: str) -> list[CredentialRow]:
        url = f"{self._server.supabase_url}/rest/v1/{config.CREDENTIALS_TABLE}"
        try:
            response = await self._http.get(
                url,
                params={"select": "api_name,api_key", "user_id": f"eq.{user_id}"},
                headers=self._headers(),
                timeout=config.CREDENTIALS_TIMEOUT_S,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error(f"Database error fetching LLM API keys: {type(e).__name__}")
            raise CredentialStoreError(
                "Failed to fetch API configuration from database"
            ) from e

        if not isinstance(data, list):
            raise CredentialStoreError("Failed to fetch API configuration from database")

        rows = []
        for item in data:
            if isinstance(item, dict) and item.get("api_name"):
                rows.append(CredentialRow(str(item["api_name"]), str(item.get("api_key") or "")))
        return rows


def build_credentials(rows: Iterable[CredentialRow]) -> dict[str, str]:
    """Map provider name -> key. Later rows for the same provider win."""
    return {row.api_name: row.api_key for row in rows}


def provider_set(credentials: Mapping[str, str]) -> tuple[str, ...]:
    """Providers with a non-empty key, in their natural priority order."""
    return tuple(name for name in PROVIDERS if credentials.get(name))


async def load_credentials(store: CredentialStore, user_id: str) -> dict[str, str]:
    """Fetch a user's keys, failing when none are configured."""
    rows = await store.fetch(user_id)
    if not rows:
        log.error(f"No LLM API keys found for user: {user_id}")
        raise ConfigurationError(
            "LLM API keys not configured for user. "
            "Please set up your AI API keys in the platform settings."
        )

    credentials = build_credentials(rows)
    if not provider_set(credentials):
        raise ConfigurationError(
            "No LLM API keys configured. Please set up at least one AI API key."
        )
    return credentials

"""HTTP surface: POST /generate-content and its CORS preflight."""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from contentgen import config
from contentgen import logger as logger_mod
from contentgen.credentials import (
    CredentialStore,
    ServerConfig,
    SupabaseCredentialStore,
    load_credentials,
    provider_set,
)
from contentgen.llm.errors import (
    AllProvidersFailedError,
    ConfigurationError,
    CredentialStoreError,
    InputError,
)
from contentgen.llm.orchestrator import FallbackOrchestrator
from contentgen.llm.types import GenerationRequest

log = logger_mod.get_logger()

StoreFactory = Callable[[ServerConfig, httpx.AsyncClient], CredentialStore]


def _json(body: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=config.CORS_HEADERS)


def _error(message: str, status_code: int) -> JSONResponse:
    return _json({"error": message}, status_code=status_code)


def create_app(
    *,
    store_factory: StoreFactory = SupabaseCredentialStore,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the app.

    `store_factory` and `transport` let callers swap the credential store and
    the outbound HTTP transport.
    """

    app = FastAPI(title="contentgen", version="0.1.0")

    async def _generate(gen_request: GenerationRequest) -> dict[str, Any]:
        server = ServerConfig.from_env()
        async with httpx.AsyncClient(
            timeout=config.HTTP_TIMEOUT_S, transport=transport
        ) as http_client:
            store = store_factory(server, http_client)
            credentials = await load_credentials(store, gen_request.requester_id)
            orchestrator = FallbackOrchestrator(http_client)
            content = await orchestrator.generate(
                gen_request, credentials, provider_set(credentials)
            )
        return content.to_dict()

    @app.options("/generate-content")
    async def preflight() -> Response:
        return Response(status_code=200, headers=config.CORS_HEADERS)

    @app.post("/generate-content")
    async def generate_content(request: Request) -> Response:
        try:
            payload = await request.json()
        except ValueError as e:
            log.error(f"Invalid JSON input: {e}")
            return _error("Invalid JSON input", 400)

        try:
            gen_request = GenerationRequest.from_payload(payload)
            return _json(await _generate(gen_request))
        except InputError as e:
            return _error(str(e), 400)
        except ConfigurationError as e:
            return _error(str(e), e.status_code)
        except CredentialStoreError as e:
            return _error(str(e), 500)
        except AllProvidersFailedError as e:
            return _error(str(e), 500)
        except Exception as e:  # noqa: BLE001
            log.exception(f"Error generating content: {e}")
            return _error(str(e), 500)

    return app


app = create_app()


def main() -> None:
    uvicorn.run("contentgen.api:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()

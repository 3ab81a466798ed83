"""FastAPI application wiring."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wikivoice.api.routes import router
from wikivoice.api.schemas import ErrorResponse
from wikivoice.config.factory import create_from_config
from wikivoice.config.models import WikiVoiceConfig
from wikivoice.errors import (
    InvalidQuery,
    ProviderError,
    ProviderUnavailable,
    StoreUnavailable,
    WikiVoiceError,
)
from wikivoice.history.base import HistoryStore
from wikivoice.pipeline.orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, code: str, reason: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, code=code, reason=reason)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def _handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Map pipeline errors to responses without leaking provider payloads."""
    if isinstance(exc, InvalidQuery):
        return _error(400, exc.message, exc.code)
    if isinstance(exc, ProviderUnavailable | ProviderError):
        return _error(502, "Search failed. Please try again.", "search_failed", exc.code)
    if isinstance(exc, StoreUnavailable):
        return _error(503, "Search history is temporarily unavailable.", exc.code)
    if isinstance(exc, WikiVoiceError):
        code = exc.code
        logger.error("Unhandled error on %s: %s", request.url.path, code)
    else:
        code = "internal_error"
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return _error(500, "Internal server error.", code)


def create_app(
    orchestrator: SearchOrchestrator,
    store: HistoryStore | None,
    *,
    cors_origins: Sequence[str] = ("*",),
    manage_lifecycle: bool = True,
) -> FastAPI:
    """Build the HTTP service around an orchestrator and its history store.

    Args:
        orchestrator: Search orchestrator handling ``POST /api/search``.
        store: History store for the history and stats routes.
        cors_origins: Allowed CORS origins.
        manage_lifecycle: Open the store at startup and close the store and
            provider at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if manage_lifecycle and store is not None:
            await store.open()
        logger.info("WikiVoice service started")
        try:
            yield
        finally:
            if manage_lifecycle:
                await orchestrator.aclose()
                if store is not None:
                    await store.close()
            logger.info("WikiVoice service stopped")

    app = FastAPI(
        title="WikiVoice Search API",
        description="Voice and text search over Wikipedia with per-user history",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WikiVoiceError, _handle_error)
    app.add_exception_handler(Exception, _handle_error)
    app.include_router(router)
    return app


def app_from_config(
    config: WikiVoiceConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> FastAPI:
    """Create the HTTP service from root config."""
    orchestrator, store, _run_logger = create_from_config(
        config,
        log_override=log_override,
        log_dir_override=log_dir_override,
    )
    return create_app(orchestrator, store, cors_origins=config.server.cors_origins)

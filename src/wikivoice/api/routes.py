"""HTTP routes for search, history and stats."""

import logging

from fastapi import APIRouter, Query, Request

from wikivoice.api.schemas import (
    DeleteHistoryResponse,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    QueryCountBody,
    ResultRecordBody,
    SearchEventBody,
    SearchRequest,
    SearchResponse,
    StatsResponse,
)
from wikivoice.errors import StoreUnavailable
from wikivoice.history.base import HistoryStore
from wikivoice.pipeline.orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Search"])


def _orchestrator(request: Request) -> SearchOrchestrator:
    return request.app.state.orchestrator


def _store(request: Request) -> HistoryStore:
    store = request.app.state.store
    if store is None:
        raise StoreUnavailable("History store is not configured")
    return store


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    store = request.app.state.store
    connected = store is not None and await store.ping()
    return HealthResponse(
        status="Backend is running!",
        database="Connected" if connected else "Disconnected",
    )


@router.post(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def search(body: SearchRequest, request: Request) -> SearchResponse:
    """Search the encyclopedia and record the search in the caller's history."""
    outcome = await _orchestrator(request).search(body.query, body.username)
    return SearchResponse(
        results=[ResultRecordBody.from_record(r) for r in outcome.results],
        persistence_degraded=outcome.persistence_degraded,
    )


@router.get(
    "/search-history/{username}",
    response_model=HistoryResponse,
    responses={503: {"model": ErrorResponse}},
)
async def get_history(
    username: str,
    request: Request,
    limit: int = Query(20, ge=1, le=500, description="Maximum events to return"),
) -> HistoryResponse:
    """Return a user's searches, newest first."""
    events = await _store(request).list_by_identity(username, limit=limit)
    return HistoryResponse(history=[SearchEventBody.from_event(e) for e in events])


@router.delete(
    "/search-history/{username}",
    response_model=DeleteHistoryResponse,
    responses={503: {"model": ErrorResponse}},
)
async def delete_history(username: str, request: Request) -> DeleteHistoryResponse:
    """Delete every recorded search of a user."""
    deleted = await _store(request).delete_by_identity(username)
    return DeleteHistoryResponse(
        message="Search history deleted successfully",
        deleted_count=deleted,
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses={503: {"model": ErrorResponse}},
)
async def stats(
    request: Request,
    top: int = Query(10, ge=1, le=100, description="Number of top queries"),
) -> StatsResponse:
    store = _store(request)
    total = await store.count_all()
    top_queries = await store.top_queries(top)
    return StatsResponse(
        total_searches=total,
        top_queries=[QueryCountBody.from_count(q) for q in top_queries],
    )

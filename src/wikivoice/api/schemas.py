"""Request and response bodies of the HTTP service."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wikivoice.data import QueryCount, ResultRecord, SearchEvent


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SearchRequest(_Body):
    """Search request; a blank username searches as Guest."""

    query: str | None = Field(None, description="Free-text query")
    username: str | None = Field(None, description="Authenticated username")


class ResultRecordBody(_Body):
    title: str
    summary: str
    link: str
    snippet: str | None = None

    @classmethod
    def from_record(cls, record: ResultRecord) -> "ResultRecordBody":
        return cls(
            title=record.title,
            summary=record.summary,
            link=record.link,
            snippet=record.snippet,
        )


class SearchResponse(_Body):
    results: list[ResultRecordBody]
    persistence_degraded: bool = Field(False, alias="persistenceDegraded")


class SearchEventBody(_Body):
    id: int | None = None
    username: str
    query: str
    results: list[ResultRecordBody]
    created_at: datetime | None = Field(None, alias="createdAt")

    @classmethod
    def from_event(cls, event: SearchEvent) -> "SearchEventBody":
        return cls(
            id=event.id,
            username=event.identity,
            query=event.query,
            results=[ResultRecordBody.from_record(r) for r in event.results],
            created_at=event.created_at,
        )


class HistoryResponse(_Body):
    history: list[SearchEventBody]


class DeleteHistoryResponse(_Body):
    message: str
    deleted_count: int = Field(alias="deletedCount")


class QueryCountBody(_Body):
    query: str
    count: int

    @classmethod
    def from_count(cls, item: QueryCount) -> "QueryCountBody":
        return cls(query=item.query, count=item.count)


class StatsResponse(_Body):
    total_searches: int = Field(alias="totalSearches")
    top_queries: list[QueryCountBody] = Field(alias="topQueries")


class HealthResponse(_Body):
    status: str
    database: str


class ErrorResponse(_Body):
    error: str
    code: str
    reason: str | None = None

"""SQL-backed history store using SQLAlchemy's async engine."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, Text, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from wikivoice.data import QueryCount, ResultRecord, SearchEvent
from wikivoice.errors import StoreUnavailable

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///wikivoice.db"

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class SearchEventRow(Base):
    """One completed search, as stored in the ``search_events`` table."""

    __tablename__ = "search_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identity: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    query: Mapped[str] = mapped_column(Text, nullable=False)
    results: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(UTC),
    )


def _record_to_dict(record: ResultRecord) -> dict[str, Any]:
    return {
        "title": record.title,
        "summary": record.summary,
        "link": record.link,
        "snippet": record.snippet,
    }


def _row_to_event(row: SearchEventRow) -> SearchEvent:
    created_at = row.created_at
    # SQLite drops the offset; values are always written in UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return SearchEvent(
        id=row.id,
        identity=row.identity,
        query=row.query,
        results=tuple(
            ResultRecord(
                title=item["title"],
                summary=item["summary"],
                link=item["link"],
                snippet=item.get("snippet"),
            )
            for item in row.results
        ),
        created_at=created_at,
    )


class SqlHistoryStore:
    """Persist search events in any database SQLAlchemy can reach asynchronously.

    Every append is a single-row insert in its own transaction. Row ids come
    from the database and order the history; timestamps from the writer's
    clock are informational. Concurrent appends need no in-process
    coordination.

    Args:
        url: SQLAlchemy async database URL
            (default: ``sqlite+aiosqlite:///wikivoice.db``).
        echo: Log every SQL statement.
    """

    def __init__(self, url: str = DEFAULT_DATABASE_URL, *, echo: bool = False) -> None:
        self._url = url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        """Whether ``open()`` has been called and ``close()`` has not."""
        return self._engine is not None

    async def open(self) -> None:
        if self._engine is not None:
            return
        engine = create_async_engine(self._url, echo=self._echo, pool_pre_ping=True)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            await engine.dispose()
            raise StoreUnavailable("History store could not be opened") from e
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)
        logger.info("History store opened")

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("History store closed")

    async def __aenter__(self) -> "SqlHistoryStore":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            async with self._session() as session:
                await session.execute(select(1))
        except StoreUnavailable:
            return False
        return True

    async def append(self, event: SearchEvent) -> SearchEvent:
        row = SearchEventRow(
            identity=event.identity,
            query=event.query,
            results=[_record_to_dict(r) for r in event.results],
            created_at=datetime.now(UTC),
        )
        async with self._session() as session:
            session.add(row)
            await session.commit()
        return _row_to_event(row)

    async def list_by_identity(self, identity: str, limit: int = 20) -> list[SearchEvent]:
        if limit < 1:
            return []
        stmt = (
            select(SearchEventRow)
            .where(SearchEventRow.identity == identity)
            .order_by(SearchEventRow.id.desc())
            .limit(limit)
        )
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
        return [_row_to_event(row) for row in rows]

    async def delete_by_identity(self, identity: str) -> int:
        stmt = delete(SearchEventRow).where(SearchEventRow.identity == identity)
        async with self._session() as session:
            result = await session.execute(stmt)
            await session.commit()
        deleted = result.rowcount or 0  # type: ignore[attr-defined]
        logger.info("Deleted %d search events for %s", deleted, identity)
        return deleted

    async def count_all(self) -> int:
        async with self._session() as session:
            total = await session.scalar(select(func.count(SearchEventRow.id)))
        return int(total or 0)

    async def top_queries(self, n: int = 10) -> list[QueryCount]:
        if n < 1:
            return []
        occurrences = func.count(SearchEventRow.id)
        first_seen = func.min(SearchEventRow.id)
        stmt = (
            select(SearchEventRow.query, occurrences)
            .group_by(SearchEventRow.query)
            .order_by(occurrences.desc(), first_seen.asc())
            .limit(n)
        )
        async with self._session() as session:
            rows = (await session.execute(stmt)).all()
        return [QueryCount(query=query, count=int(count)) for query, count in rows]

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, turning database failures into ``StoreUnavailable``."""
        if self._sessions is None:
            raise StoreUnavailable("History store is not open")
        try:
            async with self._sessions() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("History store failure: %s", e.__class__.__name__)
            raise StoreUnavailable("History store is unavailable") from e

"""Tests for SqlHistoryStore."""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import pytest
from sqlalchemy import Text

from wikivoice.data import QueryCount, ResultRecord, SearchEvent
from wikivoice.errors import StoreUnavailable
from wikivoice.history import SqlHistoryStore, sql


def _event(identity: str = "alice", query: str = "cat", n_results: int = 2) -> SearchEvent:
    results = tuple(
        ResultRecord(
            title=f"Title {i}",
            summary=f"Summary {i}",
            link=f"https://en.wikipedia.org/wiki/Title%20{i}",
            snippet=None if i % 2 else f"snippet {i}",
        )
        for i in range(n_results)
    )
    return SearchEvent(identity=identity, query=query, results=results)


async def test_append_assigns_id_and_timestamp(store: SqlHistoryStore) -> None:
    before = datetime.now(UTC)
    saved = await store.append(_event())

    assert saved.id is not None
    assert saved.created_at is not None
    assert saved.created_at >= before
    assert saved.identity == "alice"
    assert saved.query == "cat"
    assert len(saved.results) == 2


async def test_list_round_trips_results_in_order(store: SqlHistoryStore) -> None:
    event = _event(n_results=5)
    await store.append(event)

    [loaded] = await store.list_by_identity("alice")

    assert loaded.results == event.results
    assert loaded.created_at is not None
    assert loaded.created_at.tzinfo is not None


async def test_list_newest_first(store: SqlHistoryStore) -> None:
    for query in ["first", "second", "third"]:
        await store.append(_event(query=query))

    events = await store.list_by_identity("alice")

    assert [e.query for e in events] == ["third", "second", "first"]


async def test_list_is_bounded(store: SqlHistoryStore) -> None:
    for i in range(25):
        await store.append(_event(query=f"q{i}", n_results=0))

    assert len(await store.list_by_identity("alice")) == 20
    events = await store.list_by_identity("alice", limit=3)
    assert [e.query for e in events] == ["q24", "q23", "q22"]


async def test_list_filters_by_identity(store: SqlHistoryStore) -> None:
    await store.append(_event(identity="alice", query="cat"))
    await store.append(_event(identity="bob", query="dog"))

    events = await store.list_by_identity("bob")

    assert [e.query for e in events] == ["dog"]
    assert await store.list_by_identity("carol") == []


async def test_append_empty_results(store: SqlHistoryStore) -> None:
    await store.append(_event(n_results=0))
    [loaded] = await store.list_by_identity("alice")
    assert loaded.results == ()


async def test_delete_is_idempotent(store: SqlHistoryStore) -> None:
    await store.append(_event(identity="alice"))
    await store.append(_event(identity="alice"))
    await store.append(_event(identity="bob"))

    assert await store.delete_by_identity("alice") == 2
    assert await store.delete_by_identity("alice") == 0
    assert await store.list_by_identity("alice") == []
    assert len(await store.list_by_identity("bob")) == 1


async def test_delete_unknown_identity_returns_zero(store: SqlHistoryStore) -> None:
    assert await store.delete_by_identity("nobody") == 0


async def test_count_all(store: SqlHistoryStore) -> None:
    assert await store.count_all() == 0
    await store.append(_event(identity="alice"))
    await store.append(_event(identity="bob"))
    assert await store.count_all() == 2


async def test_top_queries_sorted_by_count(store: SqlHistoryStore) -> None:
    for query in ["dog", "cat", "cat", "bird", "cat", "dog"]:
        await store.append(_event(query=query, n_results=0))

    top = await store.top_queries(10)

    assert top == [
        QueryCount(query="cat", count=3),
        QueryCount(query="dog", count=2),
        QueryCount(query="bird", count=1),
    ]


async def test_top_queries_ties_go_to_first_seen(store: SqlHistoryStore) -> None:
    for query in ["zebra", "apple", "mango", "apple", "zebra", "mango"]:
        await store.append(_event(query=query, n_results=0))

    top = await store.top_queries(2)

    assert [q.query for q in top] == ["zebra", "apple"]
    assert all(q.count == 2 for q in top)


async def test_concurrent_appends_are_all_recorded(store: SqlHistoryStore) -> None:
    events = [_event(identity=f"user{i % 3}", query=f"q{i}") for i in range(20)]

    saved = await asyncio.gather(*(store.append(e) for e in events))

    assert len({e.id for e in saved}) == 20
    assert await store.count_all() == 20


async def test_unopened_store_is_unavailable(database_url: str) -> None:
    store = SqlHistoryStore(database_url)
    assert not store.is_open
    with pytest.raises(StoreUnavailable):
        await store.append(_event())
    with pytest.raises(StoreUnavailable):
        await store.list_by_identity("alice")


async def test_closed_store_is_unavailable(database_url: str) -> None:
    store = SqlHistoryStore(database_url)
    await store.open()
    await store.close()
    with pytest.raises(StoreUnavailable):
        await store.count_all()
    assert not await store.ping()


async def test_open_unreachable_database_is_unavailable(tmp_path: Path) -> None:
    store = SqlHistoryStore(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'h.db'}")
    with pytest.raises(StoreUnavailable):
        await store.open()
    assert not store.is_open


async def test_ping_open_store(store: SqlHistoryStore) -> None:
    assert await store.ping()


async def test_context_manager_lifecycle(database_url: str) -> None:
    async with SqlHistoryStore(database_url) as store:
        assert store.is_open
        await store.append(_event())
    assert not store.is_open

    # Data outlives the connection pool
    async with SqlHistoryStore(database_url) as reopened:
        assert await reopened.count_all() == 1


async def test_list_order_follows_insertion_when_clock_steps_back(
    store: SqlHistoryStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    ticks = iter(
        [
            datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
            datetime(2026, 3, 1, 11, 0, tzinfo=UTC),
            datetime(2026, 3, 1, 10, 0, tzinfo=UTC),
        ]
    )

    class SteppingClock(datetime):
        @classmethod
        def now(cls, tz=None):  # type: ignore[override]
            return next(ticks)

    monkeypatch.setattr(sql, "datetime", SteppingClock)
    for query in ["first", "second", "third"]:
        await store.append(_event(query=query))

    events = await store.list_by_identity("alice")

    assert [e.query for e in events] == ["third", "second", "first"]


async def test_long_query_and_identity_are_stored_whole(store: SqlHistoryStore) -> None:
    query = "cat " * 400
    identity = "u" * 600

    await store.append(_event(identity=identity, query=query))

    [loaded] = await store.list_by_identity(identity)
    assert loaded.query == query
    assert loaded.identity == identity


def test_text_columns_have_no_length_limit() -> None:
    columns = sql.SearchEventRow.__table__.c
    assert isinstance(columns.query.type, Text)
    assert isinstance(columns.identity.type, Text)

"""Shared fixtures for WikiVoice tests."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from wikivoice.history import SqlHistoryStore


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a throwaway SQLite database."""
    return f"sqlite+aiosqlite:///{tmp_path / 'history.db'}"


@pytest.fixture
async def store(database_url: str) -> AsyncIterator[SqlHistoryStore]:
    """An opened history store backed by a temporary SQLite file."""
    history = SqlHistoryStore(database_url)
    await history.open()
    yield history
    await history.close()

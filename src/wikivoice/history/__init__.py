from wikivoice.history.base import HistoryStore
from wikivoice.history.sql import DEFAULT_DATABASE_URL, SqlHistoryStore

__all__ = [
    "DEFAULT_DATABASE_URL",
    "HistoryStore",
    "SqlHistoryStore",
]

from typing import Protocol

from wikivoice.data import QueryCount, SearchEvent


class HistoryStore(Protocol):
    """Interface for persisting completed searches."""

    async def open(self) -> None:
        """Connect and make sure the schema exists."""
        ...

    async def close(self) -> None:
        """Release the connection pool."""
        ...

    async def ping(self) -> bool:
        """Return True if the persistence medium answers."""
        ...

    async def append(self, event: SearchEvent) -> SearchEvent:
        """Persist one search event.

        Returns:
            The stored event, with ``id`` and ``created_at`` assigned.

        Raises:
            StoreUnavailable: If the persistence medium cannot be reached.
        """
        ...

    async def list_by_identity(self, identity: str, limit: int = 20) -> list[SearchEvent]:
        """Return an identity's events, newest first, at most ``limit`` of them."""
        ...

    async def delete_by_identity(self, identity: str) -> int:
        """Delete every event of an identity and return how many were removed."""
        ...

    async def count_all(self) -> int:
        """Return the total number of stored events."""
        ...

    async def top_queries(self, n: int = 10) -> list[QueryCount]:
        """Return the ``n`` most frequent queries.

        Sorted by count descending; ties go to the query searched first.
        """
        ...

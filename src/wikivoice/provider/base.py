from typing import Protocol

from wikivoice.data import Candidate, SummaryFragment


class SearchProvider(Protocol):
    """Interface for an external encyclopedia search provider."""

    async def find_candidates(self, query: str, limit: int = 5) -> list[Candidate]:
        """Find candidate pages for a query, in the provider's ranking order.

        Args:
            query: Free-text query, non-empty after trimming.
            limit: Maximum number of candidates to return.

        Returns:
            Ordered list of candidates (possibly empty).

        Raises:
            InvalidQuery: If the query is blank.
            ProviderUnavailable: On network or transport failure.
            ProviderError: On a non-success response.
        """
        ...

    async def fetch_summary(self, page_id: int) -> SummaryFragment:
        """Fetch the introductory plain-text extract of one page.

        A page without an extract resolves to the placeholder text.

        Raises:
            ProviderUnavailable: On network or transport failure.
            ProviderError: On a non-success response.
        """
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""
        ...

"""Wikipedia search through the MediaWiki Action API."""

import logging
from typing import Any

import httpx

from wikivoice.data import NO_SUMMARY_PLACEHOLDER, Candidate, SummaryFragment
from wikivoice.errors import InvalidQuery, ProviderError, ProviderUnavailable

WIKI_API_URL = "https://en.wikipedia.org/w/api.php"
DEFAULT_USER_AGENT = "WikiVoiceSearch/1.0 (https://github.com/wikivoice/wikivoice-search)"

logger = logging.getLogger(__name__)


class WikipediaProvider:
    """Search Wikipedia pages and fetch their introductory extracts.

    Uses ``list=search`` for candidates and ``prop=extracts`` for summaries.
    One pooled ``httpx.AsyncClient`` is shared by all calls; it is safe to
    use from concurrent requests.

    Args:
        api_url: MediaWiki API endpoint (default: English Wikipedia).
        user_agent: Client-identifying header sent on every call, required
            by the Wikimedia API usage policy.
        timeout: Per-call timeout in seconds.
        client: Pre-built client to use instead of creating one (the
            provider still attaches its own headers to every request).
    """

    def __init__(
        self,
        *,
        api_url: str = WIKI_API_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not user_agent.strip():
            raise ValueError("A non-empty user agent is required by the Wikimedia API policy.")
        self._api_url = api_url
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def find_candidates(self, query: str, limit: int = 5) -> list[Candidate]:
        """Find candidate pages for a query, in Wikipedia's ranking order."""
        text = query.strip()
        if not text:
            raise InvalidQuery("Query is required")
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")

        data = await self._get(
            {
                "action": "query",
                "format": "json",
                "list": "search",
                "srsearch": text,
                "srlimit": limit,
            }
        )
        hits = _query_section(data).get("search", [])
        if not isinstance(hits, list):
            raise ProviderError("Malformed search response from provider")

        candidates: list[Candidate] = []
        for hit in hits[:limit]:
            try:
                page_id = int(hit["pageid"])
                title = str(hit["title"]).strip()
            except (KeyError, TypeError, ValueError) as e:
                raise ProviderError("Malformed search hit from provider") from e
            if not title:
                raise ProviderError(f"Search hit for page {page_id} has no title")
            snippet = hit.get("snippet")
            candidates.append(
                Candidate(page_id=page_id, title=title, snippet=snippet or None)
            )
        return candidates

    async def fetch_summary(self, page_id: int) -> SummaryFragment:
        """Fetch the plain-text intro extract of one page."""
        data = await self._get(
            {
                "action": "query",
                "format": "json",
                "prop": "extracts",
                "pageids": page_id,
                "exintro": 1,
                "explaintext": 1,
            }
        )
        pages = _query_section(data).get("pages") or {}
        page = pages.get(str(page_id)) if isinstance(pages, dict) else None
        extract = page.get("extract") if isinstance(page, dict) else None
        if not extract:
            return SummaryFragment(page_id=page_id, extract=NO_SUMMARY_PLACEHOLDER)
        return SummaryFragment(page_id=page_id, extract=str(extract))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, params: dict[str, str | int]) -> dict[str, Any]:
        """Issue one GET against the API and return the decoded JSON body."""
        try:
            response = await self._client.get(
                self._api_url, params=params, headers=self._headers
            )
        except (httpx.TimeoutException, httpx.TransportError) as e:
            logger.error("Provider request failed: %s", e.__class__.__name__)
            raise ProviderUnavailable("Search provider is unreachable") from e
        except httpx.RequestError as e:
            # Bad encoding, redirect loops and other protocol-level faults
            logger.error("Provider request failed: %s", e.__class__.__name__)
            raise ProviderError("Search provider sent an unreadable response") from e

        if not response.is_success:
            logger.error("Provider returned HTTP %s", response.status_code)
            raise ProviderError(f"Search provider returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("Search provider returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise ProviderError("Search provider returned an unexpected body")

        error = data.get("error")
        if error:
            code = error.get("code", "unknown") if isinstance(error, dict) else "unknown"
            logger.error("Provider error envelope: %s", code)
            raise ProviderError(f"Search provider rejected the request ({code})")
        return data


def _query_section(data: dict[str, Any]) -> dict[str, Any]:
    """Return the ``query`` object of an API response."""
    section = data.get("query")
    if section is None:
        raise ProviderError("Search provider response has no query section")
    if not isinstance(section, dict):
        raise ProviderError("Malformed query section from provider")
    return section

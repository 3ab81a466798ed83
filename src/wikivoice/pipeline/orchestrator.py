"""Search orchestrator: validate, fetch, fan out, assemble, persist."""

import asyncio
import logging
import time

from wikivoice.assembler import WIKI_PAGE_BASE_URL, assemble
from wikivoice.data import (
    NO_SUMMARY_PLACEHOLDER,
    Candidate,
    ResultRecord,
    SearchEvent,
    SearchOutcome,
    SearchStage,
    SummaryFragment,
    normalize_identity,
)
from wikivoice.errors import (
    AssemblyViolation,
    InvalidQuery,
    ProviderError,
    ProviderUnavailable,
    StoreUnavailable,
    WikiVoiceError,
)
from wikivoice.history.base import HistoryStore
from wikivoice.provider.base import SearchProvider
from wikivoice.run_logger import RunLogger, RunRecord

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """Coordinates one search request from raw query to stored event.

    Flow:
    1. Validate the query and normalize the identity label
    2. Fetch candidate pages from the provider
    3. Fetch every candidate's summary concurrently
    4. Assemble result records in candidate order
    5. Append one search event to the history store

    A failed summary fetch degrades to the placeholder text instead of
    failing the request. A failed append still returns the results, flagged
    with ``persistence_degraded``.

    Args:
        provider: Search provider client.
        store: History store, or None to run without persistence.
        max_candidates: Candidates requested per search, which also bounds
            the summary fan-out.
        persist_history: Record searches in the store.
        persist_empty_results: Record searches that found no candidates.
        request_timeout: Seconds allowed for both provider stages together
            (None disables the limit).
        page_base_url: Base URL for result links.
        run_logger: Optional RunLogger for per-search stage logging.
    """

    def __init__(
        self,
        provider: SearchProvider,
        store: HistoryStore | None = None,
        *,
        max_candidates: int = 5,
        persist_history: bool = True,
        persist_empty_results: bool = True,
        request_timeout: float | None = None,
        page_base_url: str = WIKI_PAGE_BASE_URL,
        run_logger: RunLogger | None = None,
    ) -> None:
        if max_candidates < 1:
            raise ValueError(f"max_candidates must be positive, got {max_candidates}")
        self._provider = provider
        self._store = store
        self._max_candidates = max_candidates
        self._persist_history = persist_history and store is not None
        self._persist_empty_results = persist_empty_results
        self._request_timeout = request_timeout
        self._page_base_url = page_base_url
        self._run_logger = run_logger

    @property
    def provider(self) -> SearchProvider:
        return self._provider

    @property
    def store(self) -> HistoryStore | None:
        return self._store

    async def search(self, query: str | None, identity: str | None = None) -> SearchOutcome:
        """Run one search request.

        Args:
            query: Free-text query.
            identity: Username of the caller; blank or None means ``"Guest"``.

        Returns:
            The assembled results in provider ranking order.

        Raises:
            InvalidQuery: If the query is empty after trimming.
            ProviderUnavailable: If the candidate search could not reach the
                provider or the request timed out.
            ProviderError: If the provider rejected the candidate search.
            AssemblyViolation: If results could not be assembled.
        """
        stage = SearchStage.VALIDATING
        text = (query or "").strip()
        label = normalize_identity(identity)
        run = self._run_logger.start_run(text, label) if self._run_logger else None

        try:
            if not text:
                raise InvalidQuery("Query is required")
            logger.info("Search request: %r by %s", text, label)

            stage = SearchStage.FETCHING_CANDIDATES
            try:
                async with asyncio.timeout(self._request_timeout):
                    candidates = await self._fetch_candidates(text, run)
                    stage = SearchStage.FETCHING_SUMMARIES
                    fragments, degraded = await self._fetch_summaries(candidates, run)
            except TimeoutError as e:
                raise ProviderUnavailable("Search provider timed out") from e

            stage = SearchStage.ASSEMBLING
            results = self._assemble(candidates, fragments, run)

            stage = SearchStage.PERSISTING
            event, persistence_degraded = await self._persist(text, label, results, run)

            stage = SearchStage.RESPONDING
        except WikiVoiceError as e:
            if isinstance(e, InvalidQuery):
                logger.info("Rejected search at %s: %s", stage, e.message)
            else:
                logger.error("Search %r failed at %s: %s", text, stage, e.code)
            if self._run_logger:
                self._run_logger.finish_run(run, [], failed_stage=str(stage), error_code=e.code)
            raise

        if self._run_logger:
            self._run_logger.finish_run(run, results)

        return SearchOutcome(
            query=text,
            identity=label,
            results=results,
            event=event,
            persistence_degraded=persistence_degraded,
            degraded_summaries=degraded,
        )

    async def aclose(self) -> None:
        """Close the provider client."""
        await self._provider.aclose()

    async def _fetch_candidates(self, text: str, run: RunRecord | None) -> list[Candidate]:
        t0 = time.monotonic()
        candidates = await self._provider.find_candidates(text, limit=self._max_candidates)
        # Never fan out wider than configured, whatever the provider returned
        candidates = candidates[: self._max_candidates]
        if self._run_logger:
            self._run_logger.log_stage(
                run,
                stage=SearchStage.FETCHING_CANDIDATES,
                component=type(self._provider).__name__,
                input_data={"query": text, "limit": self._max_candidates},
                output_data=candidates,
                duration_seconds=time.monotonic() - t0,
            )
        return candidates

    async def _fetch_summaries(
        self, candidates: list[Candidate], run: RunRecord | None
    ) -> tuple[list[SummaryFragment | None], tuple[int, ...]]:
        """Fetch every candidate's summary concurrently.

        Each leg writes into the slot of its candidate's index, so the output
        order never depends on completion order.
        """
        t0 = time.monotonic()
        fragments: list[SummaryFragment | None] = [None] * len(candidates)
        degraded: list[int] = []

        async def fetch_into(index: int, candidate: Candidate) -> None:
            try:
                fragments[index] = await self._provider.fetch_summary(candidate.page_id)
            except (ProviderUnavailable, ProviderError) as e:
                logger.warning(
                    "Summary for page %s unavailable (%s); using placeholder",
                    candidate.page_id,
                    e.code,
                )
                degraded.append(candidate.page_id)
                fragments[index] = SummaryFragment(
                    page_id=candidate.page_id, extract=NO_SUMMARY_PLACEHOLDER
                )

        if candidates:
            async with asyncio.TaskGroup() as group:
                for index, candidate in enumerate(candidates):
                    group.create_task(fetch_into(index, candidate))

        if self._run_logger:
            self._run_logger.log_stage(
                run,
                stage=SearchStage.FETCHING_SUMMARIES,
                component=type(self._provider).__name__,
                input_data=[c.page_id for c in candidates],
                output_data={"fetched": len(candidates) - len(degraded), "degraded": degraded},
                duration_seconds=time.monotonic() - t0,
            )
        return fragments, tuple(degraded)

    def _assemble(
        self,
        candidates: list[Candidate],
        fragments: list[SummaryFragment | None],
        run: RunRecord | None,
    ) -> tuple[ResultRecord, ...]:
        t0 = time.monotonic()
        if len(fragments) != len(candidates):
            raise AssemblyViolation("Summary count does not match candidate count")

        records: list[ResultRecord] = []
        for candidate, fragment in zip(candidates, fragments, strict=True):
            if fragment is None:
                raise AssemblyViolation(f"No summary slot filled for page {candidate.page_id}")
            records.append(assemble(candidate, fragment, base_url=self._page_base_url))

        if self._run_logger:
            self._run_logger.log_stage(
                run,
                stage=SearchStage.ASSEMBLING,
                component="assemble",
                input_data={"candidate_count": len(candidates)},
                output_data=records,
                duration_seconds=time.monotonic() - t0,
            )
        return tuple(records)

    async def _persist(
        self,
        text: str,
        label: str,
        results: tuple[ResultRecord, ...],
        run: RunRecord | None,
    ) -> tuple[SearchEvent | None, bool]:
        """Append the search event, absorbing store failures.

        Returns:
            Tuple of (stored event or None, persistence_degraded).
        """
        if self._store is None or not self._persist_history:
            return None, False
        if not results and not self._persist_empty_results:
            logger.info("No results for %r; not recorded", text)
            return None, False

        t0 = time.monotonic()
        try:
            event = await self._store.append(
                SearchEvent(identity=label, query=text, results=results)
            )
        except StoreUnavailable as e:
            logger.warning("Search %r by %s not recorded: %s", text, label, e.message)
            return None, True

        logger.info("Saved search %r by %s", text, label)
        if self._run_logger:
            self._run_logger.log_stage(
                run,
                stage=SearchStage.PERSISTING,
                component=type(self._store).__name__,
                input_data={"identity": label, "query": text},
                output_data={"id": event.id},
                duration_seconds=time.monotonic() - t0,
            )
        return event, False

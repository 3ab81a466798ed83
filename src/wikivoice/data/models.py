"""Core data models for WikiVoice."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

GUEST_IDENTITY = "Guest"
NO_SUMMARY_PLACEHOLDER = "No summary available."


class SearchStage(StrEnum):
    """Stages a search request moves through, in order."""

    VALIDATING = "validating"
    FETCHING_CANDIDATES = "fetching_candidates"
    FETCHING_SUMMARIES = "fetching_summaries"
    ASSEMBLING = "assembling"
    PERSISTING = "persisting"
    RESPONDING = "responding"


@dataclass(frozen=True)
class Candidate:
    """A provider-returned page reference before summary enrichment."""

    page_id: int
    title: str
    snippet: str | None = None


@dataclass(frozen=True)
class SummaryFragment:
    """Plain-text introductory extract fetched for one candidate."""

    page_id: int
    extract: str = NO_SUMMARY_PLACEHOLDER


@dataclass(frozen=True)
class ResultRecord:
    """The merged, user-facing unit stored with every search event."""

    title: str
    summary: str
    link: str
    snippet: str | None = None


@dataclass(frozen=True)
class SearchEvent:
    """One persisted record of a completed search request.

    ``id`` and ``created_at`` are assigned by the history store when the
    event is appended; events built by the orchestrator leave them unset.
    """

    identity: str
    query: str
    results: tuple[ResultRecord, ...] = ()
    created_at: datetime | None = None
    id: int | None = None


@dataclass(frozen=True)
class QueryCount:
    """How many times a query text was searched."""

    query: str
    count: int


@dataclass(frozen=True)
class SearchOutcome:
    """What a search request returns to its caller.

    ``event`` is the stored event, or None when nothing was persisted
    (persistence disabled, empty results not recorded, or the store failed).
    """

    query: str
    identity: str
    results: tuple[ResultRecord, ...] = ()
    event: SearchEvent | None = None
    persistence_degraded: bool = False
    degraded_summaries: tuple[int, ...] = field(default_factory=tuple)


def normalize_identity(identity: str | None) -> str:
    """Return the trimmed identity label, or ``"Guest"`` when absent or blank."""
    if identity is None:
        return GUEST_IDENTITY
    trimmed = identity.strip()
    return trimmed or GUEST_IDENTITY

"""Data models for WikiVoice."""

from wikivoice.data.models import (
    GUEST_IDENTITY,
    NO_SUMMARY_PLACEHOLDER,
    Candidate,
    QueryCount,
    ResultRecord,
    SearchEvent,
    SearchOutcome,
    SearchStage,
    SummaryFragment,
    normalize_identity,
)

__all__ = [
    "GUEST_IDENTITY",
    "NO_SUMMARY_PLACEHOLDER",
    "Candidate",
    "QueryCount",
    "ResultRecord",
    "SearchEvent",
    "SearchOutcome",
    "SearchStage",
    "SummaryFragment",
    "normalize_identity",
]

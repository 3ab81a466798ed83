"""Tests for data models."""

import pytest

from wikivoice.data import (
    GUEST_IDENTITY,
    NO_SUMMARY_PLACEHOLDER,
    Candidate,
    ResultRecord,
    SearchEvent,
    SearchStage,
    SummaryFragment,
    normalize_identity,
)


def test_candidate_minimal() -> None:
    candidate = Candidate(page_id=6678, title="Cat")
    assert candidate.page_id == 6678
    assert candidate.title == "Cat"
    assert candidate.snippet is None


def test_summary_fragment_defaults_to_placeholder() -> None:
    fragment = SummaryFragment(page_id=1)
    assert fragment.extract == NO_SUMMARY_PLACEHOLDER


def test_search_event_unsaved_has_no_id_or_timestamp() -> None:
    event = SearchEvent(identity="alice", query="cat")
    assert event.results == ()
    assert event.id is None
    assert event.created_at is None


def test_result_record_is_frozen() -> None:
    record = ResultRecord(title="Cat", summary="s", link="l")
    with pytest.raises(AttributeError):
        record.title = "Dog"  # type: ignore[misc]


@pytest.mark.parametrize("identity", [None, "", "   ", "\t\n"])
def test_normalize_identity_blank_is_guest(identity: str | None) -> None:
    assert normalize_identity(identity) == GUEST_IDENTITY


def test_normalize_identity_trims() -> None:
    assert normalize_identity("  alice ") == "alice"


def test_search_stages_are_in_pipeline_order() -> None:
    assert [s.value for s in SearchStage] == [
        "validating",
        "fetching_candidates",
        "fetching_summaries",
        "assembling",
        "persisting",
        "responding",
    ]

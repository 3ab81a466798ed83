"""Tests for RunLogger and serialization helpers."""

import json
from datetime import UTC, datetime
from pathlib import Path

from wikivoice.data import Candidate, ResultRecord, SearchEvent
from wikivoice.run_logger import RunLogger, _serialize

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(3.14) == 3.14
    assert _serialize(True) is True


def test_serialize_list_and_tuple() -> None:
    assert _serialize([1, "two", None]) == [1, "two", None]
    assert _serialize((1, 2)) == [1, 2]


def test_serialize_dict() -> None:
    assert _serialize({"a": 1, "b": "two"}) == {"a": 1, "b": "two"}


def test_serialize_frozen_dataclass() -> None:
    result = _serialize(Candidate(page_id=6678, title="Cat", snippet="<b>cat</b>"))
    assert result == {"page_id": 6678, "title": "Cat", "snippet": "<b>cat</b>"}


def test_serialize_nested_event() -> None:
    event = SearchEvent(
        identity="alice",
        query="cat",
        results=(ResultRecord(title="Cat", summary="s", link="l"),),
        created_at=datetime(2026, 2, 1, 10, 0, tzinfo=UTC),
        id=7,
    )
    result = _serialize(event)
    assert result["results"] == [{"title": "Cat", "summary": "s", "link": "l", "snippet": None}]
    assert result["created_at"] == "2026-02-01T10:00:00+00:00"
    # Whole structure is JSON-serializable
    json.dumps(result)


def test_serialize_path() -> None:
    assert _serialize(Path("/some/path")) == "/some/path"


# -- RunLogger disabled tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    run = logger.start_run("cat", "alice")
    logger.log_stage(run, "test", "TestComponent", "input", "output", 1.0)
    result = logger.finish_run(run, [])

    assert run is None
    assert result is None
    assert logger.last_log_path is None
    assert list(tmp_path.iterdir()) == []


# -- RunLogger enabled tests --


def test_run_logger_start_and_finish(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path / "nested", enabled=True)
    assert logger.enabled

    run = logger.start_run("cat", "alice")
    path = logger.finish_run(run, [])

    assert path is not None
    assert path.exists()
    assert path.suffix == ".json"
    assert logger.last_log_path == path

    data = json.loads(path.read_text())
    assert data["query"] == "cat"
    assert data["identity"] == "alice"
    assert data["final_result_count"] == 0
    assert data["completed_at"] is not None
    assert data["failed_stage"] is None


def test_run_logger_log_stages(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)
    run = logger.start_run("cat", "alice")

    candidates = [Candidate(page_id=1, title="Cat")]
    logger.log_stage(
        run,
        stage="fetching_candidates",
        component="WikipediaProvider",
        input_data={"query": "cat", "limit": 5},
        output_data=candidates,
        duration_seconds=0.123456,
    )
    records = [ResultRecord(title="Cat", summary="s", link="l")]
    logger.log_stage(
        run,
        stage="assembling",
        component="assemble",
        input_data={"candidate_count": 1},
        output_data=records,
        duration_seconds=0.001,
    )
    path = logger.finish_run(run, records)

    assert path is not None
    data = json.loads(path.read_text())
    assert len(data["stages"]) == 2
    assert data["stages"][0]["stage"] == "fetching_candidates"
    assert data["stages"][0]["component"] == "WikipediaProvider"
    assert data["stages"][0]["output"] == [{"page_id": 1, "title": "Cat", "snippet": None}]
    assert data["stages"][0]["duration_seconds"] == 0.1235
    assert data["stages"][1]["output"][0]["title"] == "Cat"
    assert data["final_result_count"] == 1


def test_run_logger_records_failure(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)
    run = logger.start_run("cat", "Guest")

    path = logger.finish_run(
        run, [], failed_stage="fetching_candidates", error_code="provider_unavailable"
    )

    assert path is not None
    data = json.loads(path.read_text())
    assert data["failed_stage"] == "fetching_candidates"
    assert data["error_code"] == "provider_unavailable"


def test_concurrent_runs_write_separate_files(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)

    first = logger.start_run("cat", "alice")
    second = logger.start_run("dog", "bob")
    logger.log_stage(first, "assembling", "assemble", None, [], 0.0)
    first_path = logger.finish_run(first, [])
    second_path = logger.finish_run(second, [])

    assert first_path != second_path
    assert first_path is not None and second_path is not None
    assert json.loads(first_path.read_text())["query"] == "cat"
    second_data = json.loads(second_path.read_text())
    assert second_data["query"] == "dog"
    assert second_data["stages"] == []

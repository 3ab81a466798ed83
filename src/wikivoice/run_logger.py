"""Run logger for recording the stages of each search to JSON files."""

import dataclasses
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class StageRecord(BaseModel):
    """Record of a single search stage."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of one search request."""

    run_id: str
    query: str
    identity: str
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    final_result_count: int = 0
    failed_stage: str | None = None
    error_code: str | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, tuples, lists, dicts, datetimes
    and primitives.
    """
    if obj is None:
        return None
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _serialize(dataclasses.asdict(obj))
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, list | tuple):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    return obj


class RunLogger:
    """Writes one JSON log file per search request.

    Each ``start_run`` returns its own ``RunRecord``, which the caller hands
    back to ``log_stage`` and ``finish_run``, so one logger can be shared by
    concurrent requests. When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, query: str, identity: str) -> RunRecord | None:
        """Create the record for a new search.

        Returns:
            The run record, or None if logging is disabled.
        """
        if not self._enabled:
            return None

        return RunRecord(
            run_id=str(uuid.uuid4()),
            query=query,
            identity=identity,
            started_at=datetime.now(tz=UTC).isoformat(),
        )

    def log_stage(
        self,
        record: RunRecord | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to a run.

        Args:
            record: Run returned by ``start_run``.
            stage: Stage name (e.g. "fetching_candidates").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            duration_seconds: Wall-clock time for this stage.
        """
        if not self._enabled or record is None:
            return

        record.stages.append(
            StageRecord(
                stage=str(stage),
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(
        self,
        record: RunRecord | None,
        results: list[Any] | tuple[Any, ...],
        *,
        failed_stage: str | None = None,
        error_code: str | None = None,
    ) -> Path | None:
        """Write a run record to a JSON file.

        Args:
            record: Run returned by ``start_run``.
            results: Final result records of the search.
            failed_stage: Stage at which the search failed, if it did.
            error_code: Error code of the failure, if any.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.final_result_count = len(results)
        record.failed_stage = failed_stage
        record.error_code = error_code

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_1a2b3c4d.json (colons -> dashes)
        ts = record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filename = f"run_{ts}_{record.run_id[:8]}.json"
        filepath = self._log_dir / filename

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath

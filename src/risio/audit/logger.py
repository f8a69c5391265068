"""Structured audit log for conversion runs.

One JSONL line per event. A run opens with ``run_started``, wraps each
conversion step in ``stage()`` and closes with ``run_finished``; parser
diagnostics, written artifacts and failures are logged in between.
"""

import json
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any

from risio.audit.helpers import file_sha256, generate_run_id, utc_timestamp
from risio.audit.models import LogEvent
from risio.parse.base import ParseDiagnostic

__all__ = ["AuditLogger"]


class AuditLogger:
    """Append-only JSONL event log for one conversion run.

    Every event is flushed as soon as it is written, so the log survives a
    crash mid-run.

    Parameters
    ----------
    log_path : Path
        JSONL file to append to. Parent directories are created.
    run_id : str | None, optional
        Run identifier shared by all events; generated when omitted.

    Attributes
    ----------
    current_stage : str | None
        Stage attached to events that do not name one.
    """

    def __init__(self, log_path: Path, run_id: str | None = None) -> None:
        self.log_path = log_path
        self.run_id = run_id or generate_run_id()
        self.current_stage: str | None = None
        self._started = time.perf_counter()

        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the log file. Safe to call twice."""
        if not self._file.closed:
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        line_number: int | None = None,
    ) -> None:
        """Append one event.

        Parameters
        ----------
        event_type : str
            Event name, e.g. "diagnostic".
        data : dict[str, Any] | None, optional
            JSON-serializable payload.
        level : str, optional
            "DEBUG", "INFO", "WARN" or "ERROR".
        stage : str | None, optional
            Overrides ``current_stage`` for this event.
        line_number : int | None, optional
            Input line the event refers to.
        """
        record = LogEvent(
            ts=utc_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=stage or self.current_stage,
            line_number=line_number,
        )
        self._file.write(json.dumps(asdict(record), ensure_ascii=False, separators=(",", ":")))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log the command line and effective configuration."""
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(self, status: str, records_processed: int | None = None) -> None:
        """Log the outcome of the run.

        Parameters
        ----------
        status : str
            "success", "partial" (problems were skipped) or "failed".
        records_processed : int | None, optional
            Records read or written by the run.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": round(time.perf_counter() - self._started, 6),
        }
        if records_processed is not None:
            data["records_processed"] = records_processed
        self.set_stage(None)
        self.event("run_finished", data=data)

    @contextmanager
    def stage(self, name: str) -> Iterator[dict[str, int]]:
        """Bracket a conversion step with stage_started/stage_finished.

        Yields a counters dict; whatever the block stores in it is logged
        with ``stage_finished``. No finish event is written if the block
        raises.

        Examples
        --------
            >>> with audit.stage("parse") as counters:
            ...     counters["records_out"] = write_jsonl(records, out)
        """
        self.set_stage(name)
        self.event("stage_started")
        started = time.perf_counter()
        counters: dict[str, int] = {}

        yield counters

        data: dict[str, Any] = {"duration_seconds": round(time.perf_counter() - started, 6)}
        if counters:
            data["counters"] = counters
        self.event("stage_finished", data=data)

    def diagnostic(self, diagnostic: ParseDiagnostic) -> None:
        """Log a skipped line or discarded record as a warning."""
        self.event(
            "diagnostic",
            data={"kind": diagnostic.kind.value, "message": diagnostic.message, "tag": diagnostic.tag},
            level="WARN",
            line_number=diagnostic.line_number,
        )

    def diagnostics(self, diagnostics: Iterable[ParseDiagnostic]) -> None:
        for diagnostic in diagnostics:
            self.diagnostic(diagnostic)

    def artifact_written(self, path: Path, record_count: int | None = None) -> None:
        """Log an output file with its size and SHA-256 fingerprint."""
        data: dict[str, Any] = {
            "path": str(path),
            "sha256": file_sha256(path),
            "bytes": path.stat().st_size,
        }
        if record_count is not None:
            data["record_count"] = record_count
        self.event("artifact_written", data=data)

    def error(self, exc: BaseException) -> None:
        """Log a failure; RIS errors carry the offending line number."""
        self.event(
            "error",
            data={"exception_class": type(exc).__name__, "message": str(exc)},
            level="ERROR",
            line_number=getattr(exc, "line_number", None),
        )

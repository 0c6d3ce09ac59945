"""Per-file and per-batch states of a publish run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mashumaro import DataClassDictMixin


class FileState(str, Enum):
    """Where a single notebook got to.

    A file moves PENDING -> SCRIPT_CONVERTED -> MARKDOWN_CONVERTED, or
    PENDING -> SKIPPED when its markdown exists and overwrite is off.
    FAILED marks the file whose converter aborted the run.
    """

    PENDING = "pending"
    SCRIPT_CONVERTED = "script-converted"
    MARKDOWN_CONVERTED = "markdown-converted"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def finished(self) -> bool:
        return self in (FileState.MARKDOWN_CONVERTED, FileState.SKIPPED)


class BatchState(str, Enum):
    NOT_STARTED = "not-started"
    CONVERTING = "converting"
    PUBLISHING = "publishing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(kw_only=True)
class FileRecord(DataClassDictMixin):
    """Outcome of one notebook."""

    name: str
    state: FileState = FileState.PENDING
    duration: float = 0.0  # seconds spent in the converter
    error: Optional[str] = None


@dataclass(kw_only=True)
class BatchReport(DataClassDictMixin):
    """Summary of a whole run, dumped as JSON by `qopublish.util.save_report`."""

    state: BatchState = BatchState.NOT_STARTED
    records: list[FileRecord] = field(default_factory=list)
    published: list[str] = field(default_factory=list)
    started: Optional[str] = None
    finished: Optional[str] = None
    error: Optional[str] = None

    def record(self, name: str) -> FileRecord:
        for rec in self.records:
            if rec.name == name:
                return rec
        rec = FileRecord(name=name)
        self.records.append(rec)
        return rec

    def counts(self) -> dict[FileState, int]:
        out = {state: 0 for state in FileState}
        for rec in self.records:
            out[rec.state] += 1
        return out

    @property
    def ok(self) -> bool:
        return self.state == BatchState.DONE

"""File-backed audit log, one comma-separated file per run."""

from __future__ import annotations

import csv
from typing import TYPE_CHECKING, Final, TextIO

from phonesweep.config.audit import AUDIT_TIMESTAMP_FORMAT
from phonesweep.domain.ports.audit import AuditSinkError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from pathlib import Path

    from phonesweep.config.audit import AuditLogConfig
    from phonesweep.domain.model import Outcome

COLUMN_HEADER: Final[tuple[str, ...]] = ("Name", "UPN", "OldPhone", "NewPhone", "Result", "Message")
NO_CANDIDATES_LABEL: Final[str] = "Success"
NO_CANDIDATES_MESSAGE: Final[str] = (
    "no candidates: no accounts have a telephone number starting with 0"
)


def audit_log_filename(started_at: datetime, suffix: str) -> str:
    return f"{started_at.strftime(AUDIT_TIMESTAMP_FORMAT)}{suffix}"


class AuditLog:
    """Append-only audit file.

    Rows are joined with bare commas by default, matching the historical log
    format; embedded commas or newlines in a field will shift columns. Set
    ``quote_fields`` to write rows through :mod:`csv` with proper quoting instead.
    Every line is flushed as soon as it is written so an interrupted run leaves a
    valid prefix behind.
    """

    def __init__(
        self,
        path: Path,
        *,
        quote_fields: bool = False,
        simulate_only: bool = False,
    ) -> None:
        self.path: Path | None = path
        self._simulate_only = simulate_only
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handle: TextIO | None = path.open("x", encoding="utf-8", newline="")
        except OSError as exc:
            raise AuditSinkError(f"Cannot create audit log {path}: {exc}") from exc
        self._writer = csv.writer(self._handle, lineterminator="\n") if quote_fields else None

    @classmethod
    def open_for_run(
        cls,
        config: AuditLogConfig,
        started_at: datetime,
        *,
        simulate_only: bool = False,
    ) -> AuditLog:
        path = config.resolve_log_dir() / audit_log_filename(started_at, config.suffix)
        return cls(path, quote_fields=config.quote_fields, simulate_only=simulate_only)

    def write_header(self, started_at: datetime) -> None:
        title = f"Telephone number normalization run started {started_at.strftime('%c')}"
        if self._simulate_only:
            title += " (simulation mode)"
        self._write_line(title)
        self._write_line(",".join(COLUMN_HEADER))

    def append(self, outcome: Outcome) -> None:
        self._write_row(
            (
                outcome.display_name,
                outcome.principal_name,
                outcome.old_number,
                outcome.new_number,
                outcome.result_label,
                outcome.message,
            )
        )

    def append_no_candidates(self) -> None:
        self._write_row(("", "", "", "", NO_CANDIDATES_LABEL, NO_CANDIDATES_MESSAGE))

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.close()
        self._handle = None

    def __enter__(self) -> AuditLog:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _write_row(self, fields: Sequence[object]) -> None:
        row = [str(value) for value in fields]
        if self._writer is None:
            self._write_line(",".join(row))
            return
        handle = self._require_handle()
        try:
            self._writer.writerow(row)
            handle.flush()
        except OSError as exc:
            raise AuditSinkError(f"Cannot write audit log {self.path}: {exc}") from exc

    def _write_line(self, line: str) -> None:
        handle = self._require_handle()
        try:
            handle.write(line + "\n")
            handle.flush()
        except OSError as exc:
            raise AuditSinkError(f"Cannot write audit log {self.path}: {exc}") from exc

    def _require_handle(self) -> TextIO:
        if self._handle is None:
            raise AuditSinkError(f"Audit log {self.path} is closed")
        return self._handle

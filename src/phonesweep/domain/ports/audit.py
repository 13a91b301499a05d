"""Port for the append-only audit log of a run."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from phonesweep.domain.model import Outcome


class AuditSinkError(RuntimeError):
    """Raised when the audit log cannot be created or written."""


@runtime_checkable
class AuditSink(Protocol):
    path: Path | None

    def write_header(self, started_at: datetime) -> None: ...

    def append(self, outcome: Outcome) -> None: ...

    def append_no_candidates(self) -> None: ...

    def close(self) -> None: ...


AuditSinkFactory = Callable[[datetime], AuditSink]


__all__ = ["AuditSink", "AuditSinkError", "AuditSinkFactory"]

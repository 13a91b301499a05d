"""Domain port definitions for adapters."""

from __future__ import annotations

from .audit import AuditSink, AuditSinkError, AuditSinkFactory
from .directory import DirectoryError, DirectoryGateway, DirectoryUnavailableError
from .preconditions import PreconditionCheck, PreconditionError

__all__ = [
    "AuditSink",
    "AuditSinkError",
    "AuditSinkFactory",
    "DirectoryError",
    "DirectoryGateway",
    "DirectoryUnavailableError",
    "PreconditionCheck",
    "PreconditionError",
]

"""Port for the directory service holding the accounts under change."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from phonesweep.domain.model import AccountRecord


class DirectoryError(RuntimeError):
    """Raised when the directory rejects or fails an operation."""


class DirectoryUnavailableError(DirectoryError):
    """Raised when the directory cannot be reached at all."""


@runtime_checkable
class DirectoryGateway(Protocol):
    """Query-by-filter and update-by-identity access to a directory service."""

    def query_candidates(self) -> Sequence[AccountRecord]:
        """Return every account whose telephone number starts with ``0``."""
        ...

    def update_attribute(self, identity: str, new_value: str) -> None:
        """Replace the telephone number of the account addressed by ``identity``."""
        ...

    def ping(self) -> None: ...


__all__ = ["DirectoryError", "DirectoryGateway", "DirectoryUnavailableError"]

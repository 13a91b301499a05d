"""Port for startup checks that must pass before a run touches anything."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class PreconditionError(RuntimeError):
    """Raised when a startup precondition is not met."""


@runtime_checkable
class PreconditionCheck(Protocol):
    name: str

    def check(self) -> None:
        """Return normally when satisfied, raise ``PreconditionError`` otherwise."""
        ...


__all__ = ["PreconditionCheck", "PreconditionError"]

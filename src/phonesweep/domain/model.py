"""Value types flowing through a normalization run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


@dataclass(frozen=True, slots=True)
class AccountRecord:
    """One directory account as read by the candidate query.

    ``identity`` is the stable key used for updates and is never derived from the
    display name. The descriptive fields are carried through for the audit log only.
    """

    identity: str
    display_name: str
    principal_name: str
    old_number: str


@dataclass(frozen=True, slots=True)
class Accepted:
    new_number: str

    def __post_init__(self) -> None:
        if not self.new_number:
            raise ValueError("Accepted number must not be empty")
        if " " in self.new_number:
            raise ValueError(f"Accepted number must not contain spaces: {self.new_number!r}")


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: str


TransformResult = Accepted | Rejected


class OutcomeKind(StrEnum):
    APPLIED = "applied"
    SIMULATED_ONLY = "simulated_only"
    REJECTED_VALIDATION = "rejected_validation"
    FAILED = "failed"


RESULT_LABELS: Final[dict[OutcomeKind, str]] = {
    OutcomeKind.APPLIED: "Success",
    OutcomeKind.SIMULATED_ONLY: "TestWithNoChanges",
    OutcomeKind.REJECTED_VALIDATION: "Failed",
    OutcomeKind.FAILED: "Failed",
}


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of processing a single account."""

    kind: OutcomeKind
    identity: str
    display_name: str
    principal_name: str
    old_number: str
    new_number: str = ""
    message: str = ""

    @classmethod
    def for_record(
        cls,
        record: AccountRecord,
        kind: OutcomeKind,
        *,
        new_number: str = "",
        message: str = "",
    ) -> Outcome:
        return cls(
            kind=kind,
            identity=record.identity,
            display_name=record.display_name,
            principal_name=record.principal_name,
            old_number=record.old_number,
            new_number=new_number,
            message=message,
        )

    @property
    def result_label(self) -> str:
        """Label written to the audit log's ``Result`` column."""

        return RESULT_LABELS[self.kind]

"""Transform, optionally persist, and describe a single account."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from .model import Outcome, OutcomeKind, Rejected
from .transform import transform_number

if TYPE_CHECKING:
    from .model import AccountRecord
    from .ports.directory import DirectoryGateway

log = getLogger(__name__)

SIMULATION_MESSAGE: Final[str] = "simulation mode: no change made"


def process_record(
    record: AccountRecord,
    *,
    gateway: DirectoryGateway,
    simulate_only: bool,
) -> Outcome:
    """Process one account and return its outcome.

    At most one directory update is issued. Update failures of any kind are
    captured in a ``FAILED`` outcome so the caller can move on to the next record.
    """

    result = transform_number(record.old_number)

    if isinstance(result, Rejected):
        log.debug("Rejected %s (%r): %s", record.principal_name, record.old_number, result.reason)
        return Outcome.for_record(record, OutcomeKind.REJECTED_VALIDATION, message=result.reason)

    new_number = result.new_number

    if simulate_only:
        return Outcome.for_record(
            record,
            OutcomeKind.SIMULATED_ONLY,
            new_number=new_number,
            message=SIMULATION_MESSAGE,
        )

    try:
        gateway.update_attribute(record.identity, new_number)
    except Exception as exc:  # noqa: BLE001
        message = str(exc) or type(exc).__name__
        log.warning("Update failed for %s: %s", record.principal_name, message)
        return Outcome.for_record(
            record,
            OutcomeKind.FAILED,
            new_number=new_number,
            message=message,
        )

    log.debug("Updated %s: %r -> %r", record.principal_name, record.old_number, new_number)
    return Outcome.for_record(record, OutcomeKind.APPLIED, new_number=new_number)

"""Run controller sequencing preconditions, query, and per-record processing."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final, NoReturn

from .model import OutcomeKind
from .processing import process_record

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from .ports.audit import AuditSink, AuditSinkFactory
    from .ports.directory import DirectoryGateway
    from .ports.preconditions import PreconditionCheck

log = getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class RunState(StrEnum):
    INIT = "init"
    PRECONDITIONS_CHECKED = "preconditions_checked"
    LOG_OPENED = "log_opened"
    QUERIED = "queried"
    ITERATING = "iterating"
    DONE = "done"
    ABORTED = "aborted"


_TRANSITIONS: Final[dict[RunState, frozenset[RunState]]] = {
    RunState.INIT: frozenset({RunState.PRECONDITIONS_CHECKED, RunState.ABORTED}),
    RunState.PRECONDITIONS_CHECKED: frozenset({RunState.LOG_OPENED, RunState.ABORTED}),
    RunState.LOG_OPENED: frozenset({RunState.QUERIED, RunState.ABORTED}),
    RunState.QUERIED: frozenset({RunState.ITERATING, RunState.DONE}),
    RunState.ITERATING: frozenset({RunState.DONE}),
    RunState.DONE: frozenset(),
    RunState.ABORTED: frozenset(),
}


class RunAbortedError(RuntimeError):
    """Raised when a fatal startup condition stops the run before processing."""

    def __init__(self, message: str, *, state: RunState) -> None:
        super().__init__(message)
        self.state = state


@dataclass(slots=True)
class RunSummary:
    """Outcome counts of a completed run."""

    state: RunState
    total: int
    counts: Counter[OutcomeKind] = field(default_factory=Counter[OutcomeKind])
    log_path: Path | None = None
    simulate_only: bool = False

    @property
    def applied(self) -> int:
        return self.counts[OutcomeKind.APPLIED]

    @property
    def simulated(self) -> int:
        return self.counts[OutcomeKind.SIMULATED_ONLY]

    @property
    def rejected(self) -> int:
        return self.counts[OutcomeKind.REJECTED_VALIDATION]

    @property
    def failed(self) -> int:
        return self.counts[OutcomeKind.FAILED]


def log_progress(processed: int, total: int) -> None:
    log.info("Processed %s/%s", processed, total)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class NormalizationRun:
    """Single-use controller for one normalization pass over the directory.

    Collaborators are injected so the run can be exercised without a privileged
    session or a live directory. ``execute`` walks the linear state machine
    ``INIT -> PRECONDITIONS_CHECKED -> LOG_OPENED -> QUERIED -> ITERATING -> DONE``;
    any failure before ``QUERIED`` moves the run to ``ABORTED`` and raises
    :class:`RunAbortedError`.
    """

    def __init__(
        self,
        *,
        gateway: DirectoryGateway,
        audit_sink_factory: AuditSinkFactory,
        preconditions: Sequence[PreconditionCheck] = (),
        simulate_only: bool = False,
        clock: Callable[[], datetime] = _local_now,
        progress: ProgressCallback | None = log_progress,
    ) -> None:
        self._gateway = gateway
        self._audit_sink_factory = audit_sink_factory
        self._preconditions = tuple(preconditions)
        self._simulate_only = simulate_only
        self._clock = clock
        self._progress = progress
        self._state = RunState.INIT

    @property
    def state(self) -> RunState:
        return self._state

    def execute(self) -> RunSummary:
        if self._state is not RunState.INIT:
            raise RuntimeError(f"Run already executed (state={self._state})")

        self._check_preconditions()
        sink = self._open_audit_sink()
        try:
            return self._query_and_process(sink)
        finally:
            sink.close()

    def _check_preconditions(self) -> None:
        for precondition in self._preconditions:
            try:
                precondition.check()
            except Exception as exc:
                self._abort(f"Precondition '{precondition.name}' failed: {exc}", exc)
            log.debug("Precondition '%s' satisfied", precondition.name)
        self._transition(RunState.PRECONDITIONS_CHECKED)

    def _open_audit_sink(self) -> AuditSink:
        started_at = self._clock()
        try:
            sink = self._audit_sink_factory(started_at)
        except Exception as exc:
            self._abort(f"Could not create audit log: {exc}", exc)
        try:
            sink.write_header(started_at)
        except Exception as exc:
            sink.close()
            self._abort(f"Could not write audit log header: {exc}", exc)
        self._transition(RunState.LOG_OPENED)
        log.info("Writing audit log to %s", sink.path)
        return sink

    def _query_and_process(self, sink: AuditSink) -> RunSummary:
        try:
            candidates = list(self._gateway.query_candidates())
        except Exception as exc:
            self._abort(f"Candidate query failed: {exc}", exc)
        self._transition(RunState.QUERIED)

        summary = RunSummary(
            state=self._state,
            total=len(candidates),
            log_path=sink.path,
            simulate_only=self._simulate_only,
        )

        if not candidates:
            log.info("No accounts with a telephone number starting with 0 were found")
            sink.append_no_candidates()
            self._transition(RunState.DONE)
            summary.state = self._state
            return summary

        log.info("Found %s candidate account(s)", summary.total)
        self._transition(RunState.ITERATING)
        for processed, record in enumerate(candidates, start=1):
            outcome = process_record(
                record,
                gateway=self._gateway,
                simulate_only=self._simulate_only,
            )
            sink.append(outcome)
            summary.counts[outcome.kind] += 1
            if self._progress is not None:
                self._progress(processed, summary.total)

        self._transition(RunState.DONE)
        summary.state = self._state
        return summary

    def _transition(self, target: RunState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal run transition {self._state} -> {target}")
        log.debug("Run state %s -> %s", self._state, target)
        self._state = target

    def _abort(self, message: str, cause: BaseException) -> NoReturn:
        aborted_from = self._state
        self._transition(RunState.ABORTED)
        log.error(message)
        raise RunAbortedError(message, state=aborted_from) from cause

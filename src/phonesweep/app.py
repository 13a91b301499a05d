"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from phonesweep.adapters.audit_log import AuditLog
from phonesweep.adapters.graph import GraphDirectoryGateway
from phonesweep.adapters.preconditions import DirectoryReachableCheck, ElevatedProcessCheck
from phonesweep.config.audit import get_audit_log_config
from phonesweep.config.graph import get_graph_config
from phonesweep.domain.run import NormalizationRun, RunSummary

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from phonesweep.config.audit import AuditLogConfig
    from phonesweep.domain.ports.audit import AuditSink
    from phonesweep.domain.ports.directory import DirectoryGateway
    from phonesweep.domain.ports.preconditions import PreconditionCheck


log = getLogger(__name__)


def normalize_telephone_numbers(
    *,
    simulate_only: bool = False,
    gateway: DirectoryGateway | None = None,
    audit_config: AuditLogConfig | None = None,
    preconditions: Sequence[PreconditionCheck] | None = None,
) -> RunSummary:
    """Rewrite leading-zero telephone numbers to ``+44`` form using the configured adapters."""

    owned_gateway: GraphDirectoryGateway | None = None
    if gateway is None:
        owned_gateway = GraphDirectoryGateway(config=get_graph_config())
        gateway = owned_gateway
    effective_audit = audit_config or get_audit_log_config()
    checks = (
        preconditions
        if preconditions is not None
        else (ElevatedProcessCheck(), DirectoryReachableCheck(gateway))
    )

    def open_audit_log(started_at: datetime) -> AuditSink:
        return AuditLog.open_for_run(effective_audit, started_at, simulate_only=simulate_only)

    log.info(
        "Starting telephone number normalization: simulate_only=%s, log_dir=%s",
        simulate_only,
        effective_audit.resolve_log_dir(),
    )

    run = NormalizationRun(
        gateway=gateway,
        audit_sink_factory=open_audit_log,
        preconditions=checks,
        simulate_only=simulate_only,
    )
    try:
        summary = run.execute()
    finally:
        if owned_gateway is not None:
            owned_gateway.close()

    log.info(
        "Finished telephone number normalization: total=%s, applied=%s, simulated=%s, "
        "rejected=%s, failed=%s, log=%s",
        summary.total,
        summary.applied,
        summary.simulated,
        summary.rejected,
        summary.failed,
        summary.log_path,
    )
    return summary

"""Audit log location and format settings."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

AUDIT_LOG_SUFFIX: Final[str] = "_TelephoneNumberUpdate.log"
AUDIT_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d-%H%M%S"


@dataclass(frozen=True, slots=True)
class AuditLogConfig:
    log_dir: Path
    suffix: str = AUDIT_LOG_SUFFIX
    quote_fields: bool = False

    def resolve_log_dir(self) -> Path:
        return self.log_dir.expanduser().resolve()


def _default_log_dir() -> Path:
    return Path(tempfile.gettempdir())


def get_audit_log_config(
    *,
    log_dir: Path | None = None,
    quote_fields: bool = False,
) -> AuditLogConfig:
    """Build the audit settings; an explicit ``log_dir`` wins over ``PHONESWEEP_LOG_DIR``."""

    if log_dir is None:
        env_dir = optional_env_var("PHONESWEEP_LOG_DIR")
        log_dir = Path(env_dir) if env_dir else _default_log_dir()
    return AuditLogConfig(log_dir=log_dir, quote_fields=quote_fields)

"""Application configuration helpers."""

from __future__ import annotations

from .audit import AUDIT_LOG_SUFFIX, AuditLogConfig, get_audit_log_config
from .env import env_float, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .graph import GraphConfig, get_graph_config
from .http import HttpConfig
from .logging import configure_logging

__all__ = [
    "AUDIT_LOG_SUFFIX",
    "AuditLogConfig",
    "ConfigurationError",
    "GraphConfig",
    "HttpConfig",
    "MissingConfigurationError",
    "configure_logging",
    "env_float",
    "get_audit_log_config",
    "get_graph_config",
    "optional_env_var",
    "require_env_vars",
]

"""Microsoft Graph directory configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, optional_env_var, require_env_vars
from .http import HttpConfig

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0/"
GRAPH_AUTHORITY_URL = "https://login.microsoftonline.com/"
GRAPH_DEFAULT_SCOPE = "https://graph.microsoft.com/.default"
GRAPH_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class GraphConfig:
    """Holds app-only credentials and endpoints for Microsoft Graph."""

    tenant_id: str
    client_id: str
    client_secret: str
    http: HttpConfig
    authority_url: str = GRAPH_AUTHORITY_URL
    scope: str = GRAPH_DEFAULT_SCOPE

    @property
    def token_url(self) -> str:
        return f"{self.authority_url.rstrip('/')}/{self.tenant_id}/oauth2/v2.0/token"


def get_graph_config(*, http: HttpConfig | None = None) -> GraphConfig:
    values = require_env_vars(("GRAPH_TENANT_ID", "GRAPH_CLIENT_ID", "GRAPH_CLIENT_SECRET"))
    return GraphConfig(
        tenant_id=values["GRAPH_TENANT_ID"],
        client_id=values["GRAPH_CLIENT_ID"],
        client_secret=values["GRAPH_CLIENT_SECRET"],
        http=http
        or HttpConfig(
            name="graph",
            base_url=optional_env_var("GRAPH_BASE_URL") or GRAPH_BASE_URL,
            timeout_seconds=env_float("GRAPH_TIMEOUT_SECONDS", GRAPH_TIMEOUT_SECONDS),
            default_headers={"Accept": "application/json"},
        ),
        authority_url=optional_env_var("GRAPH_AUTHORITY_URL") or GRAPH_AUTHORITY_URL,
    )

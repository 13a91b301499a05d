"""Directory gateway backed by the Microsoft Graph users API."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from phonesweep.domain.ports.directory import (
    DirectoryError,
    DirectoryUnavailableError,
)

from .schema import GraphErrorResponse, GraphUserPage, TokenErrorResponse, TokenResponse
from .translator import is_candidate, parse_account_record

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from phonesweep.config.graph import GraphConfig
    from phonesweep.config.http import HttpConfig
    from phonesweep.domain.model import AccountRecord

log = getLogger(__name__)

USERS_PATH: Final[str] = "users"
ORGANIZATION_PATH: Final[str] = "organization"
USER_SELECT: Final[str] = "id,displayName,userPrincipalName,businessPhones"
PAGE_SIZE: Final[int] = 999
_TOKEN_EXPIRY_MARGIN_SECONDS: Final[float] = 60.0


def _default_client_factory(config: HttpConfig) -> httpx.Client:
    return httpx.Client(
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        headers=dict(config.default_headers or {}),
    )


class GraphDirectoryGateway:
    """Read and update user telephone numbers through Microsoft Graph.

    Graph cannot filter ``businessPhones`` by prefix, so ``query_candidates`` pages
    through every user and keeps those whose primary business phone starts with
    ``0``. Updates replace ``businessPhones`` with the single normalized number,
    which is what the on-premises ``telephoneNumber`` attribute syncs to.
    """

    def __init__(
        self,
        *,
        config: GraphConfig,
        client_factory: Callable[[HttpConfig], httpx.Client] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._monotonic = monotonic
        self._client: httpx.Client | None = None
        self._token: str | None = None
        self._token_expires_at: float | None = None

    def query_candidates(self) -> list[AccountRecord]:
        records: list[AccountRecord] = []
        url: str | None = USERS_PATH
        params: dict[str, str] | None = {"$select": USER_SELECT, "$top": str(PAGE_SIZE)}
        pages = 0
        while url is not None:
            payload = self._request("GET", url, params=params)
            try:
                page = GraphUserPage.model_validate(payload)
            except ValidationError as exc:
                raise DirectoryError("Unexpected Microsoft Graph users payload") from exc
            pages += 1
            records.extend(parse_account_record(user) for user in page.value if is_candidate(user))
            # nextLink already carries the query string
            url, params = page.next_link, None
        log.debug("Fetched %s page(s) of users, %s candidate(s)", pages, len(records))
        return records

    def update_attribute(self, identity: str, new_value: str) -> None:
        self._request(
            "PATCH",
            f"{USERS_PATH}/{identity}",
            json={"businessPhones": [new_value]},
        )

    def ping(self) -> None:
        try:
            self._request("GET", ORGANIZATION_PATH, params={"$select": "id"})
        except DirectoryError as exc:
            raise DirectoryUnavailableError(f"Microsoft Graph is not reachable: {exc}") from exc

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> GraphDirectoryGateway:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = self._client_factory(self._config.http)
        return self._client

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: object = None,
    ) -> object:
        headers = {"Authorization": f"Bearer {self._access_token()}"}
        try:
            response = self._http().request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise DirectoryError(f"{type(exc).__name__}: {exc}") from exc

        if response.is_error:
            raise DirectoryError(_describe_graph_error(response))
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DirectoryError(f"Non-JSON response from {method} {url}") from exc

    def _access_token(self) -> str:
        now = self._monotonic()
        if (
            self._token is not None
            and self._token_expires_at is not None
            and now < self._token_expires_at
        ):
            return self._token

        data = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "scope": self._config.scope,
        }
        try:
            response = self._http().post(self._config.token_url, data=data)
        except httpx.HTTPError as exc:
            raise DirectoryError(f"Token request failed: {type(exc).__name__}: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if response.is_error:
            try:
                error = TokenErrorResponse.model_validate(payload)
            except ValidationError:
                raise DirectoryError(
                    f"Token request failed with HTTP {response.status_code}"
                ) from None
            raise DirectoryError(f"Token request failed: {error.error}: {error.error_description}")

        try:
            token = TokenResponse.model_validate(payload)
        except ValidationError as exc:
            raise DirectoryError("Unexpected token response payload") from exc

        self._token = token.access_token
        lifetime = token.expires_in if token.expires_in is not None else 3600
        self._token_expires_at = now + max(lifetime - _TOKEN_EXPIRY_MARGIN_SECONDS, 0.0)
        log.debug("Acquired Microsoft Graph token valid for %ss", lifetime)
        return self._token


def _describe_graph_error(response: httpx.Response) -> str:
    try:
        error = GraphErrorResponse.model_validate(response.json())
    except (ValidationError, ValueError):
        return f"HTTP {response.status_code}: {response.reason_phrase}"
    if error.error.message:
        return f"{error.error.code}: {error.error.message}"
    return error.error.code

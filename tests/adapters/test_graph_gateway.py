from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from phonesweep.adapters.graph import GraphDirectoryGateway, GraphUser, parse_account_record
from phonesweep.config.graph import GraphConfig, get_graph_config
from phonesweep.config.http import HttpConfig
from phonesweep.domain.ports.directory import (
    DirectoryError,
    DirectoryGateway,
    DirectoryUnavailableError,
)

Handler = Callable[[httpx.Request], httpx.Response]

TOKEN_URL = "https://login.example.test/tenant-1/oauth2/v2.0/token"


def _config() -> GraphConfig:
    return GraphConfig(
        tenant_id="tenant-1",
        client_id="client-1",
        client_secret="secret",
        http=HttpConfig(name="graph", base_url="https://graph.example.test/v1.0/"),
        authority_url="https://login.example.test/",
    )


def _token_response() -> httpx.Response:
    return httpx.Response(
        200,
        json={"access_token": "token-abc", "token_type": "Bearer", "expires_in": 3600},
    )


def _make_gateway(handler: Handler, *, clock: list[float] | None = None) -> GraphDirectoryGateway:
    def factory(config: HttpConfig) -> httpx.Client:
        return httpx.Client(base_url=config.base_url, transport=httpx.MockTransport(handler))

    ticks = clock if clock is not None else [0.0]
    return GraphDirectoryGateway(
        config=_config(),
        client_factory=factory,
        monotonic=lambda: ticks[0],
    )


def _user(identity: str, phones: list[str] | None, name: str = "User") -> dict[str, object]:
    return {
        "id": identity,
        "displayName": name,
        "userPrincipalName": f"{identity}@example.test",
        "businessPhones": phones,
    }


def test_gateway_satisfies_port() -> None:
    assert isinstance(_make_gateway(lambda _request: _token_response()), DirectoryGateway)


def test_query_follows_pages_and_keeps_leading_zero_numbers() -> None:
    requests: list[httpx.Request] = []
    next_link = "https://graph.example.test/v1.0/users?$skiptoken=page2"

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if str(request.url) == TOKEN_URL:
            return _token_response()
        if "skiptoken" in str(request.url):
            return httpx.Response(
                200,
                json={"value": [_user("u3", ["0161 496 0000"], "Third")]},
            )
        return httpx.Response(
            200,
            json={
                "value": [
                    _user("u1", ["0207 123 4567"], "First"),
                    _user("u2", ["+44 20 7123 4567"]),
                    _user("u4", []),
                    _user("u5", None),
                ],
                "@odata.nextLink": next_link,
            },
        )

    with _make_gateway(handler) as gateway:
        records = gateway.query_candidates()

    assert [(r.identity, r.display_name, r.old_number) for r in records] == [
        ("u1", "First", "0207 123 4567"),
        ("u3", "Third", "0161 496 0000"),
    ]
    assert records[0].principal_name == "u1@example.test"
    first_page = requests[1]
    assert first_page.url.path == "/v1.0/users"
    assert first_page.url.params["$select"] == "id,displayName,userPrincipalName,businessPhones"
    assert first_page.url.params["$top"] == "999"
    assert first_page.headers["Authorization"] == "Bearer token-abc"
    assert sum(1 for r in requests if str(r.url) == TOKEN_URL) == 1


def test_update_patches_business_phones_by_identity() -> None:
    patches: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return _token_response()
        patches.append(request)
        return httpx.Response(204)

    with _make_gateway(handler) as gateway:
        gateway.update_attribute("guid-1", "+442071234567")
        gateway.update_attribute("guid-1", "+442071234567")

    assert len(patches) == 2
    assert patches[0].method == "PATCH"
    assert patches[0].url.path == "/v1.0/users/guid-1"
    assert json.loads(patches[0].content) == {"businessPhones": ["+442071234567"]}


def test_update_error_carries_graph_code_and_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return _token_response()
        return httpx.Response(
            403,
            json={
                "error": {
                    "code": "Authorization_RequestDenied",
                    "message": "Insufficient privileges to complete the operation.",
                }
            },
        )

    gateway = _make_gateway(handler)

    with pytest.raises(DirectoryError) as excinfo:
        gateway.update_attribute("guid-1", "+442071234567")

    assert str(excinfo.value) == (
        "Authorization_RequestDenied: Insufficient privileges to complete the operation."
    )


def test_non_json_error_falls_back_to_status_line() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return _token_response()
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(DirectoryError, match="HTTP 502"):
        _make_gateway(handler).update_attribute("guid-1", "+442071234567")


def test_transport_error_becomes_directory_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return _token_response()
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DirectoryError, match="ConnectError"):
        _make_gateway(handler).query_candidates()


def test_token_error_is_reported() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            401,
            json={"error": "invalid_client", "error_description": "Bad secret"},
        )

    with pytest.raises(DirectoryError, match="invalid_client: Bad secret"):
        _make_gateway(handler).query_candidates()


def test_token_is_refreshed_after_expiry() -> None:
    token_requests = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal token_requests
        if str(request.url) == TOKEN_URL:
            token_requests += 1
            return _token_response()
        return httpx.Response(204)

    clock = [0.0]
    gateway = _make_gateway(handler, clock=clock)
    gateway.update_attribute("a", "+4412345678")
    clock[0] = 1000.0
    gateway.update_attribute("b", "+4412345678")
    clock[0] = 3600.0
    gateway.update_attribute("c", "+4412345678")

    assert token_requests == 2


def test_ping_maps_failures_to_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return _token_response()
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(DirectoryUnavailableError, match="not reachable"):
        _make_gateway(handler).ping()


def test_ping_succeeds_against_organization_endpoint() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return _token_response()
        seen.append(request.url.path)
        return httpx.Response(200, json={"value": [{"id": "org"}]})

    _make_gateway(handler).ping()

    assert seen == ["/v1.0/organization"]


def test_parse_account_record_from_mapping() -> None:
    record = parse_account_record(_user("u9", ["0123 456 789"], "Nine"))

    assert record.identity == "u9"
    assert record.old_number == "0123 456 789"
    assert GraphUser.model_validate(_user("u9", None)).telephone_number is None


def test_get_graph_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRAPH_TENANT_ID", "tenant-9")
    monkeypatch.setenv("GRAPH_CLIENT_ID", "client-9")
    monkeypatch.setenv("GRAPH_CLIENT_SECRET", "s3cret")
    monkeypatch.setenv("GRAPH_TIMEOUT_SECONDS", "12.5")

    config = get_graph_config()

    assert config.token_url == (
        "https://login.microsoftonline.com/tenant-9/oauth2/v2.0/token"
    )
    assert config.http.base_url == "https://graph.microsoft.com/v1.0/"
    assert config.http.timeout_seconds == 12.5

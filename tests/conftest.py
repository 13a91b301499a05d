from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from tests.support.directory import FakeDirectoryGateway, MemoryAuditSink, make_record

if TYPE_CHECKING:
    from phonesweep.domain.model import AccountRecord


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GRAPH_TENANT_ID",
        "GRAPH_CLIENT_ID",
        "GRAPH_CLIENT_SECRET",
        "GRAPH_BASE_URL",
        "GRAPH_AUTHORITY_URL",
        "GRAPH_TIMEOUT_SECONDS",
        "PHONESWEEP_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixed_started_at() -> datetime:
    return datetime(2024, 3, 5, 14, 7, 9)


@pytest.fixture
def candidate_records() -> list[AccountRecord]:
    return [
        make_record("0207 123 4567", identity="id-1", principal_name="ada@example.com"),
        make_record("01234567", identity="id-2", principal_name="short@example.com"),
        make_record("012345678", identity="id-3", principal_name="grace@example.com"),
    ]


@pytest.fixture
def fake_gateway(candidate_records: list[AccountRecord]) -> FakeDirectoryGateway:
    return FakeDirectoryGateway(candidate_records)


@pytest.fixture
def memory_sink() -> MemoryAuditSink:
    return MemoryAuditSink()

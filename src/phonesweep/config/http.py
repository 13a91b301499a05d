"""Configuration types for HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class HttpConfig:
    name: str
    base_url: str
    timeout_seconds: float = 30.0
    default_headers: Mapping[str, str] | None = None

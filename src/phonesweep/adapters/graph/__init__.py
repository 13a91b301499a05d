"""Public interface for the Microsoft Graph directory adapter."""

from __future__ import annotations

from .client import GraphDirectoryGateway
from .schema import GraphUser, GraphUserPage
from .translator import is_candidate, parse_account_record

__all__ = [
    "GraphDirectoryGateway",
    "GraphUser",
    "GraphUserPage",
    "is_candidate",
    "parse_account_record",
]

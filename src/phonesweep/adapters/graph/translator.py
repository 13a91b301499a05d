"""Translate Microsoft Graph payloads into domain records."""

from __future__ import annotations

from collections.abc import Mapping

from phonesweep.domain.model import AccountRecord

from .schema import GraphUser

GraphUserInput = GraphUser | Mapping[str, object]


def is_candidate(user: GraphUser) -> bool:
    number = user.telephone_number
    return number is not None and number.startswith("0")


def parse_account_record(payload: GraphUserInput) -> AccountRecord:
    user = payload if isinstance(payload, GraphUser) else GraphUser.model_validate(payload)
    return AccountRecord(
        identity=user.id,
        display_name=user.display_name or "",
        principal_name=user.user_principal_name or "",
        old_number=user.telephone_number or "",
    )

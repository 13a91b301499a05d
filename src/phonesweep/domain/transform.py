"""Rewrite of a leading-zero telephone number into UK international form."""

from __future__ import annotations

from typing import Final

from .model import Accepted, Rejected, TransformResult

UK_COUNTRY_PREFIX: Final[str] = "+44"
MIN_ELIGIBLE_LENGTH: Final[int] = 9
TOO_SHORT_REASON: Final[str] = "too short: must exceed 8 characters to qualify for change"


def transform_number(raw: str) -> TransformResult:
    """Return the ``+44`` form of ``raw`` or the reason it was rejected.

    The first character is dropped unconditionally; callers only pass numbers the
    candidate query matched on a leading ``0``. Only space characters are removed.
    """

    try:
        if len(raw) < MIN_ELIGIBLE_LENGTH:
            return Rejected(TOO_SHORT_REASON)
        candidate = UK_COUNTRY_PREFIX + raw[1:]
        return Accepted(candidate.replace(" ", ""))
    except Exception as exc:  # noqa: BLE001
        return Rejected(f"internal error: {type(exc).__name__}: {exc}")

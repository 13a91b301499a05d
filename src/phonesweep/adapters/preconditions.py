"""Host-specific startup checks."""

from __future__ import annotations

import ctypes
import os
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from phonesweep.domain.ports.directory import DirectoryError
from phonesweep.domain.ports.preconditions import PreconditionError

if TYPE_CHECKING:
    from collections.abc import Callable

    from phonesweep.domain.ports.directory import DirectoryGateway

log = getLogger(__name__)


def is_process_elevated() -> bool:
    """Return whether the current process runs with administrative rights."""

    if os.name == "nt":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except OSError:
            log.debug("IsUserAnAdmin unavailable", exc_info=True)
            return False
    return os.geteuid() == 0


@dataclass(slots=True)
class ElevatedProcessCheck:
    name: str = "elevated process"
    probe: Callable[[], bool] = field(default=is_process_elevated)

    def check(self) -> None:
        if not self.probe():
            raise PreconditionError(
                "This tool must be run with administrative privileges "
                "(an elevated prompt on Windows, root elsewhere)"
            )


@dataclass(slots=True)
class DirectoryReachableCheck:
    gateway: DirectoryGateway
    name: str = "directory reachable"

    def check(self) -> None:
        try:
            self.gateway.ping()
        except DirectoryError as exc:
            raise PreconditionError(str(exc)) from exc

"""Console logging for phonesweep runs."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from typing import TextIO

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# Same second resolution as the audit file name so the two can be matched up.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
# httpx logs every request at INFO, which would include each Graph PATCH.
CHATTY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Send run diagnostics to ``stream`` (stderr by default).

    The audit file is the record of changes; this output is only for the operator.
    HTTP client loggers stay at WARNING unless ``level`` is DEBUG.
    """

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=stream if stream is not None else sys.stderr,
        force=force,
    )
    client_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(client_level)

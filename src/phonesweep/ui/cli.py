from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from phonesweep.app import normalize_telephone_numbers
from phonesweep.config import ConfigurationError, configure_logging, get_audit_log_config
from phonesweep.domain.run import RunAbortedError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_ABORTED = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rewrite directory telephone numbers starting with 0 into +44 form",
    )
    parser.add_argument(
        "--simulate",
        "--what-if",
        dest="simulate",
        action="store_true",
        help="Query, transform and log every candidate without changing the directory",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Directory for the audit log (defaults to PHONESWEEP_LOG_DIR or the temp dir)",
    )
    parser.add_argument(
        "--quote-fields",
        action="store_true",
        help="Quote audit log fields so embedded commas keep columns aligned",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        audit_config = get_audit_log_config(
            log_dir=parsed_args.log_dir,
            quote_fields=parsed_args.quote_fields,
        )
        summary = normalize_telephone_numbers(
            simulate_only=parsed_args.simulate,
            audit_config=audit_config,
        )
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(EXIT_USAGE)
    except RunAbortedError as exc:
        log.error("Run aborted during %s: %s", exc.state, exc)  # noqa: TRY400
        sys.exit(EXIT_ABORTED)
    except Exception:
        log.exception("Fatal error during normalization")
        sys.exit(EXIT_ABORTED)

    if summary.failed or summary.rejected:
        log.warning(
            "%s account(s) could not be changed; see %s",
            summary.failed + summary.rejected,
            summary.log_path,
        )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(EXIT_ABORTED)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

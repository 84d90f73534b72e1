# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from lawdir.app import import_associations, import_facts, import_firms, import_profiles
from lawdir.config import ConfigurationError, configure_logging
from lawdir.domain.errors import StoreUnavailableError
from lawdir.domain.model import JobStatus, SourceType

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from lawdir.domain.reconciliation import JobSummary

log = logging.getLogger(__name__)

_COMMANDS = {
    "profiles": "Import lawyer profile rows",
    "associations": "Import case-lawyer claims naming the lawyer",
    "facts": "Import case-lawyer claims carrying the lawyer id",
    "firms": "Import law firm rows",
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile scraped lawyer directory records")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in _COMMANDS.items():
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("path", type=str, help="JSON Lines file with one record per line")
        command.add_argument(
            "--source",
            type=SourceType,
            choices=list(SourceType),
            default=SourceType.BAR_COUNCIL if name == "profiles" else None,
            help="Source type of the records (default: %(default)s)",
        )
        command.add_argument(
            "--paged",
            action="store_true",
            help="Read the file in pages, throttled like a remote source",
        )
        command.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable debug logging",
        )

    return parser.parse_args(list(argv))


def _print_summary(summary: JobSummary) -> None:
    print(
        f"{summary.job_type}: {summary.status} "
        f"(processed={summary.records_processed}, created={summary.records_created}, "
        f"updated={summary.records_updated}, skipped={summary.records_skipped}, "
        f"errors={summary.error_count})"
    )
    for error in summary.errors:
        print(f"  [{error.kind}] {error.subject}: {error.error}")
    if summary.error_count > len(summary.errors):
        print(f"  ... {summary.error_count - len(summary.errors)} more errors not shown")


def _importer_for(command: str) -> Callable[..., JobSummary]:
    if command == "profiles":
        return import_profiles
    if command == "associations":
        return import_associations
    if command == "facts":
        return import_facts
    if command == "firms":
        return import_firms
    raise ValueError(f"Unsupported command: {command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    importer = _importer_for(parsed_args.command)
    try:
        summary = importer(
            parsed_args.path,
            source_type=parsed_args.source,
            paged=parsed_args.paged,
        )
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except StoreUnavailableError:
        log.exception("Database unavailable")
        sys.exit(1)
    except OSError:
        log.exception("Cannot read %s", parsed_args.path)
        sys.exit(1)

    _print_summary(summary)
    if summary.status is JobStatus.FAILED:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from hwinventory.app import collect_snapshot, reconcile, reconcile_pending, submit_snapshot_file
from hwinventory.config import configure_logging
from hwinventory.domain.reconciliation import IndexBuildError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_USAGE = 2
EXIT_FATAL = 1
EXIT_RETRY = 75


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile Redfish hardware inventory")
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect = subparsers.add_parser("collect", help="Discover a BMC and store a snapshot")
    collect.add_argument(
        "--host",
        type=str,
        help="BMC host name or address (defaults to REDFISH_HOST)",
    )

    submit = subparsers.add_parser("submit", help="Store a snapshot payload read from a file")
    submit.add_argument("file", type=Path, help="JSON array of device records")
    submit.add_argument(
        "--name",
        type=str,
        help="Snapshot name (defaults to the file name)",
    )

    reconcile_cmd = subparsers.add_parser("reconcile", help="Reconcile one stored snapshot")
    reconcile_cmd.add_argument("snapshot_id", type=str, help="Id of the snapshot to reconcile")

    subparsers.add_parser(
        "reconcile-pending",
        help="Reconcile every snapshot that has not finished",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "submit" and not args.file.is_file():
        raise ValueError(f"Snapshot file not found: {args.file}")
    if args.command == "reconcile" and not args.snapshot_id.strip():
        raise ValueError("Snapshot id must not be empty")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging()
    try:
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        if parsed_args.command == "collect":
            snapshot = collect_snapshot(parsed_args.host)
            log.info("Stored snapshot %s (UID: %s)", snapshot.name, snapshot.id)
        elif parsed_args.command == "submit":
            snapshot = submit_snapshot_file(parsed_args.file, name=parsed_args.name)
            log.info("Stored snapshot %s (UID: %s)", snapshot.name, snapshot.id)
        elif parsed_args.command == "reconcile":
            outcome = reconcile(parsed_args.snapshot_id.strip())
            if not outcome.ready:
                log.error(
                    "Snapshot %s is %s: %s", outcome.snapshot_id, outcome.phase, outcome.message
                )
                sys.exit(EXIT_FATAL)
            log.info("Snapshot %s is %s: %s", outcome.snapshot_id, outcome.phase, outcome.message)
        elif parsed_args.command == "reconcile-pending":
            result = reconcile_pending()
            if result.failed:
                log.error("Snapshots that failed: %s", ", ".join(result.failed))
                sys.exit(EXIT_FATAL)
            if result.retry:
                log.warning("Snapshots to retry: %s", ", ".join(result.retry))
                sys.exit(EXIT_RETRY)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except IndexBuildError:
        log.exception("Reconciliation interrupted, retry later")
        sys.exit(EXIT_RETRY)
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_FATAL)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from forkprune.app import cleanup_fork_branches
from forkprune.config import ConfigurationError, configure_logging, default_concurrency
from forkprune.domain.cleanup import SelectionCancelledError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid positive integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value!r}")
    return number


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="forkprune",
        description=(
            "Find branches on your fork that have a merged or closed pull request "
            "to the upstream repository and delete them"
        ),
    )
    parser.add_argument(
        "--only-merged",
        action="store_true",
        help="Only delete branches whose pull request was merged",
    )
    parser.add_argument(
        "--only-closed",
        action="store_true",
        help="Only delete branches whose pull request was closed without merging",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        dest="automatic",
        help="Delete all matching branches without prompting (implied when CI is set)",
    )
    parser.add_argument(
        "-c",
        "--concurrent-calls",
        type=_positive_int,
        default=None,
        help=f"Number of GitHub calls to run concurrently (default: {default_concurrency()})",
    )
    parser.add_argument(
        "-t",
        "--token",
        type=str,
        help="GitHub personal access token with the public_repo scope (default: $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--upstream",
        type=str,
        help="Upstream repository as OWNER/NAME (default: $FORKPRUNE_UPSTREAM or "
        "microsoft/winget-pkgs)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
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
        result = cleanup_fork_branches(
            token=parsed_args.token,
            upstream=parsed_args.upstream,
            only_merged=parsed_args.only_merged,
            only_closed=parsed_args.only_closed,
            automatic=parsed_args.automatic,
            concurrent_calls=parsed_args.concurrent_calls,
        )
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except SelectionCancelledError:
        log.warning("Selection cancelled, no branches were deleted")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during cleanup")
        sys.exit(1)

    if result.deleted:
        log.info("Deleted %s branches: %s", len(result.deleted), ", ".join(result.deleted))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully; an interrupted run never continues to deletion."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(1)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

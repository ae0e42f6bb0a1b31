#!/usr/bin/env python3
"""CLI entry point for ostree-tui."""

import argparse
import sys
from pathlib import Path

from browse.session import BrowserSession
from common.env import env
from common.logger import error, get_logger, setup_logging
from repository.errors import RepoOpenError, UnknownBranchError
from repository.model import RepositoryModel
from repository.models import to_json

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ostree-tui",
        description="Browse the branches, commits and signatures of an OSTree repository.",
    )
    parser.add_argument(
        "repository",
        type=Path,
        metavar="REPOSITORY_PATH",
        help="Path to the OSTree repository",
    )
    parser.add_argument(
        "-r",
        "--refs",
        nargs="+",
        default=[],
        metavar="REF",
        help="Show only these branches at startup (default: all)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING, overridden by LOG_LEVEL)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file (default: OSTREE_TUI_LOG_FILE)",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the visible commits as JSON and exit instead of starting the browser",
    )
    return parser


def open_session(repository: Path, refs: list[str]) -> BrowserSession:
    """Open and load the repository, then apply the startup branch filter.

    Raises:
        RepoOpenError: If the repository cannot be opened or loaded
        UnknownBranchError: If a startup ref does not exist
    """
    model = RepositoryModel.open(repository)
    session = BrowserSession.start(model, refs)
    for warning in model.warnings:
        logger.warning(str(warning))
    return session


def dump(session: BrowserSession) -> None:
    commits = [session.model.graph[h] for h in session.sequence]
    print(to_json(commits))


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    interactive = not args.dump
    setup_logging(
        level=args.log_level,
        log_file=args.log_file or env.log_file(),
        console_output=True,
    )

    try:
        session = open_session(args.repository, args.refs)
    except UnknownBranchError as e:
        error(f"no such branch: {e.name}")
        return 1
    except RepoOpenError as e:
        error(f"Error: {e}")
        return 2

    if not interactive:
        dump(session)
        return 0

    # Imported late so --dump and error paths never need a terminal
    from .app import OstreeBrowserApp

    setup_logging(
        level=args.log_level,
        log_file=args.log_file or env.log_file(),
        console_output=False,
    )
    app = OstreeBrowserApp(session, refresh_interval=env.refresh_interval())
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

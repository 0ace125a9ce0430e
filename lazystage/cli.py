"""Command-line front door for lazystage.

Parses CLI options, resolves the repository path and configuration, sets up
optional debug logging, then dispatches into the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import sys
from dataclasses import replace
from pathlib import Path

from .git_backend import GitError
from .runtime import run_app
from .runtime.config import LOG_DIR, load_settings
from .ui_theme import available_theme_names

LOG_FILENAME = "debug.log"


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # The TUI owns the terminal; stray log output would corrupt frames.
        logging.disable(logging.CRITICAL)
        return

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        LOG_DIR / LOG_FILENAME,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _validate_interactive_tty() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazystage",
        description="Browse and stage the changes of a git repository in the terminal.",
    )
    parser.add_argument(
        "repository",
        nargs="?",
        default=None,
        help="Path inside the repository. Defaults to current directory.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--debug",
        action="store_true",
        help=f"Write a debug log to {LOG_DIR / LOG_FILENAME}.",
    )
    return parser


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch lazystage on a repository.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. Startup failures exit non-zero with a message; an
    empty repository prints ``No entries found`` and exits normally.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug)

    settings = load_settings()
    if args.theme is not None:
        settings = replace(settings, theme_name=args.theme)
    if args.no_color:
        settings = replace(settings, no_color=True)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.repository) if args.repository else default_path
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not _validate_interactive_tty():
        raise SystemExit("lazystage needs an interactive terminal.")

    try:
        message = run_app(path, settings)
    except GitError as exc:
        raise SystemExit(f"lazystage: {exc}") from exc
    if message:
        print(message)

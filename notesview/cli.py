"""Command-line front door for notesview.

Parses CLI options, validates the notes directory, and sets up logging.
Then dispatches into the interactive browser runtime.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .app import run_app
from .errors import TerminalInitError
from .logs import configure_logging
from .markdown import read_text, render_markdown

LOGGER = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default preview-render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notesview",
        description="Browse, preview, and organize a directory of Markdown notes.",
    )
    parser.add_argument("-d", "--dir", dest="directory", help="Path to directory with notes.")
    parser.add_argument("--render", metavar="FILE", help="Print the Markdown preview of FILE and exit.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render output (default: terminal width).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the notes browser on ``--dir``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    if args.render is not None:
        render_path = Path(args.render)
        if not render_path.is_file():
            raise SystemExit(f"Error: not a file: {render_path}")
        max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
        sys.stdout.write(render_markdown(read_text(render_path), max_cols))
        return

    if not args.directory:
        raise SystemExit("Error: no directory provided. Use -d to specify a directory.")
    root = Path(args.directory).expanduser()
    if not root.is_dir():
        raise SystemExit(f"Error: not a directory: {root}")

    try:
        run_app(root.resolve())
    except TerminalInitError as exc:
        LOGGER.debug("terminal init failed: %s", exc)
        raise SystemExit(f"Error: {exc}") from exc
    except KeyboardInterrupt:
        raise SystemExit(130)


if __name__ == "__main__":
    main()

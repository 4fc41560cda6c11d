# tinymacs/main.py
"""
Tinymacs Main Entry Point
=========================

Launches the editor. It performs:
1) Environment Loading: reads ~/.config/tinymacs/.env early, so COLORTERM and
   TINYMACS_KEYTRACE can be set there.
2) Configuration & Logging: loads config and initializes logging ASAP.
3) Argument Parsing: ``tinymacs [FILE]`` and ``--version``.
4) Terminal Session: raw mode and the alternative screen, always restored.
5) Application Run: the top-level event loop, re-entered after every C-g,
   until a command finishes it (C-x C-c).
"""

import argparse
import locale
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from tinymacs import __version__
from tinymacs.core.Buffer import Buffer
from tinymacs.core.Editor import Editor
from tinymacs.core.errors import TerminalError
from tinymacs.core.EventLoop import event_loop
from tinymacs.ui.DrawScreen import refresh_screen
from tinymacs.ui.Terminal import Terminal, register_resize_flag
from tinymacs.utils.logging_config import setup_logging
from tinymacs.utils.utils import get_config_dir, get_git_commit, load_config


logger = logging.getLogger("tinymacs")


def version_string() -> str:
    commit = get_git_commit()
    return f"tinymacs {__version__} (git: {commit[:8] if commit else 'unknown'})"


class VersionAction(argparse.Action):
    """Prints the version and exits; the git lookup runs only when requested."""

    def __init__(self, option_strings: list[str], dest: str = argparse.SUPPRESS, **kwargs: Any) -> None:
        super().__init__(option_strings, dest=dest, nargs=0, default=argparse.SUPPRESS, **kwargs)

    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: Optional[str] = None) -> None:
        print(version_string())
        parser.exit()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinymacs",
        description="A minimalist Emacs-like terminal text editor.",
    )
    parser.add_argument("file", nargs="?", help="file to edit")
    parser.add_argument("--version", action=VersionAction, help="show the version and exit")
    return parser


def run_editor(config: dict[str, Any], filename: Optional[str]) -> None:
    """Runs the editor on the controlling terminal until C-x C-c.

    Raises:
        TerminalError: The terminal could not be set up or written to.
    """
    buffer = Buffer.from_file(filename) if filename else Buffer()
    editor = Editor(config, buffer)
    term = Terminal(poll_interval_ms=int(config.get("editor", {}).get("poll_interval_ms", 30)))
    register_resize_flag(editor.was_resized)

    with term.session():
        refresh_screen(term, editor)
        # Each C-g at top level aborts the loop; only kill_editor ends it.
        while not event_loop(term, editor):
            continue


def main(argv: Optional[list[str]] = None) -> int:
    """Parses ``argv`` and runs the editor.

    Returns:
        int: The process exit status.
    """
    load_dotenv(dotenv_path=get_config_dir() / ".env")
    config = load_config()
    setup_logging(config)

    args = build_arg_parser().parse_args(argv)

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    filename = str(Path(args.file).expanduser()) if args.file else None
    logger.info(f"Tinymacs {__version__} starting up, file={filename!r}.")
    try:
        run_editor(config, filename)
    except TerminalError as e:
        logger.critical(f"Terminal failure: {e}", exc_info=True)
        print(f"tinymacs: {e}", file=sys.stderr)
        return 1

    logger.info("Tinymacs shut down gracefully.")
    return 0


def start() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    start()

"""Command line entry point that runs the inspector in the terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, Sequence

from .app import App
from .errors import InspectorError, SmallAreaError
from .styles import UiStyles

_VERSION = "0.1.2"
_MIN_WIDTH = 120
_MIN_HEIGHT = 25

_TERMS_NOTICE = (
    "crateinspect is distributed under the terms stated in its package metadata.\n"
    "It comes with no warranty, to the extent permitted by applicable law.\n"
)

# Leaves text unstyled.
_plain: Callable[[str], str] = str

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """The argument parser of the command."""
    parser = argparse.ArgumentParser(
        prog="crateinspect",
        description="Terminal tool for crates dependencies manager.",
    )
    parser.add_argument("-p", "--path", default=".", help="project directory to inspect")
    parser.add_argument(
        "-l", "--license", action="store_true", help="print distribution terms and exit"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    return parser


def _compose_frame(
    app: App,
    term: Any,
    width: int,
    height: int,
    current_error: InspectorError | None,
) -> tuple[list[str], InspectorError | None]:
    """Lines of one frame and the error shown on its bottom line, if any."""
    if width < _MIN_WIDTH or height < _MIN_HEIGHT:
        current_error = SmallAreaError()
    if current_error is None:
        return app.draw(term, width, height), None
    lines = app.draw(term, width, max(0, height - 1))
    red = getattr(term, "red", _plain) if term is not None else _plain
    message = str(current_error)[:width].ljust(width)
    lines.append(red(message))
    return lines, current_error


def _write_lines(term: Any, lines: Sequence[str]) -> None:
    out = [term.home]
    out.extend(term.move_xy(0, row) + line for row, line in enumerate(lines))
    sys.stdout.write("".join(out))
    sys.stdout.flush()


def _draw_loading(term: Any, message: str) -> None:
    width, height = term.width, term.height
    row = max(0, (height - 5) // 2)
    column = max(0, (width - len(message)) // 2)
    sys.stdout.write(term.home + term.clear + term.move_xy(column, row) + message)
    sys.stdout.flush()


def _run(path: str) -> None:
    import blessed

    term = blessed.Terminal()
    current_error: InspectorError | None = None
    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        app, errors = App.load(path, lambda message: _draw_loading(term, message))
        app.screen.styles = UiStyles.for_terminal(term)
        current_error = errors[-1] if errors else None
        sys.stdout.write(term.clear)
        while True:
            lines, current_error = _compose_frame(
                app, term, term.width, term.height, current_error
            )
            _write_lines(term, lines)
            key = term.inkey()
            if not key.is_sequence and str(key) in ("q", "Q"):
                break
            app.update(key)
    if current_error is not None:
        logger.error("Error initializing app: %s", current_error)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the arguments and run the inspector."""
    args = build_parser().parse_args(argv)
    if args.license:
        print(_TERMS_NOTICE, end="")
        return 0
    _run(args.path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
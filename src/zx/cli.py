"""Command-line and interactive front end."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Iterable, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory

from . import __version__
from .calculator import calculate
from .config import DEFAULT_PRECISION, HISTORY_FILE, MIN_PRECISION, CalcConfig
from .errors import last_error
from .formatting import format_value
from .values import Value

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Calculator usage
5 / 2 : integer math, results are truncated
5. / 2 : floating point math
5 % 2 : integer modulo
5 % 2.5 : floating point remainder
5 ** 2 - exponential
sqrt 5 - square root
sin 0.5 - sine function
cos 0.5 - cosine function
tan 0.5 - tangent function
floor 1.9 - round down
ceil 1.4 - round up
round 0.5 - round to nearest
0x20 | 7 - bitwise OR
61 & 0xf - bitwise AND
61 ^ 0x55 - bitwise XOR
~0xff - bitwise NOT
1 << 4 - bitwise shift left
0x10 >> 4 - bitwise shift right
'a' - character code
$ - previous result
help - this help
=d - output decimal
=h - output hex
=o - output octal
=b - output binary
=u - output result as unicode character
"""

_MODE_BASES = {"b": 2, "o": 8, "h": 16}


@dataclass
class Session:
    """Output mode and previous result carried between lines."""

    precision: int = DEFAULT_PRECISION
    base: int = 10
    unicode: bool = False
    prev: Value = field(default_factory=Value.zero)
    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)

    def set_mode(self, mode: str) -> None:
        self.base = _MODE_BASES.get(mode, 10)
        self.unicode = mode == "u"

    def handle_line(self, line: str) -> bool:
        """Run one input line; returns False when the user asked to quit."""
        command = line.lstrip(" \t\n\v\f\r-")

        if command.startswith("?") or command.startswith("help"):
            self.out.write(HELP_TEXT)
            return True
        if command.startswith("="):
            self.set_mode(command[1:2])
            return True
        if command.startswith("quit") or command.startswith("exit"):
            return False

        self.prev = calculate(line, self.prev, precision=self.precision)
        error = last_error()
        if error is not None:
            logger.debug("error for %r: %s", line, error)
            self.err.write(f"error: {error}\n")
            return True
        self.out.write(format_value(self.prev, self.base, unicode=self.unicode, precision=self.precision) + "\n")
        return True

    def run_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            if not self.handle_line(line.rstrip("\r\n")):
                return


def _history() -> History:
    if HISTORY_FILE:
        return FileHistory(HISTORY_FILE)
    return InMemoryHistory()


def _interactive(session: Session) -> None:
    session.out.write(f"zx version {__version__}\nType \"quit\" to quit\n")
    prompt = PromptSession(history=_history())
    while True:
        try:
            line = prompt.prompt(": ")
        except KeyboardInterrupt:
            continue
        except EOFError:
            return
        if not session.handle_line(line):
            return


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zx",
        description="Arbitrary-precision calculator. With no expression, reads lines from stdin.",
        epilog="Put -- before an expression that starts with an option-like word, e.g. zx -- -sin 1.",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help=f"float working precision in bits (default: ZX_PRECISION or {DEFAULT_PRECISION})",
    )
    parser.add_argument("--verbose", action="store_true", help="log debug output to stderr")
    parser.add_argument("--version", action="version", version=f"zx {__version__}")
    parser.add_argument("expression", nargs=argparse.REMAINDER, help="expression words, joined with spaces")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    words = list(args.expression)
    if words[:1] == ["--"]:
        words = words[1:]

    config = CalcConfig.from_env()
    if args.precision is not None:
        config = config.with_precision(max(MIN_PRECISION, args.precision))
    session = Session(precision=config.precision)
    if words:
        session.handle_line(" ".join(words))
        return 0

    if sys.stdin.isatty():
        _interactive(session)
    else:
        session.run_lines(sys.stdin)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Command-line options for the match runner front end.

Tags follow the single-dash style ``-tag [value]``:

    -concurrency N   number of games played in parallel (default 1)
    -games N         number of games (default 1)
    -openings PATH   opening file (default empty)
    -chess960        flag
    -random          flag
    -repeat          flag

Any malformed command line ends the run through die().

Example:
    >>> options = parse_options(["-games", "10", "-openings", "book.epd", "-random"])
    >>> options.games, bytes(options.openings), options.random
    (10, b'book.epd', True)
    >>> options.close()

"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NoReturn

from dynstr.buffer import DynamicString, create_empty, release
from dynstr.format import INT_RANGES
from dynstr.utils.logger import get_logger

logger = get_logger(__name__)

_INT_MIN, _INT_MAX = INT_RANGES["i"]

_VALUE_TAGS = ("-concurrency", "-games", "-openings")
_FLAG_TAGS = ("-chess960", "-random", "-repeat")


def die(template: str, *args: object) -> NoReturn:
    """Report a fatal error on stderr and end the run.

    The message is built with the ``%`` verbs of append_formatted.

    Raises:
        SystemExit: Always, with status 1
    """
    message = create_empty()
    try:
        message.append_formatted(template, *args)
        text = message.decode(errors="replace")
    finally:
        release(message)

    logger.debug("die: %s", text.rstrip("\n"))
    sys.stderr.write(text)
    sys.stderr.flush()
    raise SystemExit(1)


@dataclass
class Options:
    """Parsed command-line options.

    openings is owned by the Options instance; call close() when done.
    """

    chess960: bool = False
    concurrency: int = 1
    games: int = 1
    openings: DynamicString = field(default_factory=create_empty)
    random: bool = False
    repeat: bool = False

    def close(self) -> None:
        """Release the owned openings string."""
        release(self.openings)


class _DieArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        die("%s: %s\n", self.prog, message)


def _c_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer '{value}'") from e
    if not _INT_MIN <= n <= _INT_MAX:
        raise argparse.ArgumentTypeError(f"integer '{value}' out of range")
    return n


def build_parser(prog: str = "dynstr-options") -> argparse.ArgumentParser:
    """Build the argument parser for the ``-tag [value]`` command line."""
    parser = _DieArgumentParser(prog=prog, add_help=False, allow_abbrev=False)
    for tag in _VALUE_TAGS:
        if tag == "-openings":
            parser.add_argument(tag, default=None, metavar="PATH")
        else:
            parser.add_argument(tag, type=_c_int, default=1, metavar="N")
    for tag in _FLAG_TAGS:
        parser.add_argument(tag, action="store_true")
    return parser


def _check_tags(argv: Sequence[str], prog: str) -> None:
    # Every entry starting with "-" is a tag, so "-games -1" lacks a value
    expect_value = False
    previous = prog

    for arg in argv:
        if arg.startswith("-"):
            if expect_value:
                die("value expected after '%s'. found tag '%s' instead.\n", previous, arg)
            if arg in _VALUE_TAGS:
                expect_value = True
            elif arg not in _FLAG_TAGS:
                die("invalid tag '%s'\n", arg)
        else:
            if not expect_value:
                die("tag expected after '%s'. found value '%s' instead.\n", previous, arg)
            expect_value = False
        previous = arg

    if expect_value:
        die("value expected after '%s'\n", previous)


def parse_options(argv: Sequence[str], prog: str = "dynstr-options") -> Options:
    """Parse argv (without the program name) into Options.

    Tags and values must alternate as ``-tag [value]``. Calls die() on an
    unknown tag (including ``-h`` and ``-tag=value``), a value without a tag,
    a tag where a value was expected, or a non-integer count.
    """
    _check_tags(argv, prog)
    namespace = build_parser(prog).parse_args(list(argv))
    logger.debug("parsed options: %s", vars(namespace))

    options = Options(
        chess960=namespace.chess960,
        concurrency=namespace.concurrency,
        games=namespace.games,
        random=namespace.random,
        repeat=namespace.repeat,
    )
    if namespace.openings is not None:
        options.openings.assign(namespace.openings)
    return options


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def main(argv: Sequence[str] | None = None) -> int:
    """Parse options and print a one-line summary."""
    options = parse_options(sys.argv[1:] if argv is None else argv)
    summary = create_empty()
    try:
        summary.append_formatted(
            "concurrency=%i games=%i openings=%S chess960=%s random=%s repeat=%s\n",
            options.concurrency,
            options.games,
            options.openings,
            _yes_no(options.chess960),
            _yes_no(options.random),
            _yes_no(options.repeat),
        )
        sys.stdout.write(summary.decode(errors="replace"))
    finally:
        release(summary)
        options.close()
    return 0


__all__ = ["Options", "build_parser", "die", "main", "parse_options"]

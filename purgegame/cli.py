"""Command line entry point: plays a match and writes it out."""

from __future__ import annotations

import getopt
import re
import sys
from contextlib import ExitStack
from typing import Optional, Sequence

from .game import run
from .registry import player_names
from .settings import version
from .structs import GameError, TokenReader

PROG = "purgegame"
MAX_NAME_LENGTH = 12

_HELP = (
    "Usage: {prog} [options] player1 player2 ... [< default.cnf] [> default.out] \n"
    "Available options:\n"
    "--seed=seed     -s seed     set random seed\n"
    "--input=file    -i input    set input file  (default: stdin)\n"
    "--output=file   -o output   set output file (default: stdout)\n"
    "--list          -l          list registered players\n"
    "--version       -v          print version\n"
    "--help          -h          print help\n"
)


def _print_help() -> None:
    sys.stdout.write(_HELP.format(prog=PROG))


def _parse_int(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _print_help()
        return 0

    try:
        opts, names = getopt.gnu_getopt(
            args, "s:i:o:lvh", ["seed=", "input=", "output=", "list", "version", "help"]
        )
    except getopt.GetoptError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1

    seed = -1
    input_file = output_file = None
    for opt, value in opts:
        if opt in ("-s", "--seed"):
            seed = _parse_int(value)
        elif opt in ("-i", "--input"):
            input_file = value
        elif opt in ("-o", "--output"):
            output_file = value
        elif opt in ("-l", "--list"):
            for name in player_names():
                print(name)
            return 0
        elif opt in ("-v", "--version"):
            print(version())
            return 0
        else:
            _print_help()
            return 0

    try:
        if any(len(name) > MAX_NAME_LENGTH for name in names):
            raise GameError("Player name too long.")
        if seed < 0:
            raise GameError("Missing seed?")
        with ExitStack() as stack:
            source = stack.enter_context(open(input_file)) if input_file else sys.stdin
            out = stack.enter_context(open(output_file, "w")) if output_file else sys.stdout
            run(names, TokenReader(source), out, seed)
    except (GameError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
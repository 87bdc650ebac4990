"""Plays a whole match between registered players."""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

from .board import Board
from .registry import new_player
from .structs import GameError, TokenReader


def run(
    names: Sequence[str],
    reader: TokenReader,
    out: TextIO,
    seed: int,
    log: Optional[TextIO] = None,
) -> None:
    """Load a board, let the named players play every round and write the match."""
    log = log if log is not None else sys.stderr

    def info(message: str) -> None:
        log.write(f"info: {message}\n")

    info(f"seed {seed}")
    info("loading game")
    board = Board(reader, seed)
    info("loaded game")

    settings = board.settings
    num_players = settings.num_players
    if num_players != len(names):
        raise GameError("Wrong number of players.")

    players = []
    for pl, name in enumerate(names):
        board.names[pl] = name
        info(f"loading player {name}")
        players.append(new_player(name)(settings, pl, seed + pl + 1))
    info("players loaded")

    out.write(f"Game\n\nSeed {seed}\n\n")
    board.write_settings(out)
    board.write_names(out)
    board.write_state(out)

    for rnd in range(settings.num_rounds()):
        info(f"start round {rnd}")
        actions = []
        for pl, player in enumerate(players):
            info(f"    start player {pl}")
            player.reset(board)
            player.play()
            actions.append(player.action)
            info(f"    end player {pl}")
        board.next(actions, out)
        board.write_state(out)
        info(f"end round {rnd}")

    board.print_results(log)
    info("game played")
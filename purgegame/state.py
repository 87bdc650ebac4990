"""The changing state of a game: grid, citizens, scores and round."""

from __future__ import annotations

import copy
from dataclasses import replace

from .structs import Cell, Citizen, Pos


class State:
    """Grid contents, citizens, barricades, scores and the current round."""

    def __init__(self):
        self.grid: list[list[Cell]] = []
        self.scores: list[int] = []
        self.stats: list[float] = []  # -1 dead, otherwise fraction of cpu time used
        self.rnd = 0
        self.day = True
        self.citizens: dict[int, Citizen] = {}
        self.player_builders: list[set[int]] = []
        self.player_warriors: list[set[int]] = []
        self.player_barricades: list[set[Pos]] = []

    def round(self) -> int:
        return self.rnd

    def is_day(self) -> bool:
        return self.day

    def is_night(self) -> bool:
        return not self.day

    def cell(self, pos: Pos) -> Cell:
        """Return a copy of the cell at pos, or a default cell if pos is off the grid."""
        if 0 <= pos.i < len(self.grid) and 0 <= pos.j < len(self.grid[pos.i]):
            return replace(self.grid[pos.i][pos.j])
        return Cell()

    def citizen(self, cid: int) -> Citizen:
        """Return a copy of citizen cid, or a default citizen if there is none."""
        found = self.citizens.get(cid)
        return replace(found) if found is not None else Citizen()

    def citizen_ok(self, cid: int) -> bool:
        return cid in self.citizens

    @staticmethod
    def _sorted_for(table: list, player: int) -> list:
        if 0 <= player < len(table):
            return sorted(table[player])
        return []

    def builders(self, player: int) -> list[int]:
        return self._sorted_for(self.player_builders, player)

    def warriors(self, player: int) -> list[int]:
        return self._sorted_for(self.player_warriors, player)

    def barricades(self, player: int) -> list[Pos]:
        return self._sorted_for(self.player_barricades, player)

    def score(self, player: int) -> int:
        """Return the player's score, or -1 for an unknown player."""
        return self.scores[player] if 0 <= player < len(self.scores) else -1

    def status(self, player: int) -> float:
        """Return the player's cpu status, or -2 for an unknown player."""
        return self.stats[player] if 0 <= player < len(self.stats) else -2

    def copy_state_from(self, other: "State") -> None:
        """Replace this state with an independent copy of other's state."""
        self.grid = copy.deepcopy(other.grid)
        self.scores = list(other.scores)
        self.stats = list(other.stats)
        self.rnd = other.rnd
        self.day = other.day
        self.citizens = copy.deepcopy(other.citizens)
        self.player_builders = [set(s) for s in other.player_builders]
        self.player_warriors = [set(s) for s in other.player_warriors]
        self.player_barricades = [set(s) for s in other.player_barricades]
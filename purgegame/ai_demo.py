"""A demonstration player that moves and builds more or less at random."""

from __future__ import annotations

import sys

from .player import Player
from .registry import register
from .structs import BonusType, CitizenType, Dir

_DIRS = (Dir.UP, Dir.DOWN, Dir.LEFT, Dir.RIGHT)


@register("Demo")
class Demo(Player):
    """Shows how to use the player interface; not meant to play well."""

    def play(self) -> None:
        me = self.me()
        if self.status(me) >= 0.9:
            return
        if self.round() > self.settings.num_rounds() // 2:
            return

        barricades = self.barricades(me)
        print(
            f"At round {self.round()} player {me} has {len(barricades)} barricades:",
            file=sys.stderr,
        )
        for pos in barricades:
            print(f"Pos {pos} with resistance {self.cell(pos).resistance}", file=sys.stderr)

        if self.is_day():
            self._play_day(me)
        else:
            self._play_night(me)

    def _play_day(self, me: int) -> None:
        pos_ok = self.settings.pos_ok
        for cid in self.builders(me):
            p = self.citizen(cid).pos

            food_dir = None
            for d in _DIRS:
                if pos_ok(p + d) and self.cell(p + d).bonus == BonusType.FOOD:
                    food_dir = d
            if food_dir is not None:
                self.move(cid, food_dir)
                continue

            if self.random(0, 3) <= 1:
                d = next((d for d in _DIRS if pos_ok(p + d)), None)
                if d is not None:
                    self.build(cid, d)
                    print(f"build {cid} dir {d!s}", file=sys.stderr)
            else:
                d = _DIRS[self.random(0, 3)]
                target = p + d
                if pos_ok(target):
                    occupant = self.cell(target).id
                    if occupant == -1 or self.citizen(occupant).type == CitizenType.BUILDER:
                        self.move(cid, d)
                        print(f"move {cid} dir {d!s}", file=sys.stderr)

    def _play_night(self, me: int) -> None:
        for cid in self.warriors(me):
            if self.random(0, 9) < 6:
                d = _DIRS[self.random(0, 3)]
                p = self.citizen(cid).pos
                if self.settings.pos_ok(p + d):
                    print(f"move {cid} dir {d!s}", file=sys.stderr)
                    self.move(cid, d)
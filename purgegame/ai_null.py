"""A player that never issues any command."""

from __future__ import annotations

from .player import Player
from .registry import register


@register("Null")
class Null(Player):
    """Does nothing each round."""

    def play(self) -> None:
        return None
"""Base class for players."""

from __future__ import annotations

from .action import Action
from .info import Info
from .rng import RandomGenerator
from .settings import Settings
from .structs import Dir, GameError, TokenReader


class Player(Info):
    """A player: sees the game information and issues commands each round.

    Subclass it, override play and register the subclass by name.
    """

    def __init__(self, settings: Settings, me: int, seed: int):
        super().__init__(settings)
        self._me = me
        self._rng = RandomGenerator(seed)
        self.action = Action()

    def me(self) -> int:
        """Return the identifier of this player."""
        return self._me

    def play(self) -> None:
        """Decide the commands of one round; the base player does nothing."""

    def random(self, low: int, high: int) -> int:
        return self._rng.random(low, high)

    def random_permutation(self, n: int) -> list[int]:
        return self._rng.random_permutation(n)

    def move(self, cid: int, direction: Dir) -> None:
        self.action.move(cid, direction)

    def build(self, cid: int, direction: Dir) -> None:
        self.action.build(cid, direction)

    def reset(self, info: Info) -> None:
        """Clear pending commands and take a copy of the current game state."""
        self.action = Action()
        self.copy_state_from(info)

    def reset_from_stream(self, reader: TokenReader) -> None:
        """Clear pending commands and read the state as the board writes it."""
        players = self.settings.num_players
        self.action = Action()
        self.citizens = {}
        self.player_builders = [set() for _ in range(players)]
        self.player_warriors = [set() for _ in range(players)]
        self.player_barricades = [set() for _ in range(players)]

        self.read_grid(reader)
        try:
            reader.expect("round")
            rnd = reader.next_int()
            if not 0 <= rnd < self.settings.num_rounds():
                raise GameError("Round is not ok.")
            self.rnd = rnd

            reader.expect("day")
            self.day = bool(reader.next_int())

            reader.expect("score")
            scores = [reader.next_int() for _ in range(players)]
            if any(score < 0 for score in scores):
                raise GameError("Score cannot be negative.")
            self.scores = scores

            reader.expect("status")
            stats = [reader.next_float() for _ in range(players)]
            if any(st != -1 and not 0 <= st <= 1 for st in stats):
                raise GameError("Status is not ok.")
            self.stats = stats
        except EOFError as exc:
            raise GameError("unexpected end of state") from exc

        self.check()
"""Basic game types: directions, positions, cells, citizens and token input."""

from __future__ import annotations

import io
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from functools import total_ordering
from typing import Iterable, Optional, TextIO, Union

GAME_NAME = "ThePurge"
VERSION = "1.0"

INT_MAX = 2**31 - 1


class GameError(Exception):
    """Raised when game data or a game invariant is wrong."""


class _LabelledEnum(IntEnum):
    def __str__(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class Dir(_LabelledEnum):
    """Directions a citizen can move or build towards."""

    DOWN = 0
    RIGHT = 1
    UP = 2
    LEFT = 3


_STEPS = {
    Dir.DOWN: (1, 0),
    Dir.RIGHT: (0, 1),
    Dir.UP: (-1, 0),
    Dir.LEFT: (0, -1),
}


@total_ordering
@dataclass(frozen=True)
class Pos:
    """A position on the board: row i, column j."""

    i: int = 0
    j: int = 0

    def __add__(self, other):
        if isinstance(other, Pos):
            return Pos(self.i + other.i, self.j + other.j)
        if isinstance(other, int):
            try:
                di, dj = _STEPS[Dir(other)]
            except ValueError:
                return self
            return Pos(self.i + di, self.j + dj)
        return NotImplemented

    def __lt__(self, other):
        if not isinstance(other, Pos):
            return NotImplemented
        return (self.i, self.j) < (other.i, other.j)

    def __str__(self) -> str:
        return f"({self.i}, {self.j})"


class BonusType(_LabelledEnum):
    MONEY = 0
    FOOD = 1
    NO_BONUS = 2


class WeaponType(_LabelledEnum):
    HAMMER = 0
    GUN = 1
    BAZOOKA = 2
    NO_WEAPON = 3


class CellType(_LabelledEnum):
    STREET = 0
    BUILDING = 1


class CitizenType(_LabelledEnum):
    BUILDER = 0
    WARRIOR = 1


class CommandType(_LabelledEnum):
    MOVE = 0
    BUILD = 1


@dataclass
class Cell:
    """A board cell and its contents; -1 marks an absent barricade, owner or citizen."""

    type: CellType = CellType.STREET
    bonus: BonusType = BonusType.NO_BONUS
    weapon: WeaponType = WeaponType.NO_WEAPON
    resistance: int = -1
    b_owner: int = -1
    id: int = -1

    def is_empty(self) -> bool:
        return (
            self.type == CellType.STREET
            and self.bonus == BonusType.NO_BONUS
            and self.weapon == WeaponType.NO_WEAPON
            and self.resistance == -1
            and self.b_owner == -1
            and self.id == -1
        )


@dataclass
class Citizen:
    """A citizen on the board."""

    type: CitizenType = CitizenType.BUILDER
    id: int = -1
    player: int = -1
    pos: Pos = field(default_factory=Pos)
    weapon: WeaponType = WeaponType.NO_WEAPON
    life: int = INT_MAX


def strongest_weapon(w1: WeaponType, w2: WeaponType) -> WeaponType:
    """Return the stronger of two weapons."""
    for weapon in (WeaponType.BAZOOKA, WeaponType.GUN, WeaponType.HAMMER):
        if weapon in (w1, w2):
            return weapon
    return WeaponType.NO_WEAPON


_COMMAND_CHARS = {CommandType.MOVE: "m", CommandType.BUILD: "b"}
_DIR_CHARS = {Dir.DOWN: "d", Dir.RIGHT: "r", Dir.UP: "u", Dir.LEFT: "l"}
_BONUS_CHARS = {BonusType.MONEY: "m", BonusType.FOOD: "f", BonusType.NO_BONUS: "n"}
_WEAPON_CHARS = {
    WeaponType.HAMMER: "h",
    WeaponType.GUN: "g",
    WeaponType.BAZOOKA: "b",
    WeaponType.NO_WEAPON: "n",
}
_CITIZEN_CHARS = {CitizenType.BUILDER: "b", CitizenType.WARRIOR: "w"}


def _invert(table: dict) -> dict:
    return {char: value for value, char in table.items()}


_CHAR_COMMANDS = _invert(_COMMAND_CHARS)
_CHAR_DIRS = _invert(_DIR_CHARS)
_CHAR_BONUSES = _invert(_BONUS_CHARS)
_CHAR_WEAPONS = _invert(_WEAPON_CHARS)
_CHAR_CITIZENS = _invert(_CITIZEN_CHARS)


def command_type_to_char(value) -> str:
    return _COMMAND_CHARS.get(value, "_")


def char_to_command_type(c: str) -> Optional[CommandType]:
    """Return the command type for c, or None if c names none."""
    return _CHAR_COMMANDS.get(c)


def dir_to_char(value) -> str:
    return _DIR_CHARS.get(value, "_")


def char_to_dir(c: str) -> Optional[Dir]:
    return _CHAR_DIRS.get(c)


def bonus_to_char(value) -> str:
    return _BONUS_CHARS.get(value, "n")


def char_to_bonus(c: str) -> Optional[BonusType]:
    return _CHAR_BONUSES.get(c)


def weapon_to_char(value) -> str:
    return _WEAPON_CHARS.get(value, "n")


def char_to_weapon(c: str) -> Optional[WeaponType]:
    return _CHAR_WEAPONS.get(c)


def citizen_type_to_char(value) -> str:
    return _CITIZEN_CHARS.get(value, "_")


def char_to_citizen_type(c: str) -> Optional[CitizenType]:
    return _CHAR_CITIZENS.get(c)


class TokenReader:
    """Reads whitespace-separated tokens lazily from a string or text stream."""

    def __init__(self, source: Union[str, TextIO, Iterable[str]]):
        if isinstance(source, str):
            source = io.StringIO(source)
        self._lines = iter(source)
        self._pending: deque[str] = deque()

    def _fill(self) -> bool:
        while not self._pending:
            line = next(self._lines, None)
            if line is None:
                return False
            self._pending.extend(line.split())
        return True

    def next(self) -> str:
        """Return the next token; raise EOFError when input is exhausted."""
        if not self._fill():
            raise EOFError("unexpected end of input")
        return self._pending.popleft()

    def next_int(self) -> int:
        token = self.next()
        try:
            return int(token)
        except ValueError:
            raise GameError(f"expected an integer, found {token!r}") from None

    def next_float(self) -> float:
        token = self.next()
        try:
            return float(token)
        except ValueError:
            raise GameError(f"expected a number, found {token!r}") from None

    def expect(self, word: str) -> None:
        """Read one token and raise GameError unless it equals word."""
        token = self.next()
        if token != word:
            raise GameError(f"expected {word!r} while parsing, found {token!r}")
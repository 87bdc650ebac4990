"""Game settings that stay fixed for the whole match."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Callable, TextIO

from .structs import GAME_NAME, VERSION, CitizenType, GameError, Pos, TokenReader, WeaponType


def version() -> str:
    """Return the game name and version."""
    return f"{GAME_NAME} {VERSION}"


def _at_least(low: int) -> Callable[[int], bool]:
    return lambda value: value >= low


def _between(low: int, high: int) -> Callable[[int], bool]:
    return lambda value: low <= value <= high


# Keys in file order, with the check each value must pass and the error it raises.
_RULES: tuple[tuple[str, Callable[[int], bool], str], ...] = (
    ("NUM_PLAYERS", lambda v: v == 4, "Wrong NUM_PLAYERS."),
    ("NUM_DAYS", _at_least(1), "Wrong NUM_DAYS."),
    ("NUM_ROUNDS_PER_DAY", lambda v: v >= 1 and v % 2 == 0, "Wrong NUM_ROUNDS_PER_DAY."),
    ("BOARD_ROWS", _between(12, 25), "BOARD_ROWS should be in [12,25]."),
    ("BOARD_COLS", _between(12, 50), "BOARD_COLS should be in [12,50]."),
    ("NUM_INI_BUILDERS", _between(1, 6), "Wrong NUM_INI_BUILDERS."),
    ("NUM_INI_WARRIORS", _between(1, 4), "Wrong NUM_INI_WARRIORS."),
    ("NUM_INI_MONEY", _between(0, 10), "Wrong NUM_INI_MONEY."),
    ("NUM_INI_FOOD", _between(0, 10), "Wrong NUM_INI_FOOD."),
    ("NUM_INI_GUNS", _between(0, 5), "Wrong NUM_INI_GUNS."),
    ("NUM_INI_BAZOOKAS", _between(0, 4), "Wrong NUM_INI_BAZOOKAS."),
    ("BUILDER_INI_LIFE", _at_least(1), "Wrong BUILDER_INI_LIFE."),
    ("WARRIOR_INI_LIFE", _at_least(1), "Wrong WARRIOR_INI_LIFE."),
    ("MONEY_POINTS", _at_least(1), "Wrong MONEY_POINTS."),
    ("KILL_BUILDER_POINTS", _at_least(1), "Wrong KILL_BUILDER_POINTS"),
    ("KILL_WARRIOR_POINTS", _at_least(1), "Wrong KILL_WARRIOR_POINTS."),
    ("FOOD_INCR_LIFE", _at_least(1), "Wrong FOOD_INCR_LIFE."),
    ("LIFE_LOST_IN_ATTACK", _at_least(1), "Wrong LIFE_LOST_IN_ATTACK"),
    ("BUILDER_STRENGTH_ATTACK", _at_least(1), "Wrong BUILDER_STRENGTH_ATTACK."),
    ("HAMMER_STRENGTH_ATTACK", _at_least(1), "Wrong HAMMER_STRENGTH_ATTACK."),
    ("GUN_STRENGTH_ATTACK", _at_least(1), "Wrong GUN_STRENGTH_ATTACK."),
    ("BAZOOKA_STRENGTH_ATTACK", _at_least(1), "Wrong BAZOOKA_STRENGTH_ATTACK."),
    ("BUILDER_STRENGTH_DEMOLISH", _at_least(1), "Wrong BUILDER_STRENGTH_DEMOLISH."),
    ("HAMMER_STRENGTH_DEMOLISH", _at_least(1), "Wrong HAMMER_STRENGTH_DEMOLISH."),
    ("GUN_STRENGTH_DEMOLISH", _at_least(1), "Wrong GUN_STRENGTH_DEMOLISH."),
    ("BAZOOKA_STRENGTH_DEMOLISH", _at_least(1), "Wrong BAZOOKA_STRENGTH_DEMOLISH."),
    ("NUM_ROUNDS_REGEN_BUILDER", _at_least(1), "Wrong NUM_ROUNDS_REGEN_BUILDER."),
    ("NUM_ROUNDS_REGEN_WARRIOR", _at_least(1), "Wrong NUM_ROUNDS_REGEN_WARRIOR."),
    ("NUM_ROUNDS_REGEN_FOOD", _at_least(1), "Wrong NUM_ROUNDS_REGEN_FOOD."),
    ("NUM_ROUNDS_REGEN_MONEY", _at_least(1), "Wrong NUM_ROUNDS_REGEN_MONEY."),
    ("NUM_ROUNDS_REGEN_WEAPON", _at_least(1), "Wrong NUM_ROUNDS_REGEN_WEAPON."),
    ("BARRICADE_RESISTANCE_STEP", _at_least(1), "Wrong BARRICADE_RESISTANCE_STEP."),
    ("BARRICADE_MAX_RESISTANCE", _at_least(1), "Wrong BARRICADE_MAX_RESISTANCE."),
    ("MAX_NUM_BARRICADES", _at_least(1), "Wrong MAX_NUM_BARRICADES."),
)


@dataclass(frozen=True)
class Settings:
    """All game settings except the player names."""

    num_players: int
    num_days: int
    num_rounds_per_day: int
    board_rows: int
    board_cols: int
    num_ini_builders: int
    num_ini_warriors: int
    num_ini_money: int
    num_ini_food: int
    num_ini_guns: int
    num_ini_bazookas: int
    builder_ini_life: int
    warrior_ini_life: int
    money_points: int
    kill_builder_points: int
    kill_warrior_points: int
    food_incr_life: int
    life_lost_in_attack: int
    builder_strength_attack: int
    hammer_strength_attack: int
    gun_strength_attack: int
    bazooka_strength_attack: int
    builder_strength_demolish: int
    hammer_strength_demolish: int
    gun_strength_demolish: int
    bazooka_strength_demolish: int
    num_rounds_regen_builder: int
    num_rounds_regen_warrior: int
    num_rounds_regen_food: int
    num_rounds_regen_money: int
    num_rounds_regen_weapon: int
    barricade_resistance_step: int
    barricade_max_resistance: int
    max_num_barricades: int

    @classmethod
    def read(cls, reader: TokenReader) -> "Settings":
        """Read and validate settings in the format produced by write."""
        try:
            for expected in version().split():
                if reader.next() != expected:
                    raise GameError("Problems when reading.")
            values = {}
            for key, check, message in _RULES:
                name = reader.next()
                value = reader.next_int()
                if name != key:
                    raise GameError(f"Expected '{key}' while parsing. Found {name}")
                if not check(value):
                    raise GameError(message)
                values[key.lower()] = value
        except EOFError as exc:
            raise GameError("unexpected end of settings") from exc
        settings = cls(**values)
        if not settings.ok():
            raise GameError("Settings invariants not fulfilled.")
        return settings

    def write(self, out: TextIO) -> None:
        """Write the version, a blank line and one KEY<tab>value line per setting."""
        out.write(f"{version()}\n\n")
        for field in fields(self):
            out.write(f"{field.name.upper()}\t{getattr(self, field.name)}\n")

    def num_rounds(self) -> int:
        return self.num_days * self.num_rounds_per_day

    def citizen_ini_life(self, citizen_type) -> int:
        """Initial (and maximum) life of a citizen type; -1 if unknown."""
        return {
            CitizenType.BUILDER: self.builder_ini_life,
            CitizenType.WARRIOR: self.warrior_ini_life,
        }.get(citizen_type, -1)

    def weapon_strength_attack(self, weapon) -> int:
        """Attack strength of a weapon; NO_WEAPON means a builder's strength."""
        return {
            WeaponType.HAMMER: self.hammer_strength_attack,
            WeaponType.GUN: self.gun_strength_attack,
            WeaponType.BAZOOKA: self.bazooka_strength_attack,
            WeaponType.NO_WEAPON: self.builder_strength_attack,
        }.get(weapon, -1)

    def weapon_strength_demolish(self, weapon) -> int:
        """Demolish strength of a weapon; NO_WEAPON means a builder's strength."""
        return {
            WeaponType.HAMMER: self.hammer_strength_demolish,
            WeaponType.GUN: self.gun_strength_demolish,
            WeaponType.BAZOOKA: self.bazooka_strength_demolish,
            WeaponType.NO_WEAPON: self.builder_strength_demolish,
        }.get(weapon, -1)

    def num_rounds_regen_citizen(self, citizen_type) -> int:
        return {
            CitizenType.BUILDER: self.num_rounds_regen_builder,
            CitizenType.WARRIOR: self.num_rounds_regen_warrior,
        }.get(citizen_type, -1)

    def player_ok(self, player: int) -> bool:
        return 0 <= player < self.num_players

    def pos_ok(self, pos: Pos) -> bool:
        return 0 <= pos.i < self.board_rows and 0 <= pos.j < self.board_cols

    def is_round_day(self, r: int) -> bool:
        return r % self.num_rounds_per_day < self.num_rounds_per_day // 2

    def is_round_night(self, r: int) -> bool:
        return not self.is_round_day(r)

    def ok(self) -> bool:
        """Check that strengths grow with the weapon and the barricade step fits."""
        demolish = (
            self.builder_strength_demolish,
            self.hammer_strength_demolish,
            self.gun_strength_demolish,
            self.bazooka_strength_demolish,
        )
        attack = (
            self.builder_strength_attack,
            self.hammer_strength_attack,
            self.gun_strength_attack,
            self.bazooka_strength_attack,
        )
        for series in (demolish, attack):
            if any(a > b for a, b in zip(series, series[1:])):
                return False
        return self.barricade_resistance_step <= self.barricade_max_resistance
"""Game information shared by the board and the players: settings plus state."""

from __future__ import annotations

import sys
from collections import Counter

from .settings import Settings
from .state import State
from .structs import (
    BonusType,
    Cell,
    CellType,
    Citizen,
    CitizenType,
    GameError,
    Pos,
    TokenReader,
    WeaponType,
    char_to_citizen_type,
    char_to_weapon,
)

_CELL_CHARS = {
    ".": {},
    "B": {"type": CellType.BUILDING},
    "G": {"weapon": WeaponType.GUN},
    "Z": {"weapon": WeaponType.BAZOOKA},
    "M": {"bonus": BonusType.MONEY},
    "F": {"bonus": BonusType.FOOD},
    # Citizens and barricades are listed separately; their map cells start empty.
    "C": {},
    "c": {},
    "W": {},
    "w": {},
    "b": {},
}


def char_to_cell(c: str) -> Cell:
    """Return the cell a map character describes."""
    try:
        return Cell(**_CELL_CHARS[c])
    except KeyError:
        raise GameError(f"{c} in grid definition.") from None


def _is_member(enum_type, value) -> bool:
    try:
        enum_type(value)
    except ValueError:
        return False
    return True


class Info(State):
    """The game settings together with the current state."""

    def __init__(self, settings: Settings):
        super().__init__()
        self.settings = settings
        players = settings.num_players
        self.scores = [0] * players
        self.stats = [0.0] * players
        self.player_builders = [set() for _ in range(players)]
        self.player_warriors = [set() for _ in range(players)]
        self.player_barricades = [set() for _ in range(players)]

    def read_grid(self, reader: TokenReader) -> None:
        """Read the map, the citizens and the barricades."""
        settings = self.settings
        try:
            reader.next()  # column labels, tens
            reader.next()  # column labels, units
            grid = []
            for _ in range(settings.board_rows):
                reader.next()  # row label
                row = reader.next()
                if len(row) != settings.board_cols:
                    raise GameError("The read map has a line with incorrect length.")
                grid.append([char_to_cell(c) for c in row])
            self.grid = grid
            self._read_citizens(reader)
            self._read_barricades(reader)
        except EOFError as exc:
            raise GameError("unexpected end of grid data") from exc

    def _read_citizens(self, reader: TokenReader) -> None:
        if reader.next() != "citizens":
            raise GameError("Expected citizens in grid format")
        count = reader.next_int()
        for _ in range(7):  # type id player row column weapon life
            reader.next()
        for _ in range(count):
            type_char = reader.next()
            cid = reader.next_int()
            player = reader.next_int()
            row = reader.next_int()
            col = reader.next_int()
            weapon_char = reader.next()
            life = reader.next_int()
            pos = Pos(row, col)
            if not self.settings.pos_ok(pos):
                raise GameError("Citizen placed out of board")
            citizen_type = char_to_citizen_type(type_char)
            if citizen_type is None:
                raise GameError("Wrong type of citizen in grid format")
            weapon = char_to_weapon(weapon_char)
            if weapon is None:
                raise GameError(f"Wrong weapon {weapon_char} in grid format")
            if not self.settings.player_ok(player):
                raise GameError("Wrong player of citizen in grid format")
            cell = self.grid[row][col]
            if not cell.is_empty():
                raise GameError("Citizen placed in non-empty cell")
            self.citizens[cid] = Citizen(citizen_type, cid, player, pos, weapon, life)
            cell.id = cid
            if citizen_type == CitizenType.BUILDER:
                self.player_builders[player].add(cid)
            else:
                self.player_warriors[player].add(cid)

    def _read_barricades(self, reader: TokenReader) -> None:
        if reader.next() != "barricades":
            raise GameError("Expected barricades in grid format")
        count = reader.next_int()
        for _ in range(4):  # player row column resistance
            reader.next()
        for _ in range(count):
            player = reader.next_int()
            row = reader.next_int()
            col = reader.next_int()
            resistance = reader.next_int()
            pos = Pos(row, col)
            if not self.settings.pos_ok(pos):
                raise GameError("Barricade placed out of board")
            if not self.settings.player_ok(player):
                raise GameError("Wrong player of barricade in grid format")
            cell = self.grid[row][col]
            if not (cell.is_empty() or cell.id != -1):
                raise GameError("Barricade placed in non-empty cell")
            cell.resistance = resistance
            cell.b_owner = player
            self.player_barricades[player].add(pos)

    def check(self) -> None:
        """Raise GameError describing the first broken invariant, if any."""
        settings = self.settings
        if len(self.grid) != settings.board_rows:
            raise GameError("mismatch in number of rows")
        if any(len(row) != settings.board_cols for row in self.grid):
            raise GameError("mismatch in number of columns")

        for i, row in enumerate(self.grid):
            for j, cell in enumerate(row):
                self._check_cell(Pos(i, j), cell)

        if not 0 <= self.rnd <= settings.num_rounds():
            raise GameError("wrong number of rounds")

        for status in self.stats:
            if status != -1 and not 0 <= status <= 1:
                raise GameError("status should be -1 or within [0, 1]")

        counts = [Counter() for _ in range(settings.num_players)]
        for cid, citizen in self.citizens.items():
            self._check_citizen(cid, citizen)
            counts[citizen.player][citizen.type] += 1

        if len(self.player_builders) != settings.num_players:
            raise GameError("size of player2builders should be number of players")
        if len(self.player_warriors) != settings.num_players:
            raise GameError("size of player2warriors should be number of players")

        for player in range(settings.num_players):
            for kind, table, label in (
                (CitizenType.BUILDER, self.player_builders, "builder"),
                (CitizenType.WARRIOR, self.player_warriors, "warrior"),
            ):
                ids = table[player]
                for cid in ids:
                    citizen = self.citizens.get(cid)
                    if citizen is None:
                        raise GameError(f"could not find identifier of {label}")
                    if citizen.type != kind:
                        raise GameError(f"mismatch in type of {label}")
                    if citizen.player != player:
                        raise GameError(f"mismatch in player of {label}")
                if counts[player][kind] != len(ids):
                    raise GameError(f"mismatch in number of {label}s")

        for cid, citizen in self.citizens.items():
            if self.grid[citizen.pos.i][citizen.pos.j].id != cid:
                raise GameError(
                    f"citizen {cid} in 'citizens' should be at position {citizen.pos} "
                    "but is not in 'grid'"
                )

        for player, positions in enumerate(self.player_barricades):
            for pos in positions:
                cell = self.grid[pos.i][pos.j]
                if cell.resistance == -1 or cell.b_owner != player:
                    raise GameError(
                        f"position {pos} is a barricade of player {player} according to "
                        f"player2barricades but grid does not say so, resistance is "
                        f"{cell.resistance} and b_owner {cell.b_owner}"
                    )

    def _check_cell(self, pos: Pos, cell: Cell) -> None:
        if cell.type == CellType.BUILDING:
            if cell.bonus != BonusType.NO_BONUS:
                raise GameError("building cells cannot have bonus")
            if cell.weapon != WeaponType.NO_WEAPON:
                raise GameError("building cells cannot have weapons")
            if cell.resistance != -1:
                raise GameError("building cells cannot have barricades")
            if cell.id != -1:
                raise GameError("building cells cannot have citizens")
            return
        if cell.type != CellType.STREET:
            raise GameError("cells should be either building or street")

        if cell.id != -1:
            citizen = self.citizens.get(cell.id)
            if citizen is None:
                raise GameError("could not find citizen identifier")
            if cell.resistance != -1 and citizen.player != cell.b_owner:
                raise GameError("citizen cannot stand in a rival barricade")
            if citizen.pos != pos:
                raise GameError("mismatch in identifiers in the grid")
            if cell.bonus != BonusType.NO_BONUS:
                raise GameError("cell should not contain citizen and bonus")
            if cell.weapon != WeaponType.NO_WEAPON:
                raise GameError("cell should not contain citizen and weapon")
        if cell.bonus != BonusType.NO_BONUS and cell.weapon != WeaponType.NO_WEAPON:
            raise GameError("cell cannot have bonus and weapon")
        if cell.resistance != -1 and cell.bonus != BonusType.NO_BONUS:
            raise GameError("cell cannot have bonus and barricade")
        if cell.resistance != -1 and cell.weapon != WeaponType.NO_WEAPON:
            raise GameError("cell cannot have weapon and barricade")
        if not _is_member(BonusType, cell.bonus):
            raise GameError("cell contains unknown bonus")
        if not _is_member(WeaponType, cell.weapon):
            raise GameError("cell contains unknown weapon")

    def _check_citizen(self, cid: int, citizen: Citizen) -> None:
        settings = self.settings
        if citizen.type not in (CitizenType.BUILDER, CitizenType.WARRIOR):
            raise GameError("wrong type for citizen")
        if citizen.id != cid:
            raise GameError("mismatch in identifiers")
        if not settings.player_ok(citizen.player):
            raise GameError("wrong player identifier")
        if not settings.pos_ok(citizen.pos):
            raise GameError("wrong position")
        if not _is_member(WeaponType, citizen.weapon):
            raise GameError("wrong weapon for citizen")
        if citizen.type == CitizenType.WARRIOR and citizen.weapon == WeaponType.NO_WEAPON:
            raise GameError("all warriors should have a weapon")
        if citizen.type == CitizenType.BUILDER and citizen.weapon != WeaponType.NO_WEAPON:
            raise GameError("builders cannot have a weapon")
        if citizen.life <= 0:
            raise GameError("citizen cannot have negative life")
        if citizen.life > settings.citizen_ini_life(citizen.type):
            raise GameError("citizen has too large a life")

    def ok(self) -> bool:
        """Return whether all invariants hold, reporting the first failure on stderr."""
        try:
            self.check()
        except GameError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return False
        return True
"""The game board: the full game state together with the rules that advance it."""

from __future__ import annotations

import sys
from collections import Counter
from typing import Callable, Optional, Sequence, TextIO

from .action import Action, Command, write_commands
from .info import Info
from .mapgen import generate_city_grid
from .rng import RandomGenerator
from .settings import Settings
from .structs import (
    BonusType,
    Cell,
    CellType,
    Citizen,
    CitizenType,
    CommandType,
    Dir,
    GameError,
    Pos,
    TokenReader,
    WeaponType,
    citizen_type_to_char,
    strongest_weapon,
    weapon_to_char,
)

_ATTACK_SCALE = 1000
_REGEN_RADIUS = 2


class Board(Info):
    """All game information plus the player names and the board's random generator."""

    def __init__(self, reader: TokenReader, seed: int):
        self._rng = RandomGenerator(seed)
        super().__init__(Settings.read(reader))
        players = self.settings.num_players
        self.names: list[str] = [""] * players
        self.rnd = 0
        self.day = True
        self.fresh_id = 0
        # Pending regenerations: (what, rounds still to wait).
        self._bonus_to_regenerate: list[tuple[BonusType, int]] = []
        self._weapons_to_regenerate: list[tuple[WeaponType, int]] = []
        self._citizens_to_regenerate: list[tuple[tuple[CitizenType, int], int]] = []

        self._read_generator_and_grid(reader)
        self.fresh_id = max([self.fresh_id, *self.citizens]) + 1
        self.check()

    def _read_generator_and_grid(self, reader: TokenReader) -> None:
        try:
            generator = reader.next()
        except EOFError:
            raise GameError("missing board generator") from None
        if generator == "FIXED":
            self.read_grid(reader)
            self.check_is_good_initial_fixed_board()
        elif generator == "RANDOM":
            self.generate_random_board()
        else:
            raise GameError(f"unknown generator {generator}")

    def name(self, player: int) -> str:
        """Return the name of a player."""
        if not self.settings.player_ok(player):
            raise GameError("Player is not ok.")
        return self.names[player]

    # ------------------------------------------------------------------ output

    def write_settings(self, out: TextIO) -> None:
        self.settings.write(out)

    def write_names(self, out: TextIO) -> None:
        out.write("names         " + "".join(f" {self.name(pl)}" for pl in range(self.settings.num_players)) + "\n")

    def _cell_char(self, cell: Cell) -> str:
        if cell.type == CellType.BUILDING:
            return "B"
        if cell.weapon == WeaponType.GUN:
            return "G"
        if cell.weapon == WeaponType.BAZOOKA:
            return "Z"
        if cell.bonus == BonusType.MONEY:
            return "M"
        if cell.bonus == BonusType.FOOD:
            return "F"
        if cell.id != -1:
            builder = self.citizens[cell.id].type == CitizenType.BUILDER
            char = "C" if builder else "W"
            return char if cell.resistance == -1 else char.lower()
        if cell.resistance != -1:
            return "b"
        return "."

    def write_state(self, out: TextIO) -> None:
        """Write the map, citizens, barricades, round, scores and status."""
        cols = self.settings.board_cols
        out.write("\n\n")
        out.write("   " + "".join(str(j // 10) for j in range(cols)) + "\n")
        out.write("   " + "".join(str(j % 10) for j in range(cols)) + "\n")
        for i, row in enumerate(self.grid):
            out.write(f"{i // 10}{i % 10} " + "".join(self._cell_char(c) for c in row) + "\n")

        out.write("\ncitizens\n")
        out.write(f"{len(self.citizens)}\n")
        out.write("type\tid\tplayer\trow\tcolumn\tweapon\tlife\n")
        for cid in sorted(self.citizens):
            ci = self.citizens[cid]
            out.write(
                f"{citizen_type_to_char(ci.type)}\t{ci.id}\t{ci.player}\t"
                f"{ci.pos.i}\t{ci.pos.j}\t{weapon_to_char(ci.weapon)}\t{ci.life}\n"
            )

        out.write("\nbarricades\n")
        barricades = [
            Pos(i, j)
            for i, row in enumerate(self.grid)
            for j, cell in enumerate(row)
            if cell.resistance != -1
        ]
        out.write(f"{len(barricades)}\n")
        out.write("player\trow\tcolumn\tresistance\n")
        for p in barricades:
            cell = self.grid[p.i][p.j]
            out.write(f"{cell.b_owner}\t{p.i}\t{p.j}\t{cell.resistance}\n")

        out.write(f"\nround {self.rnd}\nday {int(self.day)}\n\n")
        out.write("score" + "".join(f"\t{s}" for s in self.scores) + "\n\n")
        out.write("status" + "".join(f"\t{s:g}" for s in self.stats) + "\n\n")

    def winners(self) -> list[int]:
        """Return the players with the top score."""
        max_score = 0
        best: list[int] = []
        for pl in range(self.settings.num_players):
            score = self.score(pl)
            if score == max_score:
                best.append(pl)
            elif score > max_score:
                max_score = score
                best = [pl]
        return best

    def print_results(self, err: Optional[TextIO] = None) -> None:
        """Report every score and the players with the top score."""
        err = err if err is not None else sys.stderr
        for pl in range(self.settings.num_players):
            err.write(f"info: player {self.name(pl)} got score {self.score(pl)}\n")
        err.write("info: player(s)" + "".join(f" {self.name(pl)}" for pl in self.winners()) + " got top score\n")

    # ------------------------------------------------------------- citizens

    def create_new_citizen(self, pos: Pos, citizen_type: CitizenType, player: int) -> int:
        """Place a fresh citizen of citizen_type for player at pos and return its id."""
        cid = self.fresh_id
        self.fresh_id += 1
        if cid in self.citizens:
            raise GameError("Identifier is not fresh.")
        cell = self.grid[pos.i][pos.j]
        if not cell.is_empty():
            raise GameError("Cell is already full.")
        weapon = WeaponType.NO_WEAPON if citizen_type == CitizenType.BUILDER else WeaponType.HAMMER
        self.citizens[cid] = Citizen(
            citizen_type, cid, player, pos, weapon, self.settings.citizen_ini_life(citizen_type)
        )
        cell.id = cid
        if citizen_type == CitizenType.BUILDER:
            self.player_builders[player].add(cid)
        else:
            self.player_warriors[player].add(cid)
        return cid

    def check_is_good_initial_fixed_board(self) -> None:
        """Raise GameError unless a read board matches the initial settings."""
        s = self.settings
        if len(self.grid) != s.board_rows:
            raise GameError("Fixed board has wrong number of rows.")
        if len(self.grid[0]) != s.board_cols:
            raise GameError("Fixed board has wrong number of cols.")

        counts: Counter = Counter()
        barricades = [0] * s.num_players
        for row in self.grid:
            for cell in row:
                if cell.bonus == BonusType.FOOD:
                    counts["food"] += 1
                elif cell.bonus == BonusType.MONEY:
                    counts["money"] += 1
                elif cell.weapon == WeaponType.GUN:
                    counts["guns"] += 1
                elif cell.weapon == WeaponType.BAZOOKA:
                    counts["bazookas"] += 1

                if cell.id != -1:
                    ci = self.citizen(cell.id)
                    if ci.type == CitizenType.BUILDER:
                        counts["builders"] += 1
                        if ci.life != s.builder_ini_life:
                            raise GameError("Fixed board had builder with wrong initial life.")
                    elif ci.type == CitizenType.WARRIOR:
                        counts["warriors"] += 1
                        if ci.life != s.warrior_ini_life:
                            raise GameError("Fixed board had warrior with wrong initial life.")
                    if cell.resistance != -1 and ci.player != cell.b_owner:
                        raise GameError("Fixed board has Unit of wrong player on a barricade.")

                if cell.resistance != -1:
                    barricades[cell.b_owner] += 1
                    if not 0 <= cell.resistance <= s.barricade_max_resistance:
                        raise GameError("Fixed board has barricade with wrong resistance")

        if any(n > s.max_num_barricades for n in barricades):
            raise GameError("Fixed board has too many barricades.")
        for key, expected, label in (
            ("money", s.num_ini_money, "money"),
            ("food", s.num_ini_food, "food"),
            ("guns", s.num_ini_guns, "guns"),
            ("bazookas", s.num_ini_bazookas, "bazookas"),
        ):
            if counts[key] != expected:
                raise GameError(f"Fixed board has wrong number of initial {label}.")
        for key, expected in (("builders", s.num_ini_builders), ("warriors", s.num_ini_warriors)):
            total = counts[key]
            if total % s.num_players != 0 or total // s.num_players != expected:
                raise GameError(f"Fixed board has wrong number of initial {key}")

    # --------------------------------------------------------------- rules

    def first_citizen_wins_attack(self, c1: Citizen, c2: Citizen) -> bool:
        """Decide at random, weighted by weapon strength, whether c1 beats c2."""
        s1 = self.settings.weapon_strength_attack(c1.weapon)
        s2 = self.settings.weapon_strength_attack(c2.weapon)
        num = self._rng.random(0, _ATTACK_SCALE)
        return num < s1 / (s1 + s2) * _ATTACK_SCALE

    def perform_attack(self, c1: Citizen, c2: Citizen, killed: set[int]) -> None:
        """Resolve an attack; the loser loses life and may die."""
        s = self.settings
        first_wins = self.first_citizen_wins_attack(c1, c2)
        winner, loser = (c1, c2) if first_wins else (c2, c1)
        loser.life -= s.life_lost_in_attack
        if loser.life <= 0:
            self.kill(loser.id, killed)
            self._citizens_to_regenerate.append(
                ((loser.type, loser.player), s.num_rounds_regen_citizen(loser.type))
            )
            if loser.type == CitizenType.BUILDER:
                self.scores[winner.player] += s.kill_builder_points
            else:
                self.scores[winner.player] += s.kill_warrior_points

    @staticmethod
    def _relocate(ci: Citizen, old: Cell, new: Cell, pos: Pos) -> None:
        new.id = ci.id
        old.id = -1
        ci.pos = pos

    def execute(self, command: Command, killed: set[int]) -> bool:
        """Try to apply command; return whether it had an effect."""
        if command.kind not in (CommandType.MOVE, CommandType.BUILD):
            return False
        cid = command.cid
        if cid in killed:
            return False
        ci = self.citizens.get(cid)
        if ci is None:
            return False
        try:
            direction = Dir(command.direction)
        except (ValueError, TypeError):
            return False

        s = self.settings
        pl = ci.player
        op = ci.pos
        oc = self.grid[op.i][op.j]
        np = op + direction
        if not s.pos_ok(np):
            return False
        nc = self.grid[np.i][np.j]

        if command.kind == CommandType.MOVE:
            return self._execute_move(ci, oc, nc, np, killed)
        return self._execute_build(ci, oc, nc, np)

    def _execute_move(self, ci: Citizen, oc: Cell, nc: Cell, np: Pos, killed: set[int]) -> bool:
        s = self.settings
        pl = ci.player
        if nc.type == CellType.BUILDING:
            return False
        if nc.bonus == BonusType.FOOD:
            self._bonus_to_regenerate.append((BonusType.FOOD, s.num_rounds_regen_food))
            nc.bonus = BonusType.NO_BONUS
            self._relocate(ci, oc, nc, np)
            ci.life = min(ci.life + s.food_incr_life, s.citizen_ini_life(ci.type))
        elif nc.bonus == BonusType.MONEY:
            self._bonus_to_regenerate.append((BonusType.MONEY, s.num_rounds_regen_money))
            nc.bonus = BonusType.NO_BONUS
            self._relocate(ci, oc, nc, np)
            self.scores[pl] += s.money_points
        elif nc.weapon != WeaponType.NO_WEAPON:
            self._weapons_to_regenerate.append((nc.weapon, s.num_rounds_regen_weapon))
            if ci.type == CitizenType.WARRIOR:
                ci.weapon = strongest_weapon(ci.weapon, nc.weapon)
            nc.weapon = WeaponType.NO_WEAPON
            self._relocate(ci, oc, nc, np)
        elif nc.resistance != -1:
            if self.day:
                if nc.id != -1 or nc.b_owner != pl:
                    return False
                self._relocate(ci, oc, nc, np)
            elif nc.b_owner != pl:
                nc.resistance -= s.weapon_strength_demolish(ci.weapon)
                if nc.resistance <= 0:
                    self.player_barricades[nc.b_owner].discard(np)
                    nc.resistance = -1
                    nc.b_owner = -1
            elif nc.id != -1:
                return False
            else:
                self._relocate(ci, oc, nc, np)
        elif nc.id != -1:
            if self.day:
                return False
            other = self.citizens[nc.id]
            if other.player == pl:
                return False
            self.perform_attack(ci, other, killed)
        else:
            self._relocate(ci, oc, nc, np)
        return True

    def _execute_build(self, ci: Citizen, oc: Cell, nc: Cell, np: Pos) -> bool:
        s = self.settings
        pl = ci.player
        if ci.type == CitizenType.WARRIOR or not self.day:
            return False
        if (
            nc.type == CellType.BUILDING
            or nc.bonus != BonusType.NO_BONUS
            or nc.weapon != WeaponType.NO_WEAPON
            or nc.id != -1
        ):
            return False
        if nc.resistance != -1 and nc.b_owner != pl:
            return False
        if oc.resistance != -1:
            return False
        if nc.resistance == -1 and len(self.player_barricades[pl]) >= s.max_num_barricades:
            return False
        if nc.resistance == -1:
            nc.resistance = s.barricade_resistance_step
            nc.b_owner = pl
            self.player_barricades[pl].add(np)
        else:
            nc.resistance = min(nc.resistance + s.barricade_resistance_step, s.barricade_max_resistance)
        return True

    def kill(self, cid: int, killed: set[int]) -> None:
        """Remove citizen cid from the game and record it in killed."""
        if cid in killed:
            raise GameError("Already killed")
        ci = self.citizens.get(cid)
        if ci is None:
            raise GameError("Could not find citizen to be killed")
        self.grid[ci.pos.i][ci.pos.j].id = -1
        if ci.type == CitizenType.BUILDER:
            table, label = self.player_builders, "Builder"
        else:
            table, label = self.player_warriors, "Warrior"
        if cid not in table[ci.player]:
            raise GameError(f"{label} to kill is not registered.")
        table[ci.player].discard(cid)
        del self.citizens[cid]
        killed.add(cid)

    # -------------------------------------------------------- regeneration

    def is_good_pos_to_regen(self, pos: Pos) -> bool:
        """An empty cell with no citizen within two cells in any direction."""
        if not self.grid[pos.i][pos.j].is_empty():
            return False
        for i in range(pos.i - _REGEN_RADIUS, pos.i + _REGEN_RADIUS + 1):
            for j in range(pos.j - _REGEN_RADIUS, pos.j + _REGEN_RADIUS + 1):
                if self.settings.pos_ok(Pos(i, j)) and self.grid[i][j].id != -1:
                    return False
        return True

    def random_pos_where_regenerate(self) -> Optional[Pos]:
        """Return a random good position to regenerate something, or None."""
        candidates = [
            Pos(i, j)
            for i in range(self.settings.board_rows)
            for j in range(self.settings.board_cols)
            if self.is_good_pos_to_regen(Pos(i, j))
        ]
        if not candidates:
            return None
        return candidates[self._rng.random(0, len(candidates) - 1)]

    def _regenerate(self, pending: list, place: Callable) -> list:
        remaining = []
        for payload, rounds in pending:
            rounds -= 1
            if rounds != 0:
                remaining.append((payload, rounds))
                continue
            pos = self.random_pos_where_regenerate()
            if pos is None:
                remaining.append((payload, 1))
            else:
                place(pos, payload)
        return remaining

    def _place_item(self, pos: Pos, attribute: str, value) -> None:
        cell = self.grid[pos.i][pos.j]
        if not cell.is_empty():
            raise GameError("Cell is already full.")
        setattr(cell, attribute, value)

    def regenerate_citizens(self) -> None:
        self._citizens_to_regenerate = self._regenerate(
            self._citizens_to_regenerate,
            lambda pos, who: self.create_new_citizen(pos, who[0], who[1]),
        )

    def regenerate_bonus(self) -> None:
        self._bonus_to_regenerate = self._regenerate(
            self._bonus_to_regenerate,
            lambda pos, bonus: self._place_item(pos, "bonus", bonus),
        )

    def regenerate_weapons(self) -> None:
        self._weapons_to_regenerate = self._regenerate(
            self._weapons_to_regenerate,
            lambda pos, weapon: self._place_item(pos, "weapon", weapon),
        )

    def deteriorate_barricades(self) -> None:
        """Remove every barricade on the last round of the night."""
        per_day = self.settings.num_rounds_per_day
        if self.rnd % per_day != per_day - 1:
            return
        for owned in self.player_barricades:
            owned.clear()
        for row in self.grid:
            for cell in row:
                if cell.resistance != -1:
                    cell.resistance = -1
                    cell.b_owner = -1

    # ----------------------------------------------------------- generation

    def empty_pos(self) -> Pos:
        """Return a random empty position."""
        if not any(cell.is_empty() for row in self.grid for cell in row):
            raise GameError("no empty cell left")
        while True:
            i = self._rng.random(0, self.settings.board_rows - 1)
            j = self._rng.random(0, self.settings.board_cols - 1)
            if self.grid[i][j].is_empty():
                return Pos(i, j)

    def generate_random_board(self) -> None:
        """Lay out buildings, then place citizens, bonuses and weapons at random."""
        s = self.settings
        self.grid = generate_city_grid(s.board_rows, s.board_cols, self._rng)
        for pl in range(s.num_players):
            for _ in range(s.num_ini_builders):
                self.create_new_citizen(self.empty_pos(), CitizenType.BUILDER, pl)
            for _ in range(s.num_ini_warriors):
                self.create_new_citizen(self.empty_pos(), CitizenType.WARRIOR, pl)
        for count, attribute, value in (
            (s.num_ini_food, "bonus", BonusType.FOOD),
            (s.num_ini_money, "bonus", BonusType.MONEY),
            (s.num_ini_guns, "weapon", WeaponType.GUN),
            (s.num_ini_bazookas, "weapon", WeaponType.BAZOOKA),
        ):
            for _ in range(count):
                self._place_item(self.empty_pos(), attribute, value)

    # ---------------------------------------------------------------- round

    def next(self, actions: Sequence[Action], out: TextIO) -> None:
        """Apply the players' actions, write the commands done and advance a round."""
        self.check()
        players = self.settings.num_players
        if len(actions) != players:
            raise GameError("Size should be number of players.")

        seen: set[int] = set()
        queues: list[list[Command]] = [[] for _ in range(players)]
        for pl, action in enumerate(actions):
            for command in action.commands:
                ci = self.citizens.get(command.cid)
                if ci is None or ci.player != pl:
                    continue
                if command.cid in seen:
                    raise GameError("More than one command for the same citizen.")
                seen.add(command.cid)
                queues[pl].append(command)

        # Random interleaving that keeps each player's own order.
        killed: set[int] = set()
        done: list[Command] = []
        index = [0] * players
        for _ in range(sum(len(queue) for queue in queues)):
            pending = [pl for pl in range(players) if index[pl] < len(queues[pl])]
            pl = pending[self._rng.random(1, len(pending)) - 1]
            command = queues[pl][index[pl]]
            index[pl] += 1
            if self.execute(command, killed):
                done.append(command)

        out.write("commands\n")
        write_commands(done, out)

        self.regenerate_citizens()
        self.regenerate_bonus()
        self.regenerate_weapons()
        self.deteriorate_barricades()

        self.rnd += 1
        self.day = self.settings.is_round_day(self.rnd)
        self.check()
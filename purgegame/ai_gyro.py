"""A player that hunts weapons and money by day and fights or flees by night."""

from __future__ import annotations

import heapq
from collections import deque
from typing import Callable, Iterator, Optional

from .player import Player
from .registry import register
from .structs import BonusType, CellType, Dir, Pos, WeaponType

INF = 10_000_000
_STEP_COST = 10
_DIRS = (Dir.UP, Dir.DOWN, Dir.LEFT, Dir.RIGHT)
_WEAPON_TIERS = {WeaponType.BAZOOKA: 3, WeaponType.GUN: 2, WeaponType.HAMMER: 1}


@register("HADES")
class Hades(Player):
    """Path-finding player: weapons first, then money, food when hurt, enemies at night."""

    # ------------------------------------------------------------ helpers

    def weapon_tier(self, pos: Pos) -> int:
        """Rank of the weapon carried by whoever stands at pos (0 for none)."""
        return _WEAPON_TIERS.get(self.citizen(self.cell(pos).id).weapon, 0)

    def _owner(self, pos: Pos) -> int:
        return self.citizen(self.cell(pos).id).player

    def _is_enemy(self, pos: Pos) -> bool:
        owner = self._owner(pos)
        return owner != self.me() and owner != -1

    def _explore(
        self, start: Pos, passable: Callable[[Pos], bool]
    ) -> Iterator[tuple[Pos, int]]:
        """Yield (cell, distance) in breadth-first discovery order."""
        pos_ok = self.settings.pos_ok
        seen = {start}
        queue = deque([(start, 0)])
        while queue:
            p, dist = queue.popleft()
            for d in _DIRS:
                q = p + d
                if q in seen or not pos_ok(q) or self.cell(q).type == CellType.BUILDING:
                    continue
                if not passable(q):
                    continue
                seen.add(q)
                yield q, dist + 1
                queue.append((q, dist + 1))

    def _search(
        self, start: Pos, accept: Callable[[Pos], bool], passable: Callable[[Pos], bool]
    ) -> Pos:
        return next((q for q, _ in self._explore(start, passable) if accept(q)), start)

    @staticmethod
    def _anywhere(_pos: Pos) -> bool:
        return True

    def _open_ground(self, pos: Pos) -> bool:
        return self.cell(pos).resistance < 0 and self._owner(pos) != self.me()

    # ---------------------------------------------------------- searches

    def bfs_distance(self, start: Pos, target: Pos) -> int:
        """Steps from start to target avoiding buildings, or INF if unreachable."""
        return next(
            (dist for q, dist in self._explore(start, self._anywhere) if q == target), INF
        )

    def bfs_bonus(self, start: Pos, bonus: BonusType, exception: Optional[Pos] = None) -> Pos:
        """Nearest bonus of the given kind other than exception, or start if none."""
        return self._search(
            start,
            lambda q: self.cell(q).bonus == bonus and q != exception,
            self._open_ground,
        )

    def bfs_weapon(self, start: Pos, weapon: WeaponType) -> Pos:
        """Nearest weapon of the given kind, or start if none."""
        return self._search(
            start,
            lambda q: self.cell(q).weapon == weapon,
            lambda q: self.cell(q).resistance == -1 and self._owner(q) != self.me(),
        )

    def bfs_enemy_to_flee(self, start: Pos) -> Pos:
        """Nearest enemy with a better weapon than the citizen at start, or start."""
        tier = self.weapon_tier(start)
        return self._search(
            start,
            lambda q: self._is_enemy(q) and tier < self.weapon_tier(q),
            self._anywhere,
        )

    def bfs_enemy_without_barricade(self, start: Pos) -> Pos:
        """Nearest enemy not on a barricade and not better armed, or start."""
        tier = self.weapon_tier(start)
        return self._search(
            start,
            lambda q: tier >= self.weapon_tier(q)
            and self._is_enemy(q)
            and self.cell(q).resistance < 0,
            self._anywhere,
        )

    def bfs_enemy_with_barricade(self, start: Pos) -> Pos:
        """Nearest enemy not better armed, barricaded or not, or start."""
        tier = self.weapon_tier(start)
        return self._search(
            start,
            lambda q: tier >= self.weapon_tier(q) and self._is_enemy(q),
            self._anywhere,
        )

    def flee(self, start: Pos) -> Pos:
        """Neighbour that gets furthest from a close, better armed enemy; else start."""
        enemy = self.bfs_enemy_to_flee(start)
        if enemy == start or self.bfs_distance(start, enemy) >= 3:
            return start
        best, best_dist = start, -1
        for d in _DIRS:
            q = start + d
            if not self.settings.pos_ok(q):
                continue
            cell = self.cell(q)
            if cell.type != CellType.BUILDING and cell.resistance < 0 and cell.id == -1:
                dist = self.bfs_distance(q, enemy)
                if dist > best_dist:
                    best, best_dist = q, dist
        return best

    def next_step(self, start: Pos, target: Pos) -> Pos:
        """First cell of a shortest path from start to target, or start if none."""
        pos_ok = self.settings.pos_ok
        me = self.me()
        dist = {start: 0}
        parent: dict[Pos, Pos] = {}
        done: set[Pos] = set()
        heap = [(0, -start.i, -start.j)]
        while heap:
            d, ni, nj = heapq.heappop(heap)
            x = Pos(-ni, -nj)
            if d != dist[x]:
                continue
            if x == target and x != start:
                while parent[x] != start:
                    x = parent[x]
                return x
            if x in done:
                continue
            done.add(x)
            d2 = d + _STEP_COST
            for step in _DIRS:
                x2 = x + step
                if not pos_ok(x2) or d2 >= dist.get(x2, INF):
                    continue
                cell = self.cell(x2)
                if cell.type == CellType.BUILDING or cell.resistance > 0:
                    continue
                if self.citizen(cell.id).player == me:
                    continue
                dist[x2] = d2
                parent[x2] = x
                heapq.heappush(heap, (d2, -x2.i, -x2.j))
        return start

    # ------------------------------------------------------------ moving

    @staticmethod
    def _direction_to(p: Pos, step: Pos) -> Optional[Dir]:
        if step == p:
            return _DIRS[0]
        return next((d for d in _DIRS if p + d == step), None)

    def _move_towards(self, cid: int, p: Pos, target: Pos) -> None:
        d = self._direction_to(p, self.next_step(p, target))
        if d is not None and self.settings.pos_ok(p + d):
            self.move(cid, d)

    def _money_target(self, p: Pos, builders: list[int], skip_barricaded: bool) -> Pos:
        target = self.bfs_bonus(p, BonusType.MONEY)
        if len(builders) != 1 and target != p:
            initial = self.bfs_distance(p, target)
            for other in builders:
                other_pos = self.citizen(other).pos
                if other_pos == p:
                    continue
                if skip_barricaded and self.cell(other_pos).resistance > 0:
                    continue
                if initial > self.bfs_distance(other_pos, target):
                    return self.bfs_bonus(p, BonusType.MONEY, target)
        return target

    # -------------------------------------------------------------- play

    def play(self) -> None:
        if self.is_day():
            self._play_day()
        else:
            self._play_night()

    def _play_day(self) -> None:
        me = self.me()
        for cid in self.warriors(me):
            ci = self.citizen(cid)
            p = ci.pos
            target = p
            if ci.weapon != WeaponType.BAZOOKA:
                target = self.bfs_weapon(p, WeaponType.BAZOOKA)
            if target == p and ci.weapon not in (WeaponType.GUN, WeaponType.BAZOOKA):
                target = self.bfs_weapon(p, WeaponType.GUN)
            if target == p and ci.weapon == WeaponType.BAZOOKA and ci.life < 90:
                target = self.bfs_bonus(p, BonusType.FOOD)
            self._move_towards(cid, p, target)

        builders = self.builders(me)
        for cid in builders:
            p = self.citizen(cid).pos
            self._move_towards(cid, p, self._money_target(p, builders, False))

    def _play_night(self) -> None:
        me = self.me()
        for cid in self.warriors(me):
            ci = self.citizen(cid)
            p = ci.pos
            target = self.flee(p)
            if target == p and ci.weapon != WeaponType.BAZOOKA:
                target = self.bfs_weapon(p, WeaponType.BAZOOKA)
            if target == p and ci.weapon not in (WeaponType.BAZOOKA, WeaponType.GUN):
                target = self.bfs_weapon(p, WeaponType.GUN)
            if target == p and ci.life < 40:
                target = self.flee(p)
                if target == p:
                    target = self.bfs_bonus(p, BonusType.FOOD)
            if target == p and ci.weapon == WeaponType.BAZOOKA:
                target = self.bfs_enemy_with_barricade(p)
            if target == p:
                target = self.bfs_enemy_without_barricade(p)
            self._move_towards(cid, p, target)

        builders = self.builders(me)
        for cid in builders:
            p = self.citizen(cid).pos
            if self.cell(p).resistance != -1:
                continue
            target = self.flee(p)
            if target != p:
                d = self._direction_to(p, target)
                if d is not None and self.settings.pos_ok(p + d):
                    self.move(cid, d)
            else:
                target = self._money_target(p, builders, True)
            self._move_towards(cid, p, target)
"""Random city layout: streets of building cells on an otherwise open grid."""

from __future__ import annotations

from collections import deque

from .rng import RandomGenerator
from .structs import Cell, CellType, Dir, GameError, Pos

NUM_STREETS = 5
BUILDING_FRACTION = 0.20

_ORTHOGONAL = ((1, 0), (-1, 0), (0, 1), (0, -1))
_DIAGONAL = ((1, 1), (1, -1), (-1, 1), (-1, -1))


class StreetPlanner:
    """Plans building streets on a rows x cols grid.

    ``street_plan[i][j]`` is 0 where there is no street, otherwise the id of
    the street that covers the cell.
    """

    def __init__(self, rows: int, cols: int, rng: RandomGenerator):
        self.rows = rows
        self.cols = cols
        self.rng = rng
        self.street_plan: list[list[int]] = [[0] * cols for _ in range(rows)]

    def _interior(self, pos: Pos) -> bool:
        return 1 <= pos.i <= self.rows - 2 and 1 <= pos.j <= self.cols - 2

    def _free_interior(self, pos: Pos) -> bool:
        return self._interior(pos) and self.street_plan[pos.i][pos.j] == 0

    def _around(self, pos: Pos):
        for di, dj in _ORTHOGONAL + _DIAGONAL:
            yield self.street_plan[pos.i + di][pos.j + dj]

    def pos_ok_for_street(self, street_id: int, pos: Pos) -> bool:
        """Whether street street_id may grow into pos.

        pos must be free and off the border, touch no other street (diagonals
        included) and touch at most two cells of this street.
        """
        if not self._free_interior(pos):
            return False
        occupied = 0
        for value in self._around(pos):
            if value != 0 and value != street_id:
                return False
            if value == street_id:
                occupied += 1
        return occupied <= 2

    def pos_ok_for_initial_street(self, pos: Pos) -> bool:
        """Whether a new street may start at pos: free, off the border, nothing around."""
        if not self._free_interior(pos):
            return False
        return all(value == 0 for value in self._around(pos))

    def _interior_positions(self):
        for i in range(1, self.rows - 1):
            for j in range(1, self.cols - 1):
                yield Pos(i, j)

    def _random_interior_pos(self, accept) -> Pos:
        if not any(accept(pos) for pos in self._interior_positions()):
            raise GameError("no position available for a street")
        while True:
            i = self.rng.random(1, self.rows - 2)
            j = self.rng.random(1, self.cols - 2)
            pos = Pos(i, j)
            if accept(pos):
                return pos

    def ok_pos_for_street(self, street_id: int) -> Pos:
        """Return a random position where street street_id may grow."""
        return self._random_interior_pos(lambda pos: self.pos_ok_for_street(street_id, pos))

    def ok_pos_for_initial_street(self) -> Pos:
        """Return a random position where a new street may start."""
        return self._random_interior_pos(self.pos_ok_for_initial_street)

    def generate_street(self, street_id: int, length: int) -> int:
        """Lay out one street and return the number of cells it covers.

        The street starts at a free spot and then grows up to length more
        cells, usually straight on, sometimes turning, stopping when stuck.
        """
        dirs = [Dir.UP, Dir.DOWN, Dir.LEFT, Dir.RIGHT]
        last_dir = dirs[self.rng.random(0, len(dirs) - 1)]
        p = self.ok_pos_for_initial_street()
        self.street_plan[p.i][p.j] = street_id
        filled = 1
        while length > 0:
            self.rng.shuffle(dirs)
            turn = next((d for d in dirs if self.pos_ok_for_street(street_id, p + d)), None)
            if self.rng.random(1, 8) != 1 and self.pos_ok_for_street(street_id, p + last_dir):
                p = p + last_dir
            elif turn is not None:
                last_dir = turn
                p = p + turn
            else:
                return filled
            self.street_plan[p.i][p.j] = street_id
            length -= 1
            filled += 1
        return filled

    def generate_buildings(self, num_building_cells: int, num_streets: int) -> None:
        """Reset the plan and try to spread num_building_cells cells over num_streets streets."""
        self.street_plan = [[0] * self.cols for _ in range(self.rows)]
        for pending in range(num_streets, 0, -1):
            if pending != 1:
                length = int(num_building_cells / pending)
            else:
                length = num_building_cells
            num_building_cells -= self.generate_street(pending, length)


def num_connected_components(grid: list[list[Cell]]) -> int:
    """Count the connected groups of non-building cells (4-neighbourhood)."""
    rows = len(grid)
    seen: set[tuple[int, int]] = set()
    components = 0
    for i, row in enumerate(grid):
        for j, cell in enumerate(row):
            if cell.type == CellType.BUILDING or (i, j) in seen:
                continue
            components += 1
            seen.add((i, j))
            queue = deque([(i, j)])
            while queue:
                ci, cj = queue.popleft()
                for di, dj in _ORTHOGONAL:
                    ni, nj = ci + di, cj + dj
                    if (
                        0 <= ni < rows
                        and 0 <= nj < len(grid[ni])
                        and (ni, nj) not in seen
                        and grid[ni][nj].type != CellType.BUILDING
                    ):
                        seen.add((ni, nj))
                        queue.append((ni, nj))
    return components


def generate_city_grid(rows: int, cols: int, rng: RandomGenerator) -> list[list[Cell]]:
    """Return a fresh grid whose buildings leave the streets in one connected piece."""
    num_building_cells = int(BUILDING_FRACTION * rows * cols)
    planner = StreetPlanner(rows, cols, rng)
    while True:
        planner.generate_buildings(num_building_cells, NUM_STREETS)
        grid = [
            [
                Cell(type=CellType.BUILDING) if value != 0 else Cell()
                for value in plan_row
            ]
            for plan_row in planner.street_plan
        ]
        if num_connected_components(grid) == 1:
            return grid
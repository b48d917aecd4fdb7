"""Random fleet layout generator.

Ships are placed largest first. Each ship starts from a random square and
grows one cell at a time in a random orthogonal direction, backtracking when
it runs into the board edge, another ship's neighbourhood, or itself. A ship
that cannot be grown from any of ``ship_attempts`` start squares abandons the
whole board, and generation starts over from empty water.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Set

from . import config as _cfg
from .battleship import Cell, Grid, empty_grid, serialize_board
from .coord_utils import ALL_DIRECTIONS, ORTHOGONAL, Coordinate

logger = logging.getLogger(__name__)


class GenerationExhausted(RuntimeError):
    """Raised when no valid layout was found within the retry budget."""


class BoardGenerator:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        ship_sizes: Sequence[int] = _cfg.SHIP_SIZES,
        attempts: int = _cfg.GENERATION_ATTEMPTS,
        ship_attempts: int = _cfg.SHIP_ATTEMPTS,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.ship_sizes = tuple(ship_sizes)
        self.attempts = attempts
        self.ship_attempts = ship_attempts

    def generate(self) -> str:
        """Return a 100-character map string holding the whole fleet."""
        for attempt in range(1, self.attempts + 1):
            grid = empty_grid()
            if self._place_fleet(grid):
                logger.debug("generate() – layout found on attempt %d", attempt)
                return serialize_board(grid)
            logger.debug("generate() – attempt %d blocked, restarting", attempt)
        raise GenerationExhausted(f"Failed to generate a valid board after {self.attempts} attempts")

    # ------------------------------------------------------------------ #
    # Placement
    # ------------------------------------------------------------------ #
    def _place_fleet(self, grid: Grid) -> bool:
        for size in self.ship_sizes:
            cells = self._place_ship(grid, size)
            if cells is None:
                return False
            for c in cells:
                grid[c.row][c.col] = Cell.SHIP
        return True

    def _place_ship(self, grid: Grid, size: int) -> Optional[List[Coordinate]]:
        for _ in range(self.ship_attempts):
            start = Coordinate(self.rng.randrange(len(grid)), self.rng.randrange(len(grid)))
            cells = self._grow(grid, start, size)
            if cells is not None:
                return cells
        return None

    def _grow(self, grid: Grid, start: Coordinate, size: int) -> Optional[List[Coordinate]]:
        """Depth-first random walk of *size* cells from *start*, or None.

        The stack holds, per accepted cell, the directions not yet tried from it.
        """
        if not self._is_free(grid, start):
            return None
        path = [start]
        used: Set[Coordinate] = {start}
        pending = [self._shuffled_directions()]
        while path:
            if len(path) == size:
                return path
            if not pending[-1]:
                pending.pop()
                used.discard(path.pop())
                continue
            dr, dc = pending[-1].pop()
            nxt = path[-1].move(dr, dc)
            if self._can_extend(grid, path, used, nxt):
                path.append(nxt)
                used.add(nxt)
                pending.append(self._shuffled_directions())
        return None

    def _can_extend(self, grid: Grid, path: List[Coordinate], used: Set[Coordinate], nxt: Coordinate) -> bool:
        if nxt in used or not self._is_free(grid, nxt):
            return False
        # Touching an earlier cell of the same path would close a loop or a branch.
        return all(nbr == path[-1] or nbr not in used for nbr in nxt.neighbours(ORTHOGONAL))

    @staticmethod
    def _is_free(grid: Grid, coord: Coordinate) -> bool:
        """On the board, not a ship, and not touching one (diagonals included)."""
        if not coord.is_valid() or grid[coord.row][coord.col] is Cell.SHIP:
            return False
        return all(grid[n.row][n.col] is not Cell.SHIP for n in coord.neighbours(ALL_DIRECTIONS))

    def _shuffled_directions(self) -> list:
        directions = list(ORTHOGONAL)
        self.rng.shuffle(directions)
        return directions


def generate_map(seed: Optional[int] = None) -> str:
    """Convenience wrapper: one layout from a fresh generator."""
    return BoardGenerator(random.Random(seed)).generate()

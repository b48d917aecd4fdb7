"""
battleship.py

Core data structures and shot logic, independent of any transport:
 - parse_board / serialize_board for the 100-character map format
 - Ship and Fleet, recovered from the grid by orthogonal flood fill
 - Board: a player's own grid, classifying incoming shots
 - OpponentView: what a player has learned about the other side's grid

A player holds one Board (ground truth, changed only by the peer's shots) and
one OpponentView (belief, changed only by the peer's reports on our shots).
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .config import BOARD_SIZE
from .coord_utils import ALL_DIRECTIONS, Coordinate, all_coords

logger = logging.getLogger(__name__)

Grid = List[List["Cell"]]

# Map file alphabet
WATER_CHAR = "."
SHIP_CHAR = "#"


class Cell(str, enum.Enum):
    """State of a single square; the value doubles as its display glyph."""

    WATER = "."
    SHIP = "#"
    HIT = "@"
    MISS = "~"


class Outcome(str, enum.Enum):
    """Classification of one shot, as reported back to the shooter."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "hit-sunk"
    SUNK_ALL = "hit-sunk-all"

    @property
    def is_hit(self) -> bool:
        return self is not Outcome.MISS

    @property
    def is_sunk(self) -> bool:
        return self in (Outcome.SUNK, Outcome.SUNK_ALL)


class BoardFormatError(ValueError):
    """Raised when a map string is not 100 characters of '.' and '#'."""


# ---------------------------------------------------------------------------
# Map (de)serialisation
# ---------------------------------------------------------------------------


def empty_grid() -> Grid:
    return [[Cell.WATER for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]


def parse_board(text: str) -> Grid:
    """Build a grid from a map string; whitespace and line breaks are ignored."""
    clean = "".join(text.split())
    if len(clean) != BOARD_SIZE * BOARD_SIZE:
        raise BoardFormatError(f"Map must hold {BOARD_SIZE * BOARD_SIZE} cells, got {len(clean)}")
    bad = set(clean) - {WATER_CHAR, SHIP_CHAR}
    if bad:
        raise BoardFormatError(f"Unexpected map characters: {''.join(sorted(bad))!r}")
    grid = empty_grid()
    for i, ch in enumerate(clean):
        if ch == SHIP_CHAR:
            grid[i // BOARD_SIZE][i % BOARD_SIZE] = Cell.SHIP
    return grid


def serialize_board(grid: Grid) -> str:
    """Row-major map string; hit ship cells still count as ship, misses as water."""
    return "".join(
        SHIP_CHAR if cell in (Cell.SHIP, Cell.HIT) else WATER_CHAR for row in grid for cell in row
    )


# ---------------------------------------------------------------------------
# Ships
# ---------------------------------------------------------------------------


@dataclass
class Ship:
    """A maximal orthogonally connected group of ship cells.

    ``cells`` is fixed at creation; only ``remaining`` changes as hits land.
    """

    cells: Tuple[Coordinate, ...]
    remaining: int = field(init=False)

    def __post_init__(self) -> None:
        self.remaining = len(self.cells)

    @property
    def size(self) -> int:
        return len(self.cells)

    def is_sunk(self) -> bool:
        return self.remaining == 0

    def register_hit(self) -> None:
        if self.remaining > 0:
            self.remaining -= 1


class Fleet:
    """Every ship on one grid, with a cell -> ship lookup."""

    def __init__(self, ships: List[Ship]) -> None:
        self.ships = ships
        self._by_cell: Dict[Coordinate, Ship] = {c: ship for ship in ships for c in ship.cells}

    @classmethod
    def detect(cls, grid: Grid) -> "Fleet":
        """Scan row-major and flood-fill each unvisited ship cell into a Ship."""
        visited: Set[Coordinate] = set()
        ships: List[Ship] = []
        for start in all_coords():
            if start in visited or grid[start.row][start.col] is not Cell.SHIP:
                continue
            cells: List[Coordinate] = []
            stack = [start]
            visited.add(start)
            while stack:
                cur = stack.pop()
                cells.append(cur)
                for nxt in cur.neighbours():
                    if nxt not in visited and grid[nxt.row][nxt.col] is Cell.SHIP:
                        visited.add(nxt)
                        stack.append(nxt)
            ships.append(Ship(tuple(cells)))
        logger.debug("Fleet.detect() – %d ships, sizes=%s", len(ships), [s.size for s in ships])
        return cls(ships)

    def find_ship_at(self, coord: Coordinate) -> Optional[Ship]:
        return self._by_cell.get(coord)

    def all_sunk(self) -> bool:
        """True once every ship's remaining count is zero."""
        return all(ship.is_sunk() for ship in self.ships)

    def remaining(self) -> int:
        return sum(ship.remaining for ship in self.ships)

    def sizes(self) -> List[int]:
        return sorted((ship.size for ship in self.ships), reverse=True)

    def __len__(self) -> int:
        return len(self.ships)

    def __iter__(self) -> Iterator[Ship]:
        return iter(self.ships)


# ---------------------------------------------------------------------------
# Own board
# ---------------------------------------------------------------------------


class Board:
    """
    A player's own board. We store:
      - self.grid: ground truth, ship cells turn into HIT, water into MISS
      - self.fleet: ships detected from the map at load time
      - self.shots_received: every coordinate the opponent has fired at
    """

    def __init__(self, layout: str) -> None:
        self.grid = parse_board(layout)
        self.fleet = Fleet.detect(self.grid)
        self.shots_received: Set[Coordinate] = set()

    def cell(self, coord: Coordinate) -> Cell:
        return self.grid[coord.row][coord.col]

    def fire_at(self, coord: Coordinate) -> Outcome:
        """Apply the opponent's shot at *coord* and classify it.

        A repeated coordinate is answered from the current state and changes
        nothing.
        """
        if coord in self.shots_received:
            outcome = self._repeat_outcome(coord)
            logger.debug("fire_at(%s) – repeat shot, outcome=%s", coord, outcome.value)
            return outcome
        self.shots_received.add(coord)

        if self.cell(coord) is not Cell.SHIP:
            self.grid[coord.row][coord.col] = Cell.MISS
            logger.debug("fire_at(%s) – miss", coord)
            return Outcome.MISS

        self.grid[coord.row][coord.col] = Cell.HIT
        ship = self.fleet.find_ship_at(coord)
        ship.register_hit()
        if not ship.is_sunk():
            outcome = Outcome.HIT
        elif self.fleet.all_sunk():
            outcome = Outcome.SUNK_ALL
        else:
            outcome = Outcome.SUNK
        logger.debug("fire_at(%s) – %s, fleet remaining=%d", coord, outcome.value, self.fleet.remaining())
        return outcome

    def _repeat_outcome(self, coord: Coordinate) -> Outcome:
        if self.cell(coord) in (Cell.WATER, Cell.MISS):
            return Outcome.MISS
        ship = self.fleet.find_ship_at(coord)
        if ship is not None and ship.is_sunk():
            return Outcome.SUNK
        return Outcome.HIT

    def all_ships_sunk(self) -> bool:
        return self.fleet.all_sunk()


# ---------------------------------------------------------------------------
# Opponent model
# ---------------------------------------------------------------------------


class OpponentView:
    """What we know about the opponent's grid: WATER means unknown."""

    def __init__(self) -> None:
        self.grid = empty_grid()

    def cell(self, coord: Coordinate) -> Cell:
        return self.grid[coord.row][coord.col]

    def unknown(self) -> List[Coordinate]:
        return [c for c in all_coords() if self.cell(c) is Cell.WATER]

    def record_result(self, coord: Coordinate, outcome: Outcome) -> Set[Coordinate]:
        """Store the peer's report on our shot at *coord*.

        On a sinking report the connected hits are traced back into the sunk
        ship and its whole 8-neighbourhood is marked MISS, since no other ship
        may touch it. Returns the traced ship cells (empty unless sunk).
        """
        if not outcome.is_hit:
            self.grid[coord.row][coord.col] = Cell.MISS
            return set()

        self.grid[coord.row][coord.col] = Cell.HIT
        if not outcome.is_sunk:
            return set()

        ship_cells = self._trace_hits(coord)
        for cell in ship_cells:
            for nbr in cell.neighbours(ALL_DIRECTIONS):
                if self.cell(nbr) is not Cell.HIT:
                    self.grid[nbr.row][nbr.col] = Cell.MISS
        logger.debug("record_result(%s) – sunk ship of %d cells", coord, len(ship_cells))
        return ship_cells

    def _trace_hits(self, start: Coordinate) -> Set[Coordinate]:
        """BFS over orthogonally connected HIT cells."""
        cells = {start}
        queue = deque([start])
        while queue:
            cur = queue.popleft()
            for nxt in cur.neighbours():
                if nxt not in cells and self.cell(nxt) is Cell.HIT:
                    cells.add(nxt)
                    queue.append(nxt)
        return cells

"""Coordinate helpers shared by the board, the generator and the wire codec.

Internally a square is always a zero-based ``Coordinate(row, col)``; the
letter/number form (``A1`` .. ``J10``) only exists at the edges.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Tuple

from .config import BOARD_SIZE

# Regex for valid coordinates A1–J10 (matched against upper-cased input)
COORD_RE = re.compile(r"^([A-J])(10|[1-9])$")

ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL: Tuple[Tuple[int, int], ...] = ((-1, -1), (1, 1), (-1, 1), (1, -1))
ALL_DIRECTIONS: Tuple[Tuple[int, int], ...] = ORTHOGONAL + DIAGONAL


class MalformedCoordinate(ValueError):
    """Raised when text does not match the ``<A-J><1-10>`` surface syntax."""


@dataclass(frozen=True)
class Coordinate:
    row: int
    col: int

    def is_valid(self) -> bool:
        """Inside the board."""
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    def move(self, dr: int, dc: int) -> "Coordinate":
        return Coordinate(self.row + dr, self.col + dc)

    def neighbours(self, directions: Tuple[Tuple[int, int], ...] = ORTHOGONAL) -> Iterator["Coordinate"]:
        """Yield the in-bounds squares one step away along *directions*."""
        for dr, dc in directions:
            nxt = self.move(dr, dc)
            if nxt.is_valid():
                yield nxt

    def __str__(self) -> str:
        return format_coord(self)


def parse_coordinate(text: str) -> Coordinate:
    """Translate a coordinate like 'b7' or 'J10' into a zero-based Coordinate."""
    if text is None:
        raise MalformedCoordinate("No coordinate given")
    m = COORD_RE.match(text.strip().upper())
    if not m:
        raise MalformedCoordinate(f"Invalid coordinate: {text!r}")
    row_letter, col_digits = m.groups()
    return Coordinate(ord(row_letter) - ord("A"), int(col_digits) - 1)


def format_coord(coord: Coordinate) -> str:
    """
    Convert a zero-based Coordinate to its wire form, e.g. (0, 4) -> 'A5'.
    """
    return f"{chr(ord('A') + coord.row)}{coord.col + 1}"


def all_coords() -> Iterator[Coordinate]:
    """Every square in row-major order."""
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            yield Coordinate(r, c)

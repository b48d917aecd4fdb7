from __future__ import annotations

import random
from collections import deque
from typing import Deque, List, Optional

from .battleship import Cell, OpponentView
from .coord_utils import Coordinate, all_coords


class BotLogic:
    """
    Automated shot source.
    ----------------------
    1. Parity hunt: fire the 50 squares with even (row + col) first, then the
       odd ones. Every ship longer than one cell covers an even square.
    2. Target: while a hit has unknown orthogonal neighbours, fire at them,
       preferring squares that continue a line of two or more hits.
    Squares the view already knows about (hits, misses and the perimeter of
    sunk ships) are never fired at again.
    """

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    def __init__(self, *, seed: Optional[int] = None) -> None:
        self.rnd = random.Random(seed)

        # Build shuffled parity pools
        blacks = [c for c in all_coords() if (c.row + c.col) % 2 == 0]
        whites = [c for c in all_coords() if (c.row + c.col) % 2 == 1]
        self.rnd.shuffle(blacks)
        self.rnd.shuffle(whites)
        self.hunt_pool: Deque[Coordinate] = deque(blacks + whites)

    # ------------------------------------------------------------------ #
    # Shot selection
    # ------------------------------------------------------------------ #
    def choose_shot(self, view: OpponentView) -> Coordinate:
        targets = self._targets(view)
        if targets:
            return targets[0]

        while self.hunt_pool:
            rc = self.hunt_pool.popleft()
            if view.cell(rc) is Cell.WATER:
                return rc

        # Fallback (should never be reached before the game ends)
        unknown = view.unknown()
        return unknown[0] if unknown else Coordinate(0, 0)

    __call__ = choose_shot

    def _targets(self, view: OpponentView) -> List[Coordinate]:
        """Unknown squares next to unresolved hits, line extensions first."""
        inline: list[Coordinate] = []
        other: list[Coordinate] = []
        for hit in all_coords():
            if view.cell(hit) is not Cell.HIT:
                continue
            for nbr in hit.neighbours():
                if view.cell(nbr) is not Cell.WATER or nbr in inline or nbr in other:
                    continue
                # the square behind *hit*, seen from *nbr*
                behind = hit.move(hit.row - nbr.row, hit.col - nbr.col)
                if behind.is_valid() and view.cell(behind) is Cell.HIT:
                    inline.append(nbr)
                else:
                    other.append(nbr)
        self.rnd.shuffle(inline)
        self.rnd.shuffle(other)
        return inline + other

"""Translate GameSession events into console output.

The router lives outside GameSession; tests feed it synthetic Event objects.
"""

from __future__ import annotations

import logging
from typing import Callable, List

from .battleship import Board, Cell, OpponentView, Outcome
from .events import Category, Event
from .session import GameResult, GameSession

logger = logging.getLogger(__name__)

OUTCOME_TEXT = {
    Outcome.MISS: "MISS",
    Outcome.HIT: "HIT",
    Outcome.SUNK: "HIT AND SUNK",
    Outcome.SUNK_ALL: "LAST SHIP SUNK",
}


def own_rows(board: Board) -> List[str]:
    """Own grid with ships, hits ('@') and misses ('~')."""
    return ["".join(cell.value for cell in row) for row in board.grid]


def opponent_rows(view: OpponentView, *, revealed: bool = False) -> List[str]:
    """Opponent grid as far as we know it; unknown squares are '?' unless *revealed*."""
    rows: list[str] = []
    for row in view.grid:
        chars = []
        for cell in row:
            if cell is Cell.HIT:
                chars.append(Cell.SHIP.value if revealed else Cell.HIT.value)
            elif cell is Cell.MISS:
                chars.append(Cell.MISS.value)
            else:
                chars.append(Cell.WATER.value if revealed else "?")
        rows.append("".join(chars))
    return rows


def format_grid(rows: List[str], title: str) -> str:
    lines = [f"[{title}]", "   " + " ".join(f"{i:>2}" for i in range(1, len(rows[0]) + 1))]
    for idx, row in enumerate(rows):
        label = chr(ord("A") + idx)
        lines.append(f"{label:2} " + " ".join(f"{c:>2}" for c in row))
    return "\n".join(lines)


class ConsoleRouter:
    """Session-scoped helper that converts `Event` → console lines."""

    def __init__(self, session: GameSession, out: Callable[[str], None] = print) -> None:
        self._s = session
        self._out = out

    # ------------------------------------------------------------------
    # Public dispatch entry
    # ------------------------------------------------------------------
    def __call__(self, ev: Event) -> None:  # GameSession calls router(event)
        try:
            self.dispatch(ev)
        except Exception:  # noqa: BLE001
            logger.exception("Event routing failed for %s", ev)

    def dispatch(self, ev: Event) -> None:
        if ev.category is Category.SHOT:
            self._handle_shot(ev)
        elif ev.category is Category.CONNECTION:
            self._out(f"Connection error ({ev.payload['failures']}/{self._s.max_failures}), retrying…")
        elif ev.category is Category.GAME:
            self._announce(ev.payload["result"])
        else:  # pragma: no cover – unknown category
            logger.debug("Ignoring event %s", ev)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _handle_shot(self, ev: Event) -> None:
        coord = ev.payload.get("coord")
        if ev.type == "report":
            self._out(f"Your shot at {coord}: {OUTCOME_TEXT[ev.payload['outcome']]}")
        elif ev.type == "incoming":
            self._out(f">> Opponent fires at {coord}: {OUTCOME_TEXT[ev.payload['outcome']]}")
        elif ev.type == "shot":
            self._out(f"Firing at {coord}")

    def _announce(self, result: GameResult) -> None:
        if result is GameResult.WON:
            self._out("\n--- YOU WON! ---")
            self._out(format_grid(opponent_rows(self._s.view, revealed=True), "Opponent"))
        elif result is GameResult.LOST:
            self._out("\n--- YOUR LAST SHIP IS SUNK. YOU LOST. ---")
            self._out(format_grid(opponent_rows(self._s.view), "Opponent"))
        else:
            self._out("\nOpponent left before the game was decided.")
            return
        self._out(format_grid(own_rows(self._s.board), "Your fleet"))

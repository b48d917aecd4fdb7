"""Two-player game session logic (the turn engine).

A session owns one player's Board and OpponentView and talks to exactly one
peer over a LineChannel. Each received line carries the peer's report on our
previous shot plus the peer's next shot; each reply carries our report plus
our next shot. The dialing side opens with ``start;<coord>``.

States
------
AWAITING_FIRST_MOVE   Dialing side only, before the opening line is sent.
WAITING_FOR_PEER      Blocked on the next line from the peer.
FINISHED              ``result`` holds WON, LOST or ABANDONED.

The loop ends on a terminal outcome, on a clean EOF from the peer, or after
``max_failures`` consecutive transport failures (re-raised to the caller).
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, List, Optional

from . import config as _cfg
from .battleship import Board, OpponentView, Outcome
from .coord_utils import Coordinate
from .events import Category, Event
from .io_utils import LineChannel, TransportFailure
from .messages import ProtocolError, ShotMessage, format_message, parse_message

logger = logging.getLogger(__name__)

# Given what we know of the opponent, pick our next shot.
ShotChooser = Callable[[OpponentView], Coordinate]


class SessionState(enum.Enum):
    AWAITING_FIRST_MOVE = enum.auto()
    WAITING_FOR_PEER = enum.auto()
    FINISHED = enum.auto()


class GameResult(enum.Enum):
    WON = "won"
    LOST = "lost"
    ABANDONED = "abandoned"  # peer closed the stream before a winner


class GameSession:
    """Single match between this player and one peer."""

    def __init__(
        self,
        channel: Optional[LineChannel],
        board: Board,
        choose_shot: ShotChooser,
        *,
        initiator: bool,
        max_failures: int = _cfg.MAX_READ_FAILURES,
    ) -> None:
        """Create the session.

        Args:
            channel: connected transport; may be None when lines are fed
                straight into ``handle_line`` (tests, replays).
            board: our own board, parsed from the map.
            choose_shot: shot source (console prompt, bot, script).
            initiator: True for the dialing side, which sends ``start``.
        """
        self.channel = channel
        self.board = board
        self.view = OpponentView()
        self.choose_shot = choose_shot
        self.initiator = initiator
        self.max_failures = max_failures

        self.state = SessionState.AWAITING_FIRST_MOVE if initiator else SessionState.WAITING_FOR_PEER
        self.result: GameResult | None = None
        # Our shot still waiting for the peer's report
        self.last_shot: Coordinate | None = None
        self.failures = 0
        self._outbox: str | None = None

        # Event subscribers
        self._subs: List[Callable[[Event], None]] = []

    # -------------------- gameplay --------------------
    def play(self) -> GameResult:
        """Run the exchange loop until the game ends."""
        if self.channel is None:
            raise RuntimeError("play() needs a channel")
        logger.info("Session start – role=%s", "initiator" if self.initiator else "responder")
        if self.state is SessionState.AWAITING_FIRST_MOVE:
            self._outbox = self.open()

        while True:
            try:
                if self._outbox is not None:
                    self.channel.send(self._outbox)
                    self._outbox = None
                if self.state is SessionState.FINISHED:
                    break
                line = self.channel.receive()
            except TransportFailure as e:
                self.failures += 1
                logger.warning("Transport failure (%d/%d): %s", self.failures, self.max_failures, e)
                self._emit(Event(Category.CONNECTION, "transport_error", {"failures": self.failures, "error": str(e)}))
                if self.failures >= self.max_failures:
                    logger.error("Giving up after %d consecutive transport failures", self.failures)
                    raise
                continue

            if line is None:
                logger.info("Peer closed the connection before the game ended")
                self._finish(GameResult.ABANDONED)
                break
            self._outbox = self.handle_line(line)
            self.failures = 0

        logger.info("Session over – %s", self.result.value)
        return self.result

    def open(self) -> str:
        """Pick the opening shot and return the ``start`` line (dialing side only)."""
        if self.state is not SessionState.AWAITING_FIRST_MOVE:
            raise ProtocolError("Only the initiating side opens the game, once")
        self.last_shot = self._next_shot()
        self.state = SessionState.WAITING_FOR_PEER
        return format_message(ShotMessage(None, self.last_shot))

    def handle_line(self, line: str) -> Optional[str]:
        """Apply one line from the peer; return the reply line, or None when no reply is due."""
        if self.state is not SessionState.WAITING_FOR_PEER:
            raise ProtocolError(f"Unexpected message in state {self.state.name}: {line!r}")
        msg = parse_message(line)

        if msg.is_start:
            if self.initiator or self.last_shot is not None:
                raise ProtocolError("Unexpected start message")
        else:
            if self.last_shot is None:
                raise ProtocolError("Report received before any shot was fired")
            sunk = self.view.record_result(self.last_shot, msg.outcome)
            self._emit(
                Event(
                    Category.SHOT,
                    "report",
                    {"coord": self.last_shot, "outcome": msg.outcome, "sunk_cells": sunk},
                )
            )

        if msg.is_final:
            self._finish(GameResult.WON)
            return None

        outcome = self.board.fire_at(msg.shot)
        self._emit(Event(Category.SHOT, "incoming", {"coord": msg.shot, "outcome": outcome}))
        self.last_shot = self._next_shot()
        reply = format_message(ShotMessage(outcome, self.last_shot))
        if outcome is Outcome.SUNK_ALL:
            self._finish(GameResult.LOST)
        return reply

    # -------------------- internal utilities --------------------
    def _next_shot(self) -> Coordinate:
        shot = self.choose_shot(self.view)
        if not shot.is_valid():
            raise ValueError(f"Shot source returned an off-board coordinate: {shot!r}")
        self._emit(Event(Category.SHOT, "shot", {"coord": shot}))
        return shot

    def _finish(self, result: GameResult) -> None:
        self.state = SessionState.FINISHED
        self.result = result
        self._emit(Event(Category.GAME, "end", {"result": result}))

    # -------------------- event bus --------------------
    def subscribe(self, cb: Callable[[Event], None]) -> None:
        """Allow external components (console, tests) to receive game events."""
        self._subs.append(cb)

    def _emit(self, ev: Event) -> None:
        for cb in tuple(self._subs):
            try:
                cb(ev)
            except Exception:
                # A misbehaving subscriber must not end the match
                logger.exception("Event subscriber failed for %s", ev)

"""Wire codec for the shot-exchange protocol.

Every line is ``<outcome-token>;<coord>``: the report on the receiver's
previous shot, followed by the sender's next shot.

start;A5                 First line of a game, sent once by the dialing side.
pudło;C3                 Your last shot missed; I fire at C3.
trafiony;C3              Your last shot hit.
trafiony zatopiony;C3    Your last shot hit and sank a ship.
ostatni zatopiony        Your last shot sank my last ship. No reply follows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .battleship import Outcome
from .coord_utils import Coordinate, MalformedCoordinate, format_coord, parse_coordinate

SEPARATOR = ";"
START_TOKEN = "start"

OUTCOME_TOKENS: Dict[Outcome, str] = {
    Outcome.MISS: "pudło",
    Outcome.HIT: "trafiony",
    Outcome.SUNK: "trafiony zatopiony",
    Outcome.SUNK_ALL: "ostatni zatopiony",
}
_TOKEN_OUTCOMES: Dict[str, Outcome] = {token: outcome for outcome, token in OUTCOME_TOKENS.items()}


class ProtocolError(Exception):
    """Raised when a line from the peer breaks the wire contract."""


@dataclass(frozen=True)
class ShotMessage:
    """One wire line. ``outcome`` is None on the opening ``start`` message."""

    outcome: Optional[Outcome]
    shot: Optional[Coordinate]

    @property
    def is_start(self) -> bool:
        return self.outcome is None

    @property
    def is_final(self) -> bool:
        return self.outcome is Outcome.SUNK_ALL


def parse_message(line: str) -> ShotMessage:
    if line is None:
        raise ProtocolError("No message to parse")
    raw = line.strip()
    if not raw:
        raise ProtocolError("Empty message")
    head, _, tail = raw.partition(SEPARATOR)
    token = " ".join(head.split()).lower()
    # Only the last field carries the coordinate.
    coord_text = tail.rsplit(SEPARATOR, 1)[-1].strip()

    if token == START_TOKEN:
        outcome = None
    elif token in _TOKEN_OUTCOMES:
        outcome = _TOKEN_OUTCOMES[token]
    else:
        raise ProtocolError(f"Unknown outcome token: {head!r}")

    if outcome is Outcome.SUNK_ALL and not coord_text:
        return ShotMessage(outcome, None)
    try:
        shot = parse_coordinate(coord_text)
    except MalformedCoordinate as exc:
        raise ProtocolError(f"Bad coordinate in {raw!r}: {exc}") from exc
    return ShotMessage(outcome, shot)


def format_message(message: ShotMessage) -> str:
    """Render *message* without the trailing newline."""
    token = START_TOKEN if message.outcome is None else OUTCOME_TOKENS[message.outcome]
    if message.shot is None:
        return token
    return f"{token}{SEPARATOR}{format_coord(message.shot)}"

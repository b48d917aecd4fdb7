"""Events a GameSession publishes to its subscribers.

Payload keys by event type:

* ``shot`` (SHOT): ``coord``, the square we are about to fire at.
* ``report`` (SHOT): ``coord``, ``outcome`` and ``sunk_cells``, the squares
  of a ship the report just sank (empty otherwise).
* ``incoming`` (SHOT): ``coord`` and the ``outcome`` our Board gave it.
* ``transport_error`` (CONNECTION): ``failures``, the consecutive count,
  and ``error``.
* ``end`` (GAME): ``result``, a ``GameResult``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class Category(Enum):
    SHOT = auto()  # a square fired at by either side, or the report on it
    CONNECTION = auto()  # read/write trouble that the session retried
    GAME = auto()  # the match is decided or abandoned


@dataclass(slots=True)
class Event:
    category: Category
    type: str
    payload: Dict[str, Any]

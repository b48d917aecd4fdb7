import logging
import socket
import sys
from pathlib import Path
from typing import Iterable

import pytest

# Ensure local `src` directory is importable before project is installed.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from salvo.coord_utils import parse_coordinate  # noqa: E402
from salvo.io_utils import LineChannel  # noqa: E402

# Suppress INFO & DEBUG logs from session threads during tests
logging.basicConfig(level=logging.WARNING)

# One 3-cell ship at row A, columns 5-7.
SINGLE_SHIP_MAP = "....###..." + "." * 90

# A hand-made legal fleet: 4, 3, 3, 2, 2, 2, 1, 1, 1, 1
FLEET_MAP = (
    "####.###.#"
    ".........#"
    "###......."
    ".........."
    "##.##.#.#."
    ".........."
    "#.#......."
    ".........."
    ".........."
    ".........."
)


class ScriptedShots:
    """Shot source replaying a fixed list of coordinates like 'A1'."""

    def __init__(self, coords: Iterable[str]) -> None:
        self._coords = [parse_coordinate(c) for c in coords]
        self.calls = 0

    def __call__(self, view):
        shot = self._coords[self.calls]
        self.calls += 1
        return shot


@pytest.fixture
def scripted():
    return ScriptedShots


@pytest.fixture
def channel_pair():
    """Two LineChannels joined by a socketpair, with a short read timeout."""
    s1, s2 = socket.socketpair()
    a = LineChannel(s1, timeout=2.0)
    b = LineChannel(s2, timeout=2.0)
    yield a, b
    a.close()
    b.close()

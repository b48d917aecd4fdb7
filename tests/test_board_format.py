"""Unit tests for the map string format."""

import pytest

from salvo.battleship import BoardFormatError, Cell, parse_board, serialize_board
from salvo.generator import generate_map

from conftest import FLEET_MAP, SINGLE_SHIP_MAP


def test_parse_single_ship():
    grid = parse_board(SINGLE_SHIP_MAP)
    assert [c for c in range(10) if grid[0][c] is Cell.SHIP] == [4, 5, 6]
    assert all(cell is Cell.WATER for row in grid[1:] for cell in row)


@pytest.mark.parametrize("layout", [SINGLE_SHIP_MAP, FLEET_MAP, "." * 100, "#" * 100])
def test_serialize_parse_roundtrip(layout):
    assert serialize_board(parse_board(layout)) == layout


def test_generated_map_roundtrips():
    layout = generate_map(seed=7)
    assert serialize_board(parse_board(layout)) == layout


def test_whitespace_and_newlines_are_stripped():
    wrapped = "\r\n".join(FLEET_MAP[i : i + 10] for i in range(0, 100, 10)) + "\n"
    assert serialize_board(parse_board("  " + wrapped)) == FLEET_MAP


@pytest.mark.parametrize("layout", ["." * 99, "." * 101, "." * 99 + "x", ""])
def test_bad_maps_rejected(layout):
    with pytest.raises(BoardFormatError):
        parse_board(layout)


def test_hits_and_misses_serialise_as_ship_and_water():
    grid = parse_board(SINGLE_SHIP_MAP)
    grid[0][4] = Cell.HIT
    grid[5][5] = Cell.MISS
    assert serialize_board(grid) == SINGLE_SHIP_MAP

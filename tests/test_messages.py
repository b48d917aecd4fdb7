import pytest

from salvo.battleship import Outcome
from salvo.coord_utils import Coordinate
from salvo.messages import ProtocolError, ShotMessage, format_message, parse_message


def test_start_message():
    msg = parse_message("start;A1")
    assert msg.is_start
    assert msg.shot == Coordinate(0, 0)
    assert format_message(msg) == "start;A1"


@pytest.mark.parametrize(
    "line, outcome",
    [
        ("pudło;B2", Outcome.MISS),
        ("trafiony;B2", Outcome.HIT),
        ("trafiony zatopiony;B2", Outcome.SUNK),
    ],
)
def test_outcome_tokens(line, outcome):
    msg = parse_message(line)
    assert msg.outcome is outcome
    assert msg.shot == Coordinate(1, 1)
    assert format_message(msg) == line


def test_tolerant_spacing_case_and_newline():
    msg = parse_message("  TRAFIONY   ZATOPIONY ; j10 \r\n")
    assert msg.outcome is Outcome.SUNK
    assert msg.shot == Coordinate(9, 9)


def test_final_message_without_coordinate():
    msg = parse_message("ostatni zatopiony")
    assert msg.is_final and msg.shot is None
    assert format_message(ShotMessage(Outcome.SUNK_ALL, None)) == "ostatni zatopiony"


def test_final_message_with_trailing_coordinate_is_accepted():
    msg = parse_message("ostatni zatopiony;C4")
    assert msg.is_final
    assert msg.shot == Coordinate(2, 3)


def test_last_field_is_the_coordinate():
    assert parse_message("pudło;extra;D4").shot == Coordinate(3, 3)


@pytest.mark.parametrize(
    "line",
    ["", "   ", "start", "start;", "pudło", "pudło;K1", "trafiony;A11", "boom;A1", ";A1"],
)
def test_malformed_lines_are_protocol_errors(line):
    with pytest.raises(ProtocolError):
        parse_message(line)

"""Console presentation and the interactive shot prompt."""

import io

from salvo import bot
from salvo.battleship import Board, OpponentView, Outcome
from salvo.client import ConsolePrompt
from salvo.coord_utils import Coordinate
from salvo.events import Category, Event
from salvo.router import ConsoleRouter, opponent_rows, own_rows
from salvo.session import GameResult, GameSession

from conftest import SINGLE_SHIP_MAP, ScriptedShots


def test_prompt_reprompts_until_valid():
    out = []
    prompt = ConsolePrompt(io.StringIO("Z9\nhello\nb3\n"), out.append)
    assert prompt(OpponentView()) == Coordinate(1, 2)
    assert sum("[!]" in line for line in out) == 2


def test_prompt_falls_back_to_a1_on_eof():
    prompt = ConsolePrompt(io.StringIO(""), lambda _: None)
    assert prompt(OpponentView()) == Coordinate(0, 0)


def test_grid_rows():
    board = Board(SINGLE_SHIP_MAP)
    board.fire_at(Coordinate(0, 4))
    board.fire_at(Coordinate(0, 0))
    assert own_rows(board)[0] == "~...@##..."
    view = OpponentView()
    view.record_result(Coordinate(0, 0), Outcome.HIT)
    view.record_result(Coordinate(0, 1), Outcome.MISS)
    assert opponent_rows(view)[0] == "@~????????"
    assert opponent_rows(view, revealed=True)[0] == "#~........"


def test_router_prints_turns_and_result():
    session = GameSession(None, Board(SINGLE_SHIP_MAP), ScriptedShots(["J1"]), initiator=False)
    out = []
    router = ConsoleRouter(session, out.append)
    router(Event(Category.SHOT, "incoming", {"coord": Coordinate(0, 4), "outcome": Outcome.HIT}))
    router(Event(Category.SHOT, "report", {"coord": Coordinate(9, 0), "outcome": Outcome.MISS, "sunk_cells": set()}))
    router(Event(Category.GAME, "end", {"result": GameResult.WON}))
    text = "\n".join(out)
    assert "Opponent fires at A5: HIT" in text
    assert "Your shot at J1: MISS" in text
    assert "YOU WON" in text


def test_router_survives_bad_payload():
    session = GameSession(None, Board(SINGLE_SHIP_MAP), ScriptedShots([]), initiator=False)
    router = ConsoleRouter(session, lambda _: None)
    router(Event(Category.SHOT, "report", {}))  # logged, not raised


def test_router_reports_connection_trouble():
    session = GameSession(None, Board(SINGLE_SHIP_MAP), ScriptedShots([]), initiator=False, max_failures=3)
    out = []
    ConsoleRouter(session, out.append)(Event(Category.CONNECTION, "transport_error", {"failures": 2, "error": "timeout"}))
    assert out == ["Connection error (2/3), retrying…"]


def test_bot_entry_forces_bot_mode(monkeypatch):
    seen = []
    monkeypatch.setattr(bot, "client_main", lambda argv: seen.append(argv) or 0)
    assert bot.main(["--mode", "server", "--seed", "4"]) == 0
    assert bot.main(["--bot", "--mode", "client"]) == 0
    assert seen == [["--bot", "--mode", "server", "--seed", "4"], ["--bot", "--mode", "client"]]


def test_bot_entry_stops_on_bad_map(tmp_path):
    bad = tmp_path / "map.txt"
    bad.write_text("not a board", encoding="utf-8")
    assert bot.main(["--mode", "server", "--map", str(bad)]) == 1

"""CLI entry point: one player, one opponent, one game.

    salvo --mode server --port 5000 --map my.txt
    salvo --mode client --host 10.0.0.2 --port 5000 --map my.txt

The ``client`` side dials and fires first; the ``server`` side listens.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Callable, Optional, TextIO

from . import config as _cfg
from .battleship import Board, BoardFormatError, OpponentView
from .bot_logic import BotLogic
from .coord_utils import Coordinate, MalformedCoordinate, parse_coordinate
from .generator import BoardGenerator, GenerationExhausted
from .io_utils import LineChannel, TransportFailure, dial, listen
from .maps import load_or_generate
from .messages import ProtocolError
from .router import ConsoleRouter, format_grid, opponent_rows, own_rows
from .session import GameSession

logger = logging.getLogger(__name__)


class ConsolePrompt:
    """Interactive shot source: asks on the terminal until the input parses."""

    def __init__(self, stream: TextIO | None = None, out: Callable[[str], None] = print) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self.out = out

    def __call__(self, view: OpponentView) -> Coordinate:
        self.out("\n--- YOUR TURN ---")
        self.out(format_grid(opponent_rows(view), "Opponent"))
        while True:
            self.out("Target (A-J, 1-10; e.g. A5): ")
            line = self.stream.readline()
            if not line:
                # stdin closed – keep the game moving
                logger.info("No more input, firing at A1")
                return Coordinate(0, 0)
            try:
                return parse_coordinate(line)
            except MalformedCoordinate as e:
                self.out(f"  [!] {e}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Salvo – two-player battleships over TCP")
    parser.add_argument("--mode", choices=("server", "client"), required=True, help="listen (server) or dial (client)")
    parser.add_argument("--host", default=_cfg.DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=_cfg.DEFAULT_PORT)
    parser.add_argument("--map", default=_cfg.DEFAULT_MAP, help="board file; generated when missing")
    parser.add_argument("--timeout", type=float, default=_cfg.TIMEOUT, help="seconds to wait for each peer line")
    parser.add_argument("--bot", action="store_true", help="let the automated policy pick shots")
    parser.add_argument("--seed", type=int, help="seed for map generation and the bot")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:  # pragma: no cover – CLI entry
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.debug or _cfg.DEBUG) else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        layout = load_or_generate(args.map, BoardGenerator(random.Random(args.seed)))
        board = Board(layout)
    except (OSError, BoardFormatError, GenerationExhausted) as e:
        logger.error("Cannot prepare the board: %s", e)
        return 1
    print(format_grid(own_rows(board), "Your fleet"))

    chooser = BotLogic(seed=args.seed).choose_shot if args.bot else ConsolePrompt()
    initiator = args.mode == "client"
    try:
        sock = dial(args.host, args.port) if initiator else listen(args.host, args.port)
    except KeyboardInterrupt:
        logger.info("Exiting")
        return 1
    except OSError as e:
        logger.error("Cannot establish connection: %s", e)
        return 2

    channel = LineChannel(sock, timeout=args.timeout)
    session = GameSession(channel, board, chooser, initiator=initiator)
    session.subscribe(ConsoleRouter(session))
    try:
        result = session.play()
    except TransportFailure as e:
        logger.error("Game aborted, connection lost: %s", e)
        return 2
    except ProtocolError as e:
        logger.error("Game aborted, peer broke the protocol: %s", e)
        return 3
    except KeyboardInterrupt:
        logger.info("Exiting")
        return 1
    finally:
        channel.close()

    logger.info("RESULT %s", result.value.upper())
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

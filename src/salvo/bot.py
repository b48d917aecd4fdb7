"""``salvo-bot``: the regular CLI with BotLogic choosing every shot.

    salvo-bot --mode client --host 10.0.0.2 --seed 7
"""

from __future__ import annotations

import sys
from typing import Optional

from .client import main as client_main


def main(argv: Optional[list[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if "--bot" not in args:
        args.insert(0, "--bot")
    return client_main(args)


if __name__ == "__main__":
    sys.exit(main())

"""Map file storage: load the player's board, generating one on first use."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .battleship import parse_board, serialize_board
from .generator import BoardGenerator

logger = logging.getLogger(__name__)


def load_or_generate(path: str | Path, generator: Optional[BoardGenerator] = None) -> str:
    """Return the normalised map string stored at *path*.

    A missing file is filled with a freshly generated board first. The file
    may wrap rows over several lines; whitespace is dropped.
    """
    path = Path(path)
    if path.exists():
        layout = serialize_board(parse_board(path.read_text(encoding="utf-8")))
        logger.info("Loaded map from %s", path)
        return layout

    logger.info("No map at %s, generating one", path)
    layout = (generator or BoardGenerator()).generate()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(layout, encoding="utf-8")
    logger.info("Generated map saved to %s", path)
    return layout

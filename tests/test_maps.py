import random

import pytest

from salvo.battleship import BoardFormatError
from salvo.generator import BoardGenerator
from salvo.maps import load_or_generate

from conftest import FLEET_MAP


def test_missing_map_is_generated_and_saved(tmp_path):
    path = tmp_path / "maps" / "mine.txt"
    layout = load_or_generate(path, BoardGenerator(random.Random(5)))
    assert path.read_text(encoding="utf-8") == layout
    assert len(layout) == 100
    # a second call loads the same file
    assert load_or_generate(path) == layout


def test_existing_map_is_normalised(tmp_path):
    path = tmp_path / "map.txt"
    path.write_text("\n".join(FLEET_MAP[i : i + 10] for i in range(0, 100, 10)) + "\n", encoding="utf-8")
    assert load_or_generate(path) == FLEET_MAP


def test_corrupt_map_rejected(tmp_path):
    path = tmp_path / "map.txt"
    path.write_text("not a map", encoding="utf-8")
    with pytest.raises(BoardFormatError):
        load_or_generate(path)

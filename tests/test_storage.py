from __future__ import annotations

import json

from falling_blocks.game.events import GameOver, LinesCleared
from falling_blocks.storage import HighScoreStore


def test_missing_file_loads_zero(tmp_path):
    assert HighScoreStore(str(tmp_path / "nope.json")).load() == 0


def test_save_then_load(tmp_path):
    store = HighScoreStore(str(tmp_path / "sub" / "hs.json"))
    store.save(1234)
    assert store.load() == 1234
    assert json.loads((tmp_path / "sub" / "hs.json").read_text()) == {"high_score": 1234}


def test_malformed_file_loads_zero(tmp_path):
    path = tmp_path / "hs.json"
    path.write_text("not json")
    assert HighScoreStore(str(path)).load() == 0
    path.write_text("[1, 2]")
    assert HighScoreStore(str(path)).load() == 0


def test_record_only_writes_new_high_scores(tmp_path):
    store = HighScoreStore(str(tmp_path / "hs.json"))
    assert not store.record([LinesCleared(2), GameOver(500, False)])
    assert store.load() == 0
    assert store.record([GameOver(800, True)])
    assert store.load() == 800

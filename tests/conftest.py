from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
import pytest

from falling_blocks.game import GameConfig, GameEngine, empty_board
from falling_blocks.game.board import Board


def make_board(filled: Iterable[Tuple[int, int]] = (), width: int = 10, height: int = 20, value: int = 1) -> Board:
    """Board with the given (x, y) cells occupied."""
    grid = np.array(empty_board(width, height))
    for x, y in filled:
        grid[y, x] = value
    grid.setflags(write=False)
    return grid


def full_rows(rows: Iterable[int], width: int = 10, height: int = 20, gap: int | None = None) -> Board:
    cells = [(x, y) for y in rows for x in range(width) if x != gap]
    return make_board(cells, width, height)


@pytest.fixture
def engine() -> GameEngine:
    return GameEngine(GameConfig(random_seed=1234))

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .pieces import Piece

logger = logging.getLogger(__name__)

Board = np.ndarray


def _publish(grid: np.ndarray) -> Board:
    grid.setflags(write=False)
    return grid


def empty_board(width: int = 10, height: int = 20) -> Board:
    """Grid of empty cells; 0 is empty, positive values are color tags."""
    return _publish(np.zeros((int(height), int(width)), dtype=np.int8))


def place(piece: Piece, board: Board) -> Board:
    """Write the piece's filled cells into a copy of the board.

    Cells above the top edge (negative rows) are skipped.
    """
    grid = board.copy()
    for x, y in piece.cells():
        if y >= 0:
            grid[y, x] = piece.color
    return _publish(grid)


def clear_full_rows(board: Board) -> Tuple[Board, int]:
    full = np.all(board != 0, axis=1)
    num = int(np.count_nonzero(full))
    if num == 0:
        return board, 0
    kept = board[~full]
    new_rows = np.zeros((num, board.shape[1]), dtype=board.dtype)
    grid = np.vstack((new_rows, kept))
    logger.debug("cleared %d row(s) at %s", num, np.flatnonzero(full).tolist())
    return _publish(grid), num


def column_heights(board: Board) -> np.ndarray:
    # y=0 is top; height of a column is measured from its first filled cell
    filled = board != 0
    height = board.shape[0]
    first = np.where(filled.any(axis=0), filled.argmax(axis=0), height)
    return (height - first).astype(np.int32)


def count_holes(board: Board) -> int:
    holes = 0
    for x in range(board.shape[1]):
        seen_block = False
        for cell in board[:, x]:
            if cell != 0:
                seen_block = True
            elif seen_block:
                holes += 1
    return holes

from __future__ import annotations

from typing import Tuple

import numpy as np

from .board import Board
from .pieces import Piece

# (dx, dy) tried in order after a rotation; first valid one wins.
KICK_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (0, 0),
    (-1, 0),
    (1, 0),
    (0, -1),
    (-2, 0),
    (2, 0),
)


def is_valid(piece: Piece, board: Board) -> bool:
    height, width = board.shape
    for x, y in piece.cells():
        if x < 0 or x >= width or y >= height:
            return False
        # Rows above the board are free: pieces may spawn partly off the top.
        if y >= 0 and board[y, x] != 0:
            return False
    return True


def rotate(piece: Piece) -> Piece:
    """Clockwise quarter turn (transpose, then reverse each row)."""
    return piece.with_shape(np.rot90(piece.shape, 1, axes=(1, 0)))


def rotate_with_kicks(piece: Piece, board: Board) -> Piece:
    rotated = rotate(piece)
    for dx, dy in KICK_OFFSETS:
        candidate = rotated.moved(dx, dy)
        if is_valid(candidate, board):
            return candidate
    return piece


def translate(piece: Piece, dx: int, dy: int) -> Piece:
    return piece.moved(dx, dy)


def drop_distance(piece: Piece, board: Board) -> int:
    rows = 0
    while is_valid(piece.moved(0, rows + 1), board):
        rows += 1
    return rows


def ghost_piece(piece: Piece, board: Board) -> Piece:
    return piece.moved(0, drop_distance(piece, board))

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .board import Board, empty_board
from .pieces import Piece, TetrominoType
from .rules import level_for_lines

Stats = Tuple[int, ...]

ZERO_STATS: Stats = (0,) * len(TetrominoType)


class Phase(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True, eq=False)
class GameState:
    """One immutable snapshot of a session.

    `stats` holds one placement counter per TetrominoType, in enum order.
    The active piece is never merged into `board` until it locks.
    """

    board: Board = field(default_factory=empty_board)
    current_piece: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    score: int = 0
    lines: int = 0
    is_playing: bool = False
    is_paused: bool = False
    is_game_over: bool = False
    stats: Stats = ZERO_STATS
    high_score: int = 0

    @property
    def level(self) -> int:
        return level_for_lines(self.lines)

    @property
    def width(self) -> int:
        return int(self.board.shape[1])

    @property
    def height(self) -> int:
        return int(self.board.shape[0])

    @property
    def phase(self) -> Phase:
        if self.is_game_over:
            return Phase.GAME_OVER
        if not self.is_playing:
            return Phase.IDLE
        return Phase.PAUSED if self.is_paused else Phase.PLAYING

    @property
    def accepts_input(self) -> bool:
        return self.is_playing and not self.is_paused and not self.is_game_over

    def placements(self, kind: TetrominoType) -> int:
        return self.stats[int(kind) - 1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            np.array_equal(self.board, other.board)
            and self.current_piece == other.current_piece
            and self.next_piece == other.next_piece
            and self.score == other.score
            and self.lines == other.lines
            and self.is_playing == other.is_playing
            and self.is_paused == other.is_paused
            and self.is_game_over == other.is_game_over
            and self.stats == other.stats
            and self.high_score == other.high_score
        )

    __hash__ = None  # type: ignore[assignment]

    def evolve(self, **changes) -> "GameState":
        return replace(self, **changes)


def bump_stats(stats: Stats, kind: TetrominoType) -> Stats:
    idx = int(kind) - 1
    return stats[:idx] + (stats[idx] + 1,) + stats[idx + 1 :]

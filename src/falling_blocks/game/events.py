"""Notifications emitted next to a state transition.

They are not part of the game state; audio and persistence collaborators
subscribe to them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .pieces import TetrominoType


@dataclass(frozen=True)
class PieceMoved:
    dx: int
    dy: int


@dataclass(frozen=True)
class PieceRotated:
    pass


@dataclass(frozen=True)
class PieceLocked:
    kind: TetrominoType
    hard_drop_rows: int = 0


@dataclass(frozen=True)
class LinesCleared:
    count: int


@dataclass(frozen=True)
class LevelUp:
    new_level: int


@dataclass(frozen=True)
class GameOver:
    final_score: int
    is_new_high_score: bool


Event = Union[PieceMoved, PieceRotated, PieceLocked, LinesCleared, LevelUp, GameOver]

"""Game module for Falling Blocks.

Exports the rules engine and supporting types:
- empty_board / place / clear_full_rows: Board grid and line clearing
- Piece, TetrominoType, random_piece: Piece catalog and randomizer
- is_valid / rotate_with_kicks / ghost_piece: Collision and placement rules
- ScoringRules: Scoring constants and drop-speed curve
- GameState, Phase: Immutable session snapshot
- GameEngine, Command, GameConfig: State machine and command dispatch
"""

from .board import Board, clear_full_rows, empty_board, place
from .pieces import BASE_SHAPES, COLORS, Piece, TetrominoType, random_piece, spawn_piece
from .collision import KICK_OFFSETS, drop_distance, ghost_piece, is_valid, rotate, rotate_with_kicks
from .rules import ScoringRules, level_for_lines
from .state import GameState, Phase
from .events import Event, GameOver, LevelUp, LinesCleared, PieceLocked, PieceMoved, PieceRotated
from .core import Command, GameConfig, GameEngine

__all__ = [
    "Board",
    "clear_full_rows",
    "empty_board",
    "place",
    "BASE_SHAPES",
    "COLORS",
    "Piece",
    "TetrominoType",
    "random_piece",
    "spawn_piece",
    "KICK_OFFSETS",
    "drop_distance",
    "ghost_piece",
    "is_valid",
    "rotate",
    "rotate_with_kicks",
    "ScoringRules",
    "level_for_lines",
    "GameState",
    "Phase",
    "Event",
    "GameOver",
    "LevelUp",
    "LinesCleared",
    "PieceLocked",
    "PieceMoved",
    "PieceRotated",
    "Command",
    "GameConfig",
    "GameEngine",
]

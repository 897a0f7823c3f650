from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from . import collision
from .board import clear_full_rows, empty_board, place
from .events import (
    Event,
    GameOver,
    LevelUp,
    LinesCleared,
    PieceLocked,
    PieceMoved,
    PieceRotated,
)
from .pieces import Piece, random_piece
from .rules import ScoringRules, level_for_lines
from .state import ZERO_STATS, GameState, bump_stats

logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    HARD_DROP = 3
    ROTATE = 4
    TICK = 5


_SHIFTS = {
    Command.MOVE_LEFT: (-1, 0),
    Command.MOVE_RIGHT: (1, 0),
    Command.SOFT_DROP: (0, 1),
    Command.TICK: (0, 1),
}


@dataclass(frozen=True)
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")


Transition = Tuple[GameState, List[Event]]


class GameEngine:
    """Passive rules engine: maps (state, command) to the next state.

    The engine keeps no timers. A driver feeds it `Command.TICK` at the pace
    given by `drop_interval` and renders the states it gets back.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.high_score = 0

    # -- lifecycle -------------------------------------------------------

    def idle_state(self, high_score: int = 0) -> GameState:
        return GameState(board=empty_board(self.config.width, self.config.height), high_score=high_score)

    def start(self, state: Optional[GameState] = None, high_score: Optional[int] = None) -> GameState:
        """Fresh game; the high score of `state` (or `high_score`) carries over."""
        if state is not None:
            self.high_score = max(self.high_score, state.high_score)
        if high_score is not None:
            self.high_score = max(self.high_score, int(high_score))
        current = self._draw()
        upcoming = self._draw()
        logger.info("new game, high score %d", self.high_score)
        return GameState(
            board=empty_board(self.config.width, self.config.height),
            current_piece=current,
            next_piece=upcoming,
            is_playing=True,
            stats=ZERO_STATS,
            high_score=self.high_score,
        )

    def reset(self, state: Optional[GameState] = None) -> GameState:
        if state is not None:
            self.high_score = max(self.high_score, state.high_score)
        logger.info("reset to idle")
        return self.idle_state(self.high_score)

    def pause_toggle(self, state: GameState) -> GameState:
        if not state.is_playing or state.is_game_over:
            return state
        return state.evolve(is_paused=not state.is_paused)

    # -- commands --------------------------------------------------------

    def apply_command(self, state: GameState, command: Command) -> GameState:
        return self.step(state, command)[0]

    def step(self, state: GameState, command: Command) -> Transition:
        try:
            command = Command(command)
        except ValueError:
            raise ValueError(f"unknown command: {command!r}") from None

        if not state.accepts_input or state.current_piece is None:
            return state, []

        if command == Command.ROTATE:
            return self._rotate(state)
        if command == Command.HARD_DROP:
            return self._hard_drop(state)
        dx, dy = _SHIFTS[command]
        return self._shift(state, dx, dy)

    def ghost_position(self, state: GameState) -> Optional[Piece]:
        if state.current_piece is None or state.is_game_over:
            return None
        return collision.ghost_piece(state.current_piece, state.board)

    def drop_interval(self, state: GameState) -> float:
        return self.rules.drop_interval(state.level)

    # -- internals -------------------------------------------------------

    def _draw(self) -> Piece:
        return random_piece(self.rng, self.config.width)

    def _shift(self, state: GameState, dx: int, dy: int) -> Transition:
        piece = state.current_piece
        assert piece is not None
        candidate = collision.translate(piece, dx, dy)
        if collision.is_valid(candidate, state.board):
            return state.evolve(current_piece=candidate), [PieceMoved(dx, dy)]
        if dy > 0:
            return self._lock(state, piece, hard_drop_rows=0)
        return state, []

    def _rotate(self, state: GameState) -> Transition:
        piece = state.current_piece
        assert piece is not None
        rotated = collision.rotate_with_kicks(piece, state.board)
        if rotated is piece:
            return state, []
        return state.evolve(current_piece=rotated), [PieceRotated()]

    def _hard_drop(self, state: GameState) -> Transition:
        piece = state.current_piece
        assert piece is not None
        rows = collision.drop_distance(piece, state.board)
        return self._lock(state, piece.moved(0, rows), hard_drop_rows=rows)

    def _lock(self, state: GameState, piece: Piece, hard_drop_rows: int) -> Transition:
        events: List[Event] = [PieceLocked(piece.kind, hard_drop_rows)]
        board, cleared = clear_full_rows(place(piece, state.board))

        score = state.score + self.rules.score_for_lock(cleared, state.level, hard_drop_rows)
        lines = state.lines + cleared
        stats = bump_stats(state.stats, piece.kind)
        logger.debug("locked %s at (%d, %d), %d line(s), score %d", piece.kind.name, piece.x, piece.y, cleared, score)

        if cleared:
            events.append(LinesCleared(cleared))
            new_level = level_for_lines(lines)
            if new_level > state.level:
                events.append(LevelUp(new_level))

        spawned = state.next_piece
        if spawned is None or not collision.is_valid(spawned, board):
            high_score = max(state.high_score, score)
            is_new = score > state.high_score
            logger.info("game over, score %d%s", score, " (new high score)" if is_new else "")
            events.append(GameOver(score, is_new))
            return (
                state.evolve(
                    board=board,
                    current_piece=None,
                    score=score,
                    lines=lines,
                    stats=stats,
                    is_playing=False,
                    is_game_over=True,
                    high_score=high_score,
                ),
                events,
            )

        return (
            state.evolve(
                board=board,
                current_piece=spawned,
                next_piece=self._draw(),
                score=score,
                lines=lines,
                stats=stats,
            ),
            events,
        )

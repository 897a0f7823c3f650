from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Command, GameConfig, GameEngine, GameState, ScoringRules
from falling_blocks.game.board import column_heights, count_holes
from falling_blocks.game.events import Event, LinesCleared
from falling_blocks.game.pieces import COLORS, Piece, TetrominoType

PREVIEW = 4  # preview window edge; every base shape fits in 4x4


def _piece_window(piece: Optional[Piece]) -> np.ndarray:
    window = np.zeros((PREVIEW, PREVIEW), dtype=np.int8)
    if piece is not None:
        h, w = piece.shape.shape
        window[:h, :w] = piece.shape * piece.color
    return window


class FallingBlocksEnv(gym.Env):
    """Gymnasium driver around GameEngine.

    One action per Command. Movement and rotation are followed by a gravity
    tick so episodes always progress; drops already descend.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.engine = GameEngine(config, rules)
        self.render_mode = render_mode
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.engine.config.height, self.engine.config.width
        n_kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=n_kinds, shape=(h, w), dtype=np.int8),
                "piece": spaces.Box(low=0, high=n_kinds, shape=(PREVIEW, PREVIEW), dtype=np.int8),
                "position": spaces.Box(low=-PREVIEW, high=max(h, w), shape=(2,), dtype=np.int32),
                "next": spaces.Box(low=0, high=n_kinds, shape=(PREVIEW, PREVIEW), dtype=np.int8),
            }
        )
        self.action_space = spaces.Discrete(len(Command))

        self.state: GameState = self.engine.idle_state()
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        piece = self.state.current_piece
        position = np.zeros((2,), dtype=np.int32)
        if piece is not None:
            position[:] = (piece.x, piece.y)
        return {
            "board": np.array(self.state.board, dtype=np.int8),
            "piece": _piece_window(piece),
            "position": position,
            "next": _piece_window(self.state.next_piece),
        }

    def _get_info(self, events: Optional[List[Event]] = None) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "score": self.state.score,
            "lines": self.state.lines,
            "level": self.state.level,
            "holes": count_holes(self.state.board),
            "max_height": int(column_heights(self.state.board).max()),
            "drop_interval": self.engine.drop_interval(self.state),
            "steps": self._steps,
        }
        if events is not None:
            info["events"] = events
            info["lines_cleared"] = sum(e.count for e in events if isinstance(e, LinesCleared))
        return info

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self.state = self.engine.start(self.state)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        command = Command(int(action))
        before = self.state.score

        self.state, events = self.engine.step(self.state, command)
        if command not in (Command.SOFT_DROP, Command.HARD_DROP, Command.TICK):
            self.state, more = self.engine.step(self.state, Command.TICK)
            events = events + more

        self._steps += 1
        terminated = bool(self.state.is_game_over)
        truncated = False  # step limit comes from the TimeLimit wrapper
        reward = float(self.state.score - before)
        if terminated:
            reward += self.terminal_penalty

        return self._get_obs(), reward, terminated, truncated, self._get_info(events)

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = np.array(self.state.board)
            piece = self.state.current_piece
            if piece is not None:
                for x, y in piece.cells():
                    if 0 <= y < grid.shape[0]:
                        grid[y, x] = piece.color
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    v = int(grid[y, x])
                    color = COLORS[TetrominoType(v)][1] if v else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass

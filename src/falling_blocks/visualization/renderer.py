from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import GameState, Piece, TetrominoType
from falling_blocks.game.pieces import COLORS


class CellSize(Enum):
    SMALL = 20
    MEDIUM = 28
    LARGE = 36


@dataclass
class RenderSettings:
    """Presentation-only options; the engine never sees these."""

    ghost_enabled: bool = True
    cell_size: CellSize = CellSize.MEDIUM
    margin: int = 20
    panel_width: int = 180


BACKGROUND = (10, 10, 14)
EMPTY = (20, 20, 26)
TEXT = (230, 230, 235)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return EMPTY
    return COLORS[TetrominoType(abs(v))][1]


def _dim(color: Tuple[int, int, int]) -> Tuple[int, int, int]:
    return tuple(c // 3 for c in color)  # type: ignore[return-value]


def compose(state: GameState) -> np.ndarray:
    """Board with the active piece overlaid as negative values."""
    grid = np.array(state.board, dtype=np.int8)
    piece = state.current_piece
    if piece is not None:
        for x, y in piece.cells():
            if 0 <= y < grid.shape[0] and 0 <= x < grid.shape[1]:
                grid[y, x] = -piece.color
    return grid


class Renderer:
    def __init__(self, settings: Optional[RenderSettings] = None) -> None:
        self.settings = settings or RenderSettings()
        self._font: Optional[pygame.font.Font] = None

    @property
    def cell_size(self) -> int:
        return self.settings.cell_size.value

    def window_size(self, state: GameState) -> Tuple[int, int]:
        m = self.settings.margin
        return (
            state.width * self.cell_size + m * 3 + self.settings.panel_width,
            state.height * self.cell_size + m * 2,
        )

    def _rect(self, x: int, y: int) -> pygame.Rect:
        c = self.cell_size
        return pygame.Rect(x * c, y * c, c - 1, c - 1)

    def _grid_surface(self, state: GameState, ghost: Optional[Piece]) -> pygame.Surface:
        grid = compose(state)
        h, w = grid.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                pygame.draw.rect(surf, _color_for_value(int(grid[y, x])), self._rect(x, y))
        if ghost is not None:
            color = _dim(COLORS[ghost.kind][1])
            for x, y in ghost.cells():
                if 0 <= y < h and grid[y, x] == 0:
                    pygame.draw.rect(surf, color, self._rect(x, y), width=2)
        return surf

    def _text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int]) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        screen.blit(self._font.render(text, True, TEXT), pos)

    def _panel(self, screen: pygame.Surface, state: GameState) -> None:
        m = self.settings.margin
        left = m * 2 + state.width * self.cell_size
        lines = [
            f"Score: {state.score:,}",
            f"High:  {state.high_score:,}",
            f"Level: {state.level}",
            f"Lines: {state.lines}",
        ]
        for i, line in enumerate(lines):
            self._text(screen, line, (left, m + i * 30))
        if state.next_piece is not None:
            self._text(screen, "Next", (left, m + 140))
            piece = state.next_piece
            for x, y in piece.cells():
                rect = self._rect(x - piece.x, y - piece.y).move(left, m + 170)
                pygame.draw.rect(screen, COLORS[piece.kind][1], rect)
        status = {"paused": "PAUSED", "game_over": "GAME OVER", "idle": "Press ENTER"}.get(state.phase.value)
        if status:
            self._text(screen, status, (left, m + 300))

    def draw(self, screen: pygame.Surface, state: GameState, ghost: Optional[Piece] = None) -> None:
        if not self.settings.ghost_enabled:
            ghost = None
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(state, ghost), (self.settings.margin, self.settings.margin))
        self._panel(screen, state)
        pygame.display.flip()

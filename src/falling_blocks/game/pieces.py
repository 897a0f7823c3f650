from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _frozen(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _frozen([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
    TetrominoType.J: _frozen([[1, 0, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.L: _frozen([[0, 0, 1], [1, 1, 1], [0, 0, 0]]),
}

# Color tag name and RGB per type; the board stores the type value itself.
COLORS: Dict[TetrominoType, Tuple[str, Tuple[int, int, int]]] = {
    TetrominoType.I: ("cyan", (34, 211, 238)),
    TetrominoType.O: ("yellow", (250, 204, 21)),
    TetrominoType.T: ("purple", (192, 132, 252)),
    TetrominoType.S: ("green", (74, 222, 128)),
    TetrominoType.Z: ("red", (248, 113, 113)),
    TetrominoType.J: ("blue", (96, 165, 250)),
    TetrominoType.L: ("orange", (251, 146, 60)),
}


@dataclass(frozen=True, eq=False)
class Piece:
    """Active piece: current rotation matrix plus board origin.

    Instances are never changed; every transform returns a new Piece.
    """

    kind: TetrominoType
    shape: Shape
    x: int
    y: int

    @property
    def color(self) -> int:
        return int(self.kind)

    @property
    def color_name(self) -> str:
        return COLORS[self.kind][0]

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.shape, self.x + dx, self.y + dy)

    def with_shape(self, shape: Shape) -> "Piece":
        if shape.flags.writeable:
            shape = shape.copy()
            shape.setflags(write=False)
        return Piece(self.kind, shape, self.x, self.y)

    def cells(self) -> List[Tuple[int, int]]:
        """Absolute (x, y) of every filled cell."""
        ys, xs = np.nonzero(self.shape)
        return [(self.x + int(dx), self.y + int(dy)) for dy, dx in zip(ys, xs)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.x == other.x
            and self.y == other.y
            and np.array_equal(self.shape, other.shape)
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.x, self.y, self.shape.tobytes(), self.shape.shape))


def spawn_piece(kind: TetrominoType, width: int = 10) -> Piece:
    shape = BASE_SHAPES[kind]
    x = width // 2 - shape.shape[1] // 2
    return Piece(kind=kind, shape=shape, x=x, y=0)


def random_piece(rng: random.Random, width: int = 10) -> Piece:
    # Independent uniform draw per piece, no bag.
    kind = rng.choice(list(TetrominoType))
    return spawn_piece(kind, width)

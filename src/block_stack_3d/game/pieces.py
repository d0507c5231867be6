from __future__ import annotations

from enum import IntEnum
from typing import Dict, Sequence, Union

import numpy as np


class InvalidPieceType(ValueError):
    """Raised when a piece is built from a type that is not in the catalog."""


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


class Axis(IntEnum):
    X = 0
    Y = 1
    Z = 2


# Block offsets relative to the pivot; y is up.
BASE_SHAPES: Dict[TetrominoType, np.ndarray] = {
    TetrominoType.I: np.array([[0, 2, 0], [0, 1, 0], [0, 0, 0], [0, -1, 0]], dtype=np.int64),
    TetrominoType.O: np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]], dtype=np.int64),
    TetrominoType.T: np.array([[0, 0, 0], [-1, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.int64),
    TetrominoType.S: np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [-1, 1, 0]], dtype=np.int64),
    TetrominoType.Z: np.array([[0, 0, 0], [-1, 0, 0], [0, 1, 0], [1, 1, 0]], dtype=np.int64),
    TetrominoType.J: np.array([[0, 1, 0], [0, 0, 0], [0, -1, 0], [-1, -1, 0]], dtype=np.int64),
    TetrominoType.L: np.array([[0, 1, 0], [0, 0, 0], [0, -1, 0], [1, -1, 0]], dtype=np.int64),
}
for _shape in BASE_SHAPES.values():
    _shape.setflags(write=False)

# Packed 0xRRGGBB
COLORS: Dict[TetrominoType, int] = {
    TetrominoType.I: 0x00FFFF,
    TetrominoType.O: 0xFFFF00,
    TetrominoType.T: 0x800080,
    TetrominoType.S: 0x00FF00,
    TetrominoType.Z: 0xFF0000,
    TetrominoType.J: 0x0000FF,
    TetrominoType.L: 0xFFA500,
}

QUARTER_TURN = np.pi / 2

PieceKind = Union[TetrominoType, str, int]
Vector = Union[Sequence[float], np.ndarray]


def color_to_rgb(color: int) -> tuple[int, int, int]:
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def axis_rotation(axis: Axis, direction: int = 1) -> np.ndarray:
    """Rotation matrix for a quarter turn about a principal axis.

    ``direction=1`` turns counter-clockwise when looking down the positive
    axis towards the origin, ``-1`` turns the other way. The matrix is built
    from floating-point sin/cos, so callers must round the rotated vectors.
    """
    if direction not in (1, -1):
        raise ValueError(f"rotation direction must be 1 or -1, got {direction!r}")
    angle = direction * QUARTER_TURN
    c, s = np.cos(angle), np.sin(angle)
    if axis == Axis.X:
        return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])
    if axis == Axis.Y:
        return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])
    if axis == Axis.Z:
        return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
    raise ValueError(f"unknown rotation axis: {axis!r}")


def _coerce_kind(kind: PieceKind) -> TetrominoType:
    if isinstance(kind, TetrominoType):
        return kind
    try:
        if isinstance(kind, str):
            return TetrominoType[kind.upper()]
        return TetrominoType(int(kind))
    except (KeyError, ValueError, TypeError):
        raise InvalidPieceType(f"Invalid piece type: {kind!r}") from None


class Piece:
    """A falling tetromino: type, pivot position and accumulated rotation.

    ``blocks`` always holds the base shape transformed by the full
    ``orientation`` and snapped to integers. The piece knows nothing about
    the grid; use :mod:`block_stack_3d.game.collision` to validate it.
    """

    def __init__(self, kind: PieceKind, position: Vector = (0, 0, 0)) -> None:
        self.kind = _coerce_kind(kind)
        self.color = COLORS[self.kind]
        self.position = np.array(position, dtype=float)
        self.orientation = np.eye(3)
        self.blocks = self.base_shape.copy()

    @property
    def base_shape(self) -> np.ndarray:
        return BASE_SHAPES[self.kind]

    def rotate(self, axis: Axis, direction: int = 1) -> None:
        """Apply a world-space quarter turn and rebuild ``blocks``."""
        rotation = axis_rotation(Axis(axis), direction)
        self.orientation = rotation @ self.orientation
        rotated = self.base_shape @ self.orientation.T
        self.blocks = np.rint(rotated).astype(np.int64)

    def move(self, offset: Vector) -> None:
        self.position = self.position + np.asarray(offset, dtype=float)

    def world_blocks(self) -> np.ndarray:
        """Grid coordinates of the four blocks, shape (4, 3)."""
        # round the pivot once, half up, so the blocks stay rigid
        pivot = np.floor(self.position + 0.5).astype(np.int64)
        return self.blocks + pivot

    def clone(self) -> "Piece":
        twin = Piece(self.kind, self.position)
        twin.orientation = self.orientation.copy()
        twin.blocks = self.blocks.copy()
        return twin

    def __repr__(self) -> str:
        pos = ", ".join(f"{v:g}" for v in self.position)
        return f"Piece({self.kind.name}, position=({pos}))"

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, Iterable, Tuple


Offset = Tuple[int, int]


class CellColor(IntEnum):
    EMPTY = 0
    RED = 1
    ORANGE = 2
    YELLOW = 3
    GREEN = 4
    LIGHT_BLUE = 5
    DARK_BLUE = 6
    PURPLE = 7


class Shape(IntEnum):
    O = 0
    I = 1
    L = 2
    J = 3
    S = 4
    Z = 5
    T = 6


class Rotation(IntEnum):
    ROT_0 = 0
    ROT_90 = 1
    ROT_180 = 2
    ROT_270 = 3

    def rotate_left(self) -> "Rotation":
        return Rotation((self + 1) % 4)

    def rotate_right(self) -> "Rotation":
        return Rotation((self - 1) % 4)

    def step(self, delta: int) -> "Rotation":
        return Rotation((self + delta) % 4)


SHAPE_COLORS: Dict[Shape, CellColor] = {
    Shape.O: CellColor.YELLOW,
    Shape.I: CellColor.LIGHT_BLUE,
    Shape.L: CellColor.ORANGE,
    Shape.J: CellColor.DARK_BLUE,
    Shape.S: CellColor.GREEN,
    Shape.Z: CellColor.RED,
    Shape.T: CellColor.PURPLE,
}

# RGB used by renderers for each cell color.
PALETTE: Dict[int, Tuple[int, int, int]] = {
    CellColor.EMPTY: (30, 30, 36),
    CellColor.RED: (240, 0, 0),
    CellColor.ORANGE: (240, 160, 0),
    CellColor.YELLOW: (240, 240, 0),
    CellColor.GREEN: (0, 240, 0),
    CellColor.LIGHT_BLUE: (0, 240, 240),
    CellColor.DARK_BLUE: (0, 0, 240),
    CellColor.PURPLE: (160, 0, 240),
}


_O = ((0, 0), (1, 0), (0, 1), (1, 1))
_I_VERTICAL = ((0, 0), (0, 1), (0, 2), (0, 3))
_I_HORIZONTAL = ((-1, 1), (0, 1), (1, 1), (2, 1))
_S_FLAT = ((0, 0), (1, 0), (-1, 1), (0, 1))
_S_UPRIGHT = ((0, -1), (0, 0), (1, 0), (1, 1))
_Z_FLAT = ((-1, 0), (0, 0), (0, 1), (1, 1))
_Z_UPRIGHT = ((1, -1), (0, 0), (1, 0), (0, 1))

# Offsets are relative to the piece origin, y grows downwards.
BLOCK_OFFSETS: Dict[Shape, Tuple[Tuple[Offset, ...], ...]] = {
    Shape.O: (_O, _O, _O, _O),
    Shape.I: (_I_VERTICAL, _I_HORIZONTAL, _I_VERTICAL, _I_HORIZONTAL),
    Shape.L: (
        ((1, 0), (-1, 1), (0, 1), (1, 1)),
        ((-1, 0), (0, 0), (0, 1), (0, 2)),
        ((-1, 1), (0, 1), (1, 1), (-1, 2)),
        ((0, 0), (0, 1), (0, 2), (1, 2)),
    ),
    Shape.J: (
        ((-1, 0), (-1, 1), (0, 1), (1, 1)),
        ((0, 0), (0, 1), (-1, 2), (0, 2)),
        ((-1, 1), (0, 1), (1, 1), (1, 2)),
        ((0, 0), (1, 0), (0, 1), (0, 2)),
    ),
    Shape.S: (_S_FLAT, _S_UPRIGHT, _S_FLAT, _S_UPRIGHT),
    Shape.Z: (_Z_FLAT, _Z_UPRIGHT, _Z_FLAT, _Z_UPRIGHT),
    Shape.T: (
        ((0, 0), (-1, 1), (0, 1), (1, 1)),
        ((0, 0), (-1, 1), (0, 1), (0, 2)),
        ((-1, 1), (0, 1), (1, 1), (0, 2)),
        ((0, 0), (0, 1), (1, 1), (0, 2)),
    ),
}


def relative_blocks(shape: Shape, rotation: Rotation) -> Tuple[Offset, ...]:
    """Ordered cell offsets for ``shape`` in ``rotation``."""
    return BLOCK_OFFSETS[Shape(shape)][Rotation(rotation)]


def shape_color(shape: Shape) -> CellColor:
    return SHAPE_COLORS[Shape(shape)]


def random_shape(rng: random.Random, avoid: Iterable[Shape] = ()) -> Shape:
    """Pick a uniformly random shape, trying to stay out of ``avoid``.

    With ``n`` shapes to avoid, a shape is drawn up to ``n`` extra times while
    the draw is still in ``avoid``; the last draw is kept either way. This
    makes immediate repeats rarer without ruling them out.
    """
    shapes = list(Shape)
    avoid = list(avoid)
    shape = rng.choice(shapes)
    tries = 1
    while tries <= len(avoid) and shape in avoid:
        shape = rng.choice(shapes)
        tries += 1
    return shape


@dataclass(frozen=True)
class Piece:
    x: int
    y: int
    rotation: Rotation
    shape: Shape

    @property
    def color(self) -> CellColor:
        return shape_color(self.shape)

    @property
    def relative_blocks(self) -> Tuple[Offset, ...]:
        return relative_blocks(self.shape, self.rotation)

    @property
    def blocks(self) -> Tuple[Offset, ...]:
        return tuple((self.x + dx, self.y + dy) for dx, dy in self.relative_blocks)

    def moved(self, dx: int = 0, dy: int = 0) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, delta: int) -> "Piece":
        return replace(self, rotation=Rotation(self.rotation).step(delta))


def spawn_piece(shape: Shape, x: int = 4, y: int = 0) -> Piece:
    return Piece(x=x, y=y, rotation=Rotation.ROT_0, shape=Shape(shape))

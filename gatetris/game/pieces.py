"""Tetromino definitions and rotation tables.

Each piece is a list of four (x, y) block offsets around a pivot. x grows to
the right, y grows downward: a block at offset (x, y) of a piece positioned at
(x_pos, y_pos) occupies column x_pos + x and row y_pos - y, where row 0 is the
bottom of the board.

All 4 rotation states of every shape are precomputed at import time, so
rotating a piece is a table lookup and piece instances are shared.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Shape(IntEnum):
    """Cell state on the board. Also identifies the shape of a tetromino."""

    EMPTY = 0
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7
    JUNK = 8


PLAYABLE_SHAPES = (Shape.I, Shape.J, Shape.L, Shape.O, Shape.S, Shape.T, Shape.Z)

# Spawn orientation (rotation 0) of every shape.
BASE_COORDS: dict[Shape, tuple[tuple[int, int], ...]] = {
    Shape.I: ((0, -1), (0, 0), (0, 1), (0, 2)),    # vertical bar
    Shape.J: ((1, -1), (0, -1), (0, 0), (0, 1)),
    Shape.L: ((-1, -1), (0, -1), (0, 0), (0, 1)),
    Shape.O: ((0, 0), (1, 0), (0, 1), (1, 1)),
    Shape.S: ((0, -1), (0, 0), (1, 0), (1, 1)),
    Shape.T: ((-1, 0), (0, 0), (1, 0), (0, 1)),    # T pointing down
    Shape.Z: ((0, -1), (0, 0), (-1, 0), (-1, 1)),
}

ROTATION_STATES = 4


@dataclass(frozen=True)
class Tetromino:
    """An immutable tetromino in one rotation state."""

    shape: Shape
    rotation: int
    coords: tuple[tuple[int, int], ...]

    @property
    def size(self) -> int:
        return len(self.coords)

    def x(self, i: int) -> int:
        return self.coords[i][0]

    def y(self, i: int) -> int:
        return self.coords[i][1]

    @property
    def min_x(self) -> int:
        return min(x for x, _ in self.coords)

    @property
    def max_x(self) -> int:
        return max(x for x, _ in self.coords)

    @property
    def min_y(self) -> int:
        return min(y for _, y in self.coords)

    @property
    def max_y(self) -> int:
        return max(y for _, y in self.coords)

    @property
    def width(self) -> int:
        """Column span of the piece."""
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        """Row span of the piece."""
        return self.max_y - self.min_y + 1

    @property
    def name(self) -> str:
        return self.shape.name

    def __repr__(self):
        return f"Tetromino({self.shape.name}, rot={self.rotation})"


def _rotate_coords_clockwise(
    coords: tuple[tuple[int, int], ...]
) -> tuple[tuple[int, int], ...]:
    return tuple((-y, x) for x, y in coords)


def _build_rotation_table() -> dict[tuple[Shape, int], Tetromino]:
    table = {}
    for shape, coords in BASE_COORDS.items():
        for rot in range(ROTATION_STATES):
            table[shape, rot] = Tetromino(shape, rot, coords)
            # The square looks the same from every side
            if shape != Shape.O:
                coords = _rotate_coords_clockwise(coords)
    return table


_ROTATIONS = _build_rotation_table()

TETROMINOES: dict[Shape, Tetromino] = {
    shape: _ROTATIONS[shape, 0] for shape in PLAYABLE_SHAPES
}


def get_piece(shape: Shape, rotation: int = 0) -> Tetromino:
    """Get the shared piece instance for a shape in a given rotation."""
    if shape not in BASE_COORDS:
        raise ValueError(f"{shape!r} is not a tetromino shape")
    return _ROTATIONS[shape, rotation % ROTATION_STATES]


def rotate_clockwise(piece: Tetromino) -> Tetromino:
    return _ROTATIONS[piece.shape, (piece.rotation + 1) % ROTATION_STATES]


def rotate_counter_clockwise(piece: Tetromino) -> Tetromino:
    return _ROTATIONS[piece.shape, (piece.rotation - 1) % ROTATION_STATES]

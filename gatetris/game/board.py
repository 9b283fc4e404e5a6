"""Tetris board representation.

The board is a grid of cell states, 10 columns wide and 20 rows tall by
default. Row 0 is the bottom. Cells store a Shape value: EMPTY, the shape of
the piece that filled them, or JUNK for garbage rows.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..ai import fast_features
from .pieces import Shape, Tetromino

BOARD_COLS = 10
BOARD_ROWS = 20


class Board:
    """Grid of cells plus the collision and placement queries the AI needs."""

    def __init__(self, width: int = BOARD_COLS, height: int = BOARD_ROWS):
        self.width = width
        self.height = height
        self.grid = np.zeros((height, width), dtype=np.int8)

    @classmethod
    def from_occupancy(cls, grid: np.ndarray, top_down: bool = False) -> Board:
        """Create a board from a rows x cols boolean occupancy grid.

        Occupied cells become JUNK. With top_down=True, row 0 of the input is
        the top of the board (the way grids are usually written out in
        tests); otherwise row 0 is the bottom.
        """
        grid = np.asarray(grid, dtype=bool)
        if top_down:
            grid = grid[::-1]
        height, width = grid.shape
        board = cls(width, height)
        board.grid[grid] = Shape.JUNK
        return board

    # ── Cloning ─────────────────────────────────────────────────────────────

    def clone_into(self, scratch: Board | None = None) -> Board:
        """Copy this board's cells into scratch and return it.

        A new board is allocated when scratch is None or has different
        dimensions, so the caller can keep one scratch board around and
        reuse it for every speculative placement.
        """
        if scratch is None or scratch.width != self.width or scratch.height != self.height:
            scratch = Board(self.width, self.height)
        np.copyto(scratch.grid, self.grid)
        return scratch

    def copy(self) -> Board:
        return self.clone_into(None)

    def clear(self):
        self.grid.fill(Shape.EMPTY)

    # ── Cell access ─────────────────────────────────────────────────────────

    def shape_at(self, row: int, col: int) -> Shape:
        return Shape(int(self.grid[row, col]))

    def occupancy(self) -> np.ndarray:
        """Return a height x width boolean array. True = occupied."""
        return self.grid != Shape.EMPTY

    # ── Piece queries ───────────────────────────────────────────────────────

    def can_move(self, piece: Tetromino, x_pos: int, y_pos: int) -> bool:
        """Whether piece fits at (x_pos, y_pos) without collision.

        Blocks above the top row are allowed; blocks beside the walls or
        below the floor are not.
        """
        for x, y in piece.coords:
            col = x_pos + x
            row = y_pos - y
            if col < 0 or col >= self.width or row < 0:
                return False
            if row < self.height and self.grid[row, col] != Shape.EMPTY:
                return False
        return True

    def try_move(self, piece: Tetromino, x_pos: int, y_pos: int) -> bool:
        """Add piece to the board if it fits. Returns whether it was added."""
        if self.can_move(piece, x_pos, y_pos):
            self.add_piece(piece, x_pos, y_pos)
            return True
        return False

    def add_piece(self, piece: Tetromino, x_pos: int, y_pos: int):
        self._fill_tetromino(piece, x_pos, y_pos, piece.shape)

    def remove_piece(self, piece: Tetromino, x_pos: int, y_pos: int):
        self._fill_tetromino(piece, x_pos, y_pos, Shape.EMPTY)

    def _fill_tetromino(self, piece: Tetromino, x_pos: int, y_pos: int, shape: Shape):
        for x, y in piece.coords:
            col = x_pos + x
            row = y_pos - y
            if 0 <= col < self.width and 0 <= row < self.height:
                self.grid[row, col] = shape

    def drop_height(self, piece: Tetromino, x_pos: int, y_pos: int | None = None) -> int:
        """Resting y-position of piece when moved straight down from y_pos.

        Starts from the top of the board when y_pos is None. If the piece
        does not fit at y_pos, the result is y_pos + 1.
        """
        if y_pos is None:
            y_pos = self.height
        diff = 0
        while self.can_move(piece, x_pos, y_pos - diff):
            diff += 1
        return y_pos - diff + 1

    def is_falling(self, piece: Tetromino, x_pos: int, y_pos: int) -> bool:
        return self.can_move(piece, x_pos, y_pos - 1)

    def spawn_x(self, piece: Tetromino) -> int:
        """x-position that centres piece horizontally."""
        return (self.width - piece.width) // 2 - piece.min_x

    def spawn_y(self, piece: Tetromino) -> int:
        """y-position that puts the piece's top block on the top row."""
        return self.height - 1 + piece.min_y

    # ── Rows ────────────────────────────────────────────────────────────────

    def is_row_full(self, row: int) -> bool:
        return bool((self.grid[row] != Shape.EMPTY).all())

    def get_row(self, row: int) -> list[Shape]:
        return [Shape(int(v)) for v in self.grid[row]]

    def add_row(self, row: int, shapes: Sequence[Shape]):
        """Insert a row at index row, pushing everything above it up.

        The top row of the board is pushed off.
        """
        if len(shapes) != self.width:
            raise ValueError(
                f"Cannot add row of width {len(shapes)} to board of width {self.width}"
            )
        self.grid[row + 1:] = self.grid[row:-1].copy()
        self.grid[row] = np.asarray(shapes, dtype=np.int8)

    def remove_row(self, row: int):
        """Remove a row, collapsing the rows above it down by one."""
        self.grid[row:-1] = self.grid[row + 1:].copy()
        self.grid[-1] = Shape.EMPTY

    def clear_lines(self) -> int:
        """Remove complete lines and compact the board downwards.

        Returns the number of lines removed.
        """
        full = (self.grid != Shape.EMPTY).all(axis=1)
        lines = int(full.sum())
        if lines:
            remaining = self.grid[~full]
            self.grid[:] = Shape.EMPTY
            self.grid[:remaining.shape[0]] = remaining
        return lines

    # ── Board metrics ───────────────────────────────────────────────────────

    def column_heights(self) -> np.ndarray:
        """Height of each column: topmost occupied row + 1, 0 if empty."""
        return fast_features.column_heights(self.occupancy())

    # ── Display ─────────────────────────────────────────────────────────────

    def to_ascii(self) -> str:
        """Render the board as ASCII art, top row first."""
        lines = ["+" + "-" * self.width + "+"]
        for r in range(self.height - 1, -1, -1):
            row_str = ""
            for c in range(self.width):
                shape = self.grid[r, c]
                if shape == Shape.EMPTY:
                    row_str += "."
                elif shape == Shape.JUNK:
                    row_str += "#"
                else:
                    row_str += Shape(int(shape)).name
            lines.append("|" + row_str + "|")
        lines.append("+" + "-" * self.width + "+")
        return "\n".join(lines)

    def __repr__(self):
        return self.to_ascii()

"""Pure Python Tetris game session.

No rendering, no input devices, no timers. The falling piece is tracked
separately from the board, which only holds locked cells.

Usage:
    sim = TetrisSim(seed=1)
    sim.reset()
    while not sim.game_over:
        sim.move_left()
        sim.hard_drop()
"""

from __future__ import annotations

import logging
import random

from .board import BOARD_COLS, BOARD_ROWS, Board
from .pieces import Shape, Tetromino, rotate_clockwise, rotate_counter_clockwise
from .sequence import PieceSelector, PieceSequence, ShufflePieceSelector

logger = logging.getLogger(__name__)


class TetrisSim:
    """Headless Tetris engine used to play AI games."""

    def __init__(
        self,
        width: int = BOARD_COLS,
        height: int = BOARD_ROWS,
        selector: PieceSelector | None = None,
        seed: int | None = None,
    ):
        self._rng = random.Random(seed)
        self.board = Board(width, height)
        self.sequence = PieceSequence(selector or ShufflePieceSelector(seed))
        self.piece: Tetromino | None = None
        self.x = 0
        self.y = 0
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.game_over = False

    def reset(self):
        """Clear the board and spawn the first piece."""
        self.board.clear()
        self.sequence.clear()
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.game_over = False
        self._spawn()

    @property
    def preview(self) -> Tetromino:
        return self.sequence.preview

    # ── Piece movement ──────────────────────────────────────────────────────

    def move_left(self) -> bool:
        return self._try_position(self.piece, self.x - 1, self.y)

    def move_right(self) -> bool:
        return self._try_position(self.piece, self.x + 1, self.y)

    def rotate_clockwise(self) -> bool:
        self._check_playing()
        return self._try_position(rotate_clockwise(self.piece), self.x, self.y)

    def rotate_counter_clockwise(self) -> bool:
        self._check_playing()
        return self._try_position(rotate_counter_clockwise(self.piece), self.x, self.y)

    def soft_drop(self) -> bool:
        """Move the piece down one row. Returns False once it has landed."""
        return self._try_position(self.piece, self.x, self.y - 1)

    def hard_drop(self) -> int:
        """Drop the piece to its resting row, lock it and spawn the next one.

        Returns the number of lines cleared by the drop.
        """
        self._check_playing()
        self.y = self.board.drop_height(self.piece, self.x, self.y)
        self.board.add_piece(self.piece, self.x, self.y)
        lines = self.board.clear_lines()
        self.lines_cleared += lines
        self.pieces_placed += 1
        if lines:
            logger.debug("Cleared %d line(s), total %d", lines, self.lines_cleared)
        self._spawn()
        return lines

    def add_junk_row(self):
        """Push a row of junk with 1..width-1 random gaps in from the bottom.

        If the falling piece has nowhere to go once the stack rises, it is
        locked in place first. The top row of the board is pushed off.
        """
        self._check_playing()
        width = self.board.width
        line = [Shape.JUNK] * width
        for col in self._rng.sample(range(width), self._rng.randint(1, width - 1)):
            line[col] = Shape.EMPTY

        if not self.board.is_falling(self.piece, self.x, self.y):
            self.hard_drop()
            if self.game_over:
                return
        self.board.add_row(0, line)

    # ── Internals ───────────────────────────────────────────────────────────

    def _check_playing(self):
        if self.game_over:
            raise RuntimeError("Game is over; call reset() to start a new one")
        if self.piece is None:
            raise RuntimeError("Game has not started; call reset() first")

    def _try_position(self, piece: Tetromino, x: int, y: int) -> bool:
        self._check_playing()
        if not self.board.can_move(piece, x, y):
            return False
        self.piece = piece
        self.x = x
        self.y = y
        return True

    def _spawn(self):
        self.sequence.advance()
        piece = self.sequence.current
        self.piece = piece
        self.x = self.board.spawn_x(piece)
        self.y = self.board.spawn_y(piece)
        if not self.board.can_move(piece, self.x, self.y):
            self.game_over = True
            logger.debug(
                "Game over after %d pieces, %d lines",
                self.pieces_placed,
                self.lines_cleared,
            )

    def render(self) -> str:
        """ASCII rendering of the board with the falling piece drawn in."""
        board = self.board.copy()
        if self.piece is not None and not self.game_over:
            board.add_piece(self.piece, self.x, self.y)
        header = (
            f"Piece: {self.piece.name if self.piece else '-'}  "
            f"Lines: {self.lines_cleared}  Placed: {self.pieces_placed}"
        )
        return header + "\n" + board.to_ascii()

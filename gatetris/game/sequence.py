"""Piece selectors and the current/preview piece queue."""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from .pieces import PLAYABLE_SHAPES, TETROMINOES, Tetromino

if TYPE_CHECKING:
    from ..ai.planner import MoveEvaluator
    from .board import Board


HISTORY_SIZE = 100


class PieceSelector(Protocol):
    def next_piece(self) -> Tetromino: ...


class RandomPieceSelector:
    """Picks each piece uniformly at random."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def next_piece(self) -> Tetromino:
        return TETROMINOES[self._rng.choice(PLAYABLE_SHAPES)]


class ShufflePieceSelector:
    """Standard 7-bag randomizer: every shape once per shuffled bag."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)
        self._bag: list[Tetromino] = []

    def next_piece(self) -> Tetromino:
        if not self._bag:
            self._bag = [TETROMINOES[s] for s in PLAYABLE_SHAPES]
            self._rng.shuffle(self._bag)
        return self._bag.pop(0)


class WorstPieceSelector:
    """Adversarial selector: hands out the piece the AI can place least well.

    For every shape, asks the evaluator for its best move on the current
    board and returns the shape whose best move scores lowest. A shape with
    no legal placement at all is the worst possible choice.
    """

    def __init__(self, evaluator: MoveEvaluator, board_provider: Callable[[], Board]):
        self.evaluator = evaluator
        self._board_provider = board_provider

    def next_piece(self) -> Tetromino:
        board = self._board_provider()
        worst: Tetromino | None = None
        worst_score = float("inf")

        for shape in PLAYABLE_SHAPES:
            piece = TETROMINOES[shape]
            move = self.evaluator.get_next_move(
                board, piece, board.spawn_x(piece), board.spawn_y(piece)
            )
            if move is None:
                return piece
            if move.score < worst_score:
                worst_score = move.score
                worst = piece

        return worst


class PieceSequence:
    """Queue of the current piece and the one-piece preview.

    The last `history` pieces before the current one are kept so that
    rewind() can step back over them.
    """

    def __init__(self, selector: PieceSelector, history: int = HISTORY_SIZE):
        self.selector = selector
        self.history = history
        self._current = -1
        self._preview = 0
        self._pieces: list[Tetromino] = []

    def clear(self):
        self._current = -1
        self._preview = 0
        self._pieces.clear()

    def advance(self):
        self._current += 1
        self._preview += 1
        while len(self._pieces) <= self._preview:
            self._pieces.append(self.selector.next_piece())

        excess = self._current - self.history
        if excess > 0:
            del self._pieces[:excess]
            self._current -= excess
            self._preview -= excess

    def rewind(self):
        if self._current <= 0:
            raise RuntimeError("No earlier piece to rewind to")
        self._current -= 1
        self._preview -= 1

    @property
    def current(self) -> Tetromino:
        if self._current < 0:
            raise RuntimeError("Sequence has not been advanced yet")
        return self._pieces[self._current]

    @property
    def preview(self) -> Tetromino:
        if self._current < 0:
            raise RuntimeError("Sequence has not been advanced yet")
        return self._pieces[self._preview]

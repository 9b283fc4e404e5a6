"""Move planner: searches all possible piece placements and selects the best.

Generates every reachable (rotation, translation) combination from the
piece's spawn position, simulates the drop, scores the resulting board with
the heuristic and returns the best one. Supports one-ply lookahead using the
preview piece: a placement is then worth the best score the preview piece can
reach on the board it leaves behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from ..game.board import Board
from ..game.pieces import ROTATION_STATES, Tetromino, rotate_clockwise
from .heuristic import ScoringSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """Best placement found by a search, relative to the spawn position."""

    rotation_delta: int       # clockwise quarter turns, 0-3
    translation_delta: int    # columns to shift, negative = left
    score: float


@dataclass(frozen=True)
class Placement:
    """A candidate placement: the rotated piece and where it comes to rest."""

    rotation_delta: int
    translation_delta: int
    piece: Tetromino
    x: int
    row: int


class MoveEvaluator:
    """Exhaustive placement search driven by a ScoringSystem.

    Trial placements are made on scratch boards owned by the evaluator (one
    per lookahead level) and undone after scoring, so the caller's board is
    never modified.
    """

    def __init__(self, scoring: ScoringSystem | None = None):
        self.scoring = scoring or ScoringSystem()
        self._scratch: list[Board | None] = [None, None]

    def get_next_move(
        self,
        board: Board,
        piece: Tetromino,
        spawn_x: int,
        spawn_y: int,
        preview: Tetromino | None = None,
        preview_x: int = 0,
        preview_y: int = 0,
    ) -> Move | None:
        """Find the highest-scoring move for piece.

        Returns None when the piece has no legal placement in any rotation.
        Exact ties keep the first candidate found: rotations in clockwise
        order, translations 0, +1, -1, +2, -2, ...
        """
        move = self._search(board, piece, spawn_x, spawn_y, preview, preview_x, preview_y, 0)
        if move is None:
            logger.debug("No legal placement for %s at (%d, %d)", piece.name, spawn_x, spawn_y)
        else:
            logger.debug(
                "Best move for %s: rotate %d, shift %+d, score %.3f",
                piece.name,
                move.rotation_delta,
                move.translation_delta,
                move.score,
            )
        return move

    def _search(
        self,
        board: Board,
        piece: Tetromino,
        x: int,
        y: int,
        preview: Tetromino | None,
        preview_x: int,
        preview_y: int,
        depth: int,
    ) -> Move | None:
        scratch = board.clone_into(self._scratch[depth])
        self._scratch[depth] = scratch

        best: Move | None = None
        for placement in self.placements(scratch, piece, x, y):
            scratch.add_piece(placement.piece, placement.x, placement.row)

            if preview is None:
                score = self.scoring.score(scratch)
            else:
                follow_up = self._search(
                    scratch, preview, preview_x, preview_y, None, 0, 0, depth + 1
                )
                score = float("-inf") if follow_up is None else follow_up.score

            scratch.remove_piece(placement.piece, placement.x, placement.row)

            if best is None or score > best.score:
                best = Move(placement.rotation_delta, placement.translation_delta, score)

        return best

    def placements(
        self, board: Board, piece: Tetromino, x: int, y: int
    ) -> Iterator[Placement]:
        """Yield every placement reachable from (x, y).

        A rotation is tried only if the piece can turn into it at (x, y)
        one quarter turn at a time, clockwise or counter-clockwise, without
        colliding. From there the piece is shifted outward one column at a
        time in each direction until it hits a wall or the stack, and
        dropped. The board must not be modified between yields except to
        undo a trial placement.
        """
        rotations = [piece]
        for _ in range(ROTATION_STATES - 1):
            rotations.append(rotate_clockwise(rotations[-1]))
        fits = [board.can_move(rotated, x, y) for rotated in rotations]

        for rotation_delta, rotated in enumerate(rotations):
            if not _can_turn_to(fits, rotation_delta):
                continue
            for translation in _translations(board, rotated, x, y):
                col = x + translation
                row = board.drop_height(rotated, col, y)
                yield Placement(rotation_delta, translation, rotated, col, row)


def _can_turn_to(fits: list[bool], rotation_delta: int) -> bool:
    """Whether every intermediate state fits on one of the two turning paths."""
    return fits[0] and (
        all(fits[1:rotation_delta + 1]) or all(fits[rotation_delta:])
    )


def _translations(board: Board, piece: Tetromino, x: int, y: int) -> Iterator[int]:
    """Offsets 0, +1, -1, +2, -2, ... while each side stays collision-free."""
    yield 0
    left_ok = right_ok = True
    delta = 1
    while left_ok or right_ok:
        right_ok = right_ok and board.can_move(piece, x + delta, y)
        if right_ok:
            yield delta
        left_ok = left_ok and board.can_move(piece, x - delta, y)
        if left_ok:
            yield -delta
        delta += 1


def resolve_placement(
    board: Board, piece: Tetromino, spawn_x: int, spawn_y: int, move: Move
) -> Placement:
    """Turn a Move back into the rotated piece and its resting position on board."""
    rotated = piece
    for _ in range(move.rotation_delta):
        rotated = rotate_clockwise(rotated)
    col = spawn_x + move.translation_delta
    return Placement(
        move.rotation_delta,
        move.translation_delta,
        rotated,
        col,
        board.drop_height(rotated, col, spawn_y),
    )

"""Heuristic evaluation function for Tetris board positions.

Scores a board position using a weighted sum of eight features. Higher scores
are better. Weights may be negative (penalties) or positive (rewards); the
fixed default set is the hand-tuned one, evolved sets come from
gatetris.ai.evolution.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import astuple, dataclass, fields
from typing import TYPE_CHECKING

import numpy as np

from . import fast_features

if TYPE_CHECKING:
    from ..game.board import Board

# Minimum gap to the shorter neighbour for a column to count as a well.
MIN_WELL_DEPTH = 3


@dataclass(frozen=True)
class Weights:
    """Coefficients of the eight scoring features, in scoring order."""

    sum_height: float = 0.0
    max_height: float = 0.0
    rel_height: float = 0.0
    avg_height: float = 0.0
    holes: float = 0.0
    wells: float = 0.0
    blockades: float = 0.0
    clears: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Weights:
        if len(values) != NUM_WEIGHTS:
            raise ValueError(f"Expected {NUM_WEIGHTS} weights, got {len(values)}")
        return cls(*(float(v) for v in values))

    def as_tuple(self) -> tuple[float, ...]:
        return astuple(self)


NUM_WEIGHTS = len(fields(Weights))

FIXED_WEIGHTS = Weights(2, -3, -3, -3, -3, -5, 0, -10)


@dataclass(frozen=True)
class Features:
    """Raw feature values of a board, before weighting."""

    sum_height: int
    max_height: int
    min_height: int
    holes: int
    wells: int
    blockades: int
    clears: int
    columns: int

    @property
    def rel_height(self) -> int:
        return self.max_height - self.min_height

    @property
    def avg_height(self) -> float:
        return self.sum_height / self.columns


def get_heights(board: Board) -> np.ndarray:
    """Height of each column: topmost occupied row + 1, 0 if empty."""
    return board.column_heights()


def count_wells(heights: Sequence[int], min_depth: int = MIN_WELL_DEPTH) -> int:
    """Sum of the depths of all wells in a row of column heights."""
    return int(fast_features.count_wells(np.asarray(heights, dtype=np.int64), min_depth))


def extract_features(board: Board, min_well_depth: int = MIN_WELL_DEPTH) -> Features:
    """Measure a board. Never modifies it.

    Full rows are counted as clears, then the remaining features are taken
    from a private copy with those rows removed and the stack compacted.
    """
    occupied = board.occupancy()
    full = occupied.all(axis=1)
    clears = int(full.sum())
    if clears:
        compacted = np.zeros_like(occupied)
        remaining = occupied[~full]
        compacted[:remaining.shape[0]] = remaining
        occupied = compacted

    sum_h, max_h, min_h, holes, wells, blockades = fast_features.scan_columns(
        occupied, min_well_depth
    )
    return Features(
        sum_height=int(sum_h),
        max_height=int(max_h),
        min_height=int(min_h),
        holes=int(holes),
        wells=int(wells),
        blockades=int(blockades),
        clears=clears,
        columns=board.width,
    )


class ScoringSystem:
    """Scores board positions using weighted features."""

    def __init__(self, weights: Weights | None = None, min_well_depth: int = MIN_WELL_DEPTH):
        self.weights = weights or FIXED_WEIGHTS
        self.min_well_depth = min_well_depth

    def set_weights(self, weights: Weights | Sequence[float]):
        if not isinstance(weights, Weights):
            weights = Weights.from_sequence(weights)
        self.weights = weights

    def get_weights(self) -> Weights:
        return self.weights

    def score(self, board: Board) -> float:
        """Score a board position. Higher is better."""
        return self.score_features(extract_features(board, self.min_well_depth))

    def score_features(self, f: Features) -> float:
        w = self.weights
        score = 0.0
        score += w.sum_height * f.sum_height
        score += w.max_height * f.max_height
        score += w.rel_height * f.rel_height
        score += w.avg_height * f.avg_height
        score += w.holes * f.holes
        score += w.wells * f.wells
        score += w.blockades * f.blockades
        score += w.clears * f.clears
        return score


def score(board: Board, weights: Weights | Sequence[float]) -> float:
    """Score board with a one-off set of weights."""
    scoring = ScoringSystem()
    scoring.set_weights(weights)
    return scoring.score(board)

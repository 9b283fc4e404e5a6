"""Tests for the board features and the scoring system."""

import numpy as np
import pytest

from gatetris.ai.heuristic import (
    FIXED_WEIGHTS,
    NUM_WEIGHTS,
    ScoringSystem,
    Weights,
    count_wells,
    extract_features,
    get_heights,
    score,
)
from gatetris.game.board import Board


def _board_from_heights(heights, rows=20) -> Board:
    """Board whose columns are solid up to the given heights."""
    grid = np.zeros((rows, len(heights)), dtype=bool)
    for c, h in enumerate(heights):
        grid[:h, c] = True
    return Board.from_occupancy(grid)


class TestWeights:
    def test_field_order(self):
        w = Weights.from_sequence([1, 2, 3, 4, 5, 6, 7, 8])
        assert w.sum_height == 1
        assert w.avg_height == 4
        assert w.clears == 8
        assert w.as_tuple() == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0)

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            Weights.from_sequence([1.0] * 7)

    def test_fixed_weights(self):
        assert NUM_WEIGHTS == 8
        assert FIXED_WEIGHTS.as_tuple() == (2, -3, -3, -3, -3, -5, 0, -10)

    def test_set_and_get_weights(self):
        scoring = ScoringSystem()
        scoring.set_weights([0.5] * 8)
        assert scoring.get_weights() == Weights(*([0.5] * 8))


class TestHeights:
    def test_empty_board(self):
        assert get_heights(Board()).tolist() == [0] * 10

    def test_filled_column(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[0:6, 3] = True
        heights = get_heights(Board.from_occupancy(grid))
        assert heights[3] == 6
        assert [h for i, h in enumerate(heights) if i != 3] == [0] * 9

    def test_floating_blocks_count(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[7, 1] = True
        grid[0:2, 8] = True
        board = Board.from_occupancy(grid)
        assert get_heights(board).tolist() == [0, 8, 0, 0, 0, 0, 0, 0, 2, 0]


class TestWells:
    def test_deep_well(self):
        assert count_wells([5, 5, 1, 5, 5], 3) == 4

    def test_shallow_gap_is_not_a_well(self):
        assert count_wells([5, 5, 3, 5, 5], 3) == 0

    def test_edge_column_uses_single_neighbour(self):
        assert count_wells([0, 4, 4, 4], 3) == 4
        assert count_wells([4, 4, 4, 0], 3) == 4

    def test_must_be_lower_than_both_neighbours(self):
        # Column 2 is level with column 3
        assert count_wells([5, 5, 0, 0, 5], 3) == 0

    def test_wells_on_board(self):
        board = _board_from_heights([5, 5, 1, 5, 5], rows=10)
        assert extract_features(board).wells == 4


class TestFeatures:
    def test_empty_board(self):
        f = extract_features(Board())
        assert (f.sum_height, f.max_height, f.min_height) == (0, 0, 0)
        assert (f.holes, f.wells, f.blockades, f.clears) == (0, 0, 0, 0)

    def test_heights(self):
        board = _board_from_heights([2, 1, 0, 0, 0, 0, 0, 0, 0, 3])
        f = extract_features(board)
        assert f.sum_height == 6
        assert f.max_height == 3
        assert f.min_height == 0
        assert f.rel_height == 3
        assert f.avg_height == pytest.approx(0.6)

    def test_holes_and_blockades(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[1:3, 0] = True  # two blocks over an empty cell
        grid[3, 1] = True    # one block over three empty cells
        f = extract_features(Board.from_occupancy(grid))
        assert f.holes == 1 + 3
        assert f.blockades == 2 + 1

    def test_block_between_holes(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[1, 0] = True
        grid[3, 0] = True
        f = extract_features(Board.from_occupancy(grid))
        assert f.holes == 2
        assert f.blockades == 2

    def test_clears_are_removed_before_measuring(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[0, :] = True
        grid[1, 0] = True
        f = extract_features(Board.from_occupancy(grid))
        assert f.clears == 1
        assert f.sum_height == 1
        assert f.max_height == 1


class TestScoringSystem:
    def setup_method(self):
        self.scoring = ScoringSystem(FIXED_WEIGHTS)

    def test_empty_board_score(self):
        assert self.scoring.score(Board()) == 0.0

    def test_linear_combination(self):
        board = _board_from_heights([2, 1, 0, 0, 0, 0, 0, 0, 0, 0])
        scoring = ScoringSystem(Weights(*([1.0] * 8)))
        # sum 3 + max 2 + rel 2 + avg 0.3
        assert scoring.score(board) == pytest.approx(7.3)

    def test_each_weight_applies_to_its_feature(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[0, :] = True        # one clear
        grid[2, 4] = True        # block over a hole
        board = Board.from_occupancy(grid)
        assert score(board, Weights(holes=1.0)) == 1.0
        assert score(board, Weights(blockades=1.0)) == 1.0
        assert score(board, Weights(clears=1.0)) == 1.0
        assert score(board, Weights(max_height=1.0)) == 2.0

    def test_scoring_does_not_modify_board(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[0, :] = True
        grid[1, 0:5] = True
        board = Board.from_occupancy(grid)
        before = board.grid.copy()
        first = self.scoring.score(board)
        np.testing.assert_array_equal(board.grid, before)
        assert self.scoring.score(board) == first

    def test_empty_beats_full_column(self):
        full_column = _board_from_heights([20] + [0] * 9)
        assert self.scoring.score(Board()) > self.scoring.score(full_column)

    def test_fewer_holes_is_better(self):
        weights = Weights(holes=-1.0, blockades=-1.0)
        grid_no_holes = np.zeros((20, 10), dtype=bool)
        grid_no_holes[0:2, 0:9] = True
        grid_holes = grid_no_holes.copy()
        grid_holes[0, 3] = False
        assert score(Board.from_occupancy(grid_no_holes), weights) > score(
            Board.from_occupancy(grid_holes), weights
        )

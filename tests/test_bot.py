"""Tests for the game loop, training loop and command line."""

import pytest

from gatetris.__main__ import main, parse_args
from gatetris.ai.evolution import Evolution
from gatetris.bot import TetrisBot


def _config(**overrides):
    config = {
        "selector": "shuffle",
        "seed": 1,
        "lookahead": False,
        "max_pieces": 20,
    }
    config.update(overrides)
    return config


class TestTetrisBot:
    def test_play_game_respects_piece_limit(self):
        bot = TetrisBot(_config(max_pieces=3))
        lines = bot.play_game()
        assert bot.sim.pieces_placed == 3
        assert lines == bot.sim.lines_cleared
        assert lines >= 0

    def test_seeded_games_are_reproducible(self):
        first = TetrisBot(_config()).play(2)
        second = TetrisBot(_config()).play(2)
        assert first == second
        assert len(first) == 2

    def test_lookahead_game(self):
        bot = TetrisBot(_config(lookahead=True, max_pieces=3))
        bot.play_game()
        assert bot.sim.pieces_placed == 3

    def test_worst_selector_game(self):
        bot = TetrisBot(_config(selector="worst", max_pieces=8))
        bot.play_game()
        assert bot.sim.pieces_placed <= 8

    def test_junk_rows_are_added(self):
        bot = TetrisBot(_config(max_pieces=6, junk_interval=2, seed=5))
        bot.play_game()
        assert bot.sim.pieces_placed <= 6
        assert not bot.sim.board.occupancy().all(axis=1).any()

    def test_unknown_selector(self):
        with pytest.raises(ValueError, match="Unknown piece selector"):
            TetrisBot(_config(selector="lucky"))

    def test_train_one_generation(self):
        bot = TetrisBot(_config(max_pieces=5))
        evolution = Evolution(population_size=4, seed=1)
        result = bot.train(1, evolution)
        assert result is evolution
        assert evolution.generation == 2
        assert evolution.current == 0

    def test_train_saves_population(self, tmp_path):
        path = tmp_path / "population.txt"
        bot = TetrisBot(_config(max_pieces=3, population_file=str(path)))
        evolution = bot.train(1)
        assert evolution.generation == 2
        assert len(path.read_text().splitlines()) == evolution.population_size


class TestMain:
    def test_parse_defaults(self):
        args = parse_args(["play"])
        assert args.mode == "play"
        assert args.games == 1
        assert args.selector == "shuffle"
        assert not args.no_lookahead

    def test_parse_weights(self):
        args = parse_args(["play", "--weights", "1", "2", "3", "4", "5", "6", "7", "8"])
        assert args.weights == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]

    def test_play_mode(self, capsys):
        main(["play", "--games", "1", "--max-pieces", "5", "--seed", "2", "--no-lookahead"])
        assert "Lines per game: [" in capsys.readouterr().out

    def test_train_mode(self, tmp_path, capsys):
        path = tmp_path / "population.txt"
        main(["train", "--max-pieces", "2", "--seed", "3", "--no-lookahead",
              "--population-file", str(path)])
        assert "Finished at generation 2" in capsys.readouterr().out
        assert path.exists()

"""Main Tetris bot orchestrator.

Ties together the game simulation, the move search and the weight evolution
into a piece-by-piece game loop.
"""

from __future__ import annotations

import logging

from .ai.controller import AIController
from .ai.evolution import Evolution
from .ai.heuristic import FIXED_WEIGHTS, ScoringSystem
from .ai.planner import Move, MoveEvaluator
from .game.board import BOARD_COLS, BOARD_ROWS
from .game.sequence import (
    PieceSelector,
    RandomPieceSelector,
    ShufflePieceSelector,
    WorstPieceSelector,
)
from .game.tetris_sim import TetrisSim

logger = logging.getLogger(__name__)

SELECTORS = ("shuffle", "random", "worst")


class TetrisBot:
    """Plays Tetris games with the heuristic AI, optionally evolving its weights."""

    def __init__(self, config: dict):
        self.config = config

        # AI
        self.scoring = ScoringSystem(FIXED_WEIGHTS)
        self.evaluator = MoveEvaluator(self.scoring)
        self.controller = AIController(use_hard_drops=config.get("use_hard_drops", True))
        self.lookahead = config.get("lookahead", True)

        # Game
        self.sim = TetrisSim(
            width=config.get("width", BOARD_COLS),
            height=config.get("height", BOARD_ROWS),
            selector=self._make_selector(config.get("selector", "shuffle")),
            seed=config.get("seed"),
        )
        self._max_pieces = config.get("max_pieces")
        self._junk_interval = config.get("junk_interval", 0)
        self._games_played = 0

    def _make_selector(self, name: str) -> PieceSelector:
        seed = self.config.get("seed")
        if name == "shuffle":
            return ShufflePieceSelector(seed)
        if name == "random":
            return RandomPieceSelector(seed)
        if name == "worst":
            return WorstPieceSelector(self.evaluator, lambda: self.sim.board)
        raise ValueError(f"Unknown piece selector {name!r}, expected one of {SELECTORS}")

    def next_move(self) -> Move | None:
        """Search the best move for the falling piece."""
        sim = self.sim
        if not self.lookahead:
            return self.evaluator.get_next_move(sim.board, sim.piece, sim.x, sim.y)

        preview = sim.preview
        return self.evaluator.get_next_move(
            sim.board,
            sim.piece,
            sim.x,
            sim.y,
            preview,
            sim.board.spawn_x(preview),
            sim.board.spawn_y(preview),
        )

    def play_game(self) -> int:
        """Play one game to the end. Returns the number of lines cleared."""
        sim = self.sim
        sim.reset()

        while not sim.game_over:
            if self._max_pieces and sim.pieces_placed >= self._max_pieces:
                logger.debug("Piece limit %d reached", self._max_pieces)
                break

            move = self.next_move()
            if move is None:
                logger.info("No legal placement for %s - ending game", sim.piece.name)
                break
            self.controller.play(sim, move)

            if (
                self._junk_interval
                and not sim.game_over
                and sim.pieces_placed % self._junk_interval == 0
            ):
                sim.add_junk_row()

        self._games_played += 1
        logger.info(
            "Game %d finished: %d lines, %d pieces",
            self._games_played,
            sim.lines_cleared,
            sim.pieces_placed,
        )
        return sim.lines_cleared

    def play(self, games: int) -> list[int]:
        """Play games with the current weights and return lines per game."""
        return [self.play_game() for _ in range(games)]

    def train(self, generations: int, evolution: Evolution | None = None) -> Evolution:
        """Run the genetic algorithm for a number of full generations.

        Every individual plays one game; its lines cleared is its fitness.
        """
        if evolution is None:
            evolution = Evolution(
                population_file=self.config.get("population_file"),
                seed=self.config.get("seed"),
            )

        logger.info(
            "=== Training %d generation(s) of %d ===", generations, evolution.population_size
        )
        target = evolution.generation + generations
        while evolution.generation < target:
            evolution.update_scoring(self.scoring)
            evolution.submit(self.play_game())

        return evolution

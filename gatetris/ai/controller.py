"""Translates moves into sequences of game actions.

A Move is relative to the spawn position, so the piece is first rotated in
place, then shifted horizontally, then dropped:
  - ROTATE_CW / ROTATE_CCW: quarter turn
  - MOVE_LEFT / MOVE_RIGHT: one column
  - SOFT_DROP: one row down
  - HARD_DROP: drop and lock
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..game.pieces import rotate_clockwise

if TYPE_CHECKING:
    from ..game.tetris_sim import TetrisSim
    from .planner import Move

logger = logging.getLogger(__name__)


class Action(Enum):
    ROTATE_CW = "rotate_clockwise"
    ROTATE_CCW = "rotate_counter_clockwise"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"


class AIController:
    """Converts moves to action sequences and plays them on a TetrisSim."""

    def __init__(self, use_hard_drops: bool = True):
        """
        Args:
            use_hard_drops: Drop the piece straight away once it is in
                position. When False, the piece is soft-dropped row by row
                until it lands and only then hard-dropped to lock it.
        """
        self.use_hard_drops = use_hard_drops

    def move_to_actions(self, move: Move, sim: TetrisSim | None = None) -> list[Action]:
        """Generate the rotate/shift actions for move, followed by a hard drop.

        Rotations take the shortest way round. A half turn goes clockwise
        unless sim is given and its first clockwise quarter turn is blocked.
        Soft drops are not included; they depend on the board and are added
        by play().
        """
        actions: list[Action] = []

        # Step 1: Rotations
        rot = move.rotation_delta % 4
        if rot == 3 or (rot == 2 and sim is not None and not _can_rotate_clockwise(sim)):
            actions.extend([Action.ROTATE_CCW] * (4 - rot))
        else:
            actions.extend([Action.ROTATE_CW] * rot)

        # Step 2: Horizontal movement
        dx = move.translation_delta
        if dx > 0:
            actions.extend([Action.MOVE_RIGHT] * dx)
        elif dx < 0:
            actions.extend([Action.MOVE_LEFT] * -dx)

        # Step 3: Hard drop
        actions.append(Action.HARD_DROP)
        return actions

    def play(self, sim: TetrisSim, move: Move) -> int:
        """Execute move on sim. Returns the number of lines cleared.

        An action the board rejects is logged and skipped; the piece is
        still dropped wherever it ended up.
        """
        actions = self.move_to_actions(move, sim)
        for action in actions[:-1]:
            if not getattr(sim, action.value)():
                logger.warning(
                    "%s rejected for %s at (%d, %d)", action.name, sim.piece.name, sim.x, sim.y
                )

        if not self.use_hard_drops:
            while sim.soft_drop():
                pass
        return sim.hard_drop()


def _can_rotate_clockwise(sim: TetrisSim) -> bool:
    return sim.board.can_move(rotate_clockwise(sim.piece), sim.x, sim.y)

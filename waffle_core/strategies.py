from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional

from .board import Board, Coord
from .players import Color, Decider, Player, computer
from .solver import MAX_SOLVER_CELLS, solve

logger = logging.getLogger(__name__)


def _require_moves(board: Board) -> List[Coord]:
    moves = board.clean_cells()
    if not moves:
        raise RuntimeError('No clean cells left to play')
    return moves


def random_decider(seed: Optional[int] = None) -> Decider:
    """Picks a uniformly random clean cell."""
    rng = random.Random(seed)

    def decide(board: Board) -> Coord:
        return rng.choice(_require_moves(board))

    return decide


def solver_decider(seed: Optional[int] = None) -> Decider:
    """Plays perfectly on boards small enough to search.

    In a lost position it eats as little as possible to drag the game out.
    Larger boards fall back to random play.
    """
    fallback = random_decider(seed)

    def decide(board: Board) -> Coord:
        moves = _require_moves(board)
        if board.width * board.height > MAX_SOLVER_CELLS:
            logger.info("board %dx%d too large for the solver, playing randomly", board.width, board.height)
            return fallback(board)
        res = solve(board)
        if res.win and res.best_move is not None:
            return res.best_move
        return max(moves, key=lambda c: (c[0] + c[1], c[1], c[0]))

    return decide


STRATEGIES: Dict[str, Callable[[Optional[int]], Decider]] = {
    'random': random_decider,
    'solver': solver_decider,
}


def make_decider(name: str, seed: Optional[int] = None) -> Decider:
    try:
        factory = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"unknown strategy {name!r}; expected one of {sorted(STRATEGIES)}") from None
    return factory(seed)


def make_computer(name: str, color: Color, strategy: str = 'solver', seed: Optional[int] = None) -> Player:
    return computer(name, color, make_decider(strategy, seed), strategy=strategy)

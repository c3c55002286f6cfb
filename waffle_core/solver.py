from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, List, Optional, Tuple

from .board import Board, Coord
from .engine import TERMINATION_CELLS

# Above this many cells the exhaustive search is too slow to use interactively.
MAX_SOLVER_CELLS = 64


@dataclass(frozen=True)
class SolveResult:
    win: bool  # True if the player to move can force a win
    best_move: Optional[Coord]


def _is_terminal(width: int, height: int, clean: FrozenSet[Coord]) -> bool:
    for (x, y) in TERMINATION_CELLS:
        if not (0 <= x < width and 0 <= y < height):
            return True
        if (x, y) in clean:
            return False
    return True


def _after(clean: FrozenSet[Coord], move: Coord) -> FrozenSet[Coord]:
    mx, my = move
    return frozenset(c for c in clean if c[0] < mx or c[1] < my)


@lru_cache(maxsize=65536)
def _solve(width: int, height: int, clean: FrozenSet[Coord]) -> Tuple[bool, Optional[Coord]]:
    if _is_terminal(width, height, clean):
        return False, None
    # Deterministic order: prefer moves that eat the most.
    for move in sorted(clean, key=lambda c: (c[0] + c[1], c[1], c[0])):
        win, _ = _solve(width, height, _after(clean, move))
        if not win:
            return True, move
    return False, None


def solve(board: Board) -> SolveResult:
    """Solves the position for the player to move by exhaustive search."""
    if board.width * board.height > MAX_SOLVER_CELLS:
        raise ValueError(f'{board.width}x{board.height} board is too large to solve exactly')
    win, move = _solve(board.width, board.height, frozenset(board.clean_cells()))
    return SolveResult(win=win, best_move=move)


def winning_moves(board: Board) -> List[Coord]:
    """All moves that leave the opponent in a lost position."""
    if board.width * board.height > MAX_SOLVER_CELLS:
        raise ValueError(f'{board.width}x{board.height} board is too large to solve exactly')
    clean = frozenset(board.clean_cells())
    if _is_terminal(board.width, board.height, clean):
        return []
    return sorted(m for m in clean if not _solve(board.width, board.height, _after(clean, m))[0])

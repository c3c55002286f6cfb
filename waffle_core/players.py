from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .board import Board, Coord

Color = str
Decider = Callable[[Board], Coord]


@dataclass(frozen=True)
class Player:
    """A seat at the table.

    Players without a ``decide`` callable are interactive: their moves arrive
    through ``GameEngine.click``. Players with one are autonomous and are asked
    for a move by ``GameEngine.do_turn``. ``strategy`` names the registered
    strategy the decider came from, so a saved game can rebuild it.
    """
    name: str
    color: Color
    decide_fn: Optional[Decider] = None
    strategy: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError('Player name must not be empty')

    @property
    def is_interactive(self) -> bool:
        return self.decide_fn is None

    def decide(self, board: Board) -> Coord:
        if self.decide_fn is None:
            raise RuntimeError(f"{self.name} is interactive and cannot decide a move")
        return self.decide_fn(board)


def human(name: str, color: Color) -> Player:
    return Player(name=name, color=color)


def computer(name: str, color: Color, decide: Decider, strategy: Optional[str] = None) -> Player:
    return Player(name=name, color=color, decide_fn=decide, strategy=strategy)

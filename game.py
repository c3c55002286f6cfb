from __future__ import annotations

# Facade module that re-exports the waffle core.
# The Flask app and tests import from here; single-responsibility modules live under waffle_core/*.

from waffle_core.board import Board, Cell, Coord, DEFAULT_HEIGHT, DEFAULT_WIDTH, POISON
from waffle_core.errors import EmptyHistoryError, InvalidDimensionsError, OutOfBoundsError, WaffleError
from waffle_core.history import HistoryManager
from waffle_core.players import Player, computer, human
from waffle_core.events import Event, EventBus, EventKind
from waffle_core.engine import GameEngine, TERMINATION_CELLS
from waffle_core.solver import SolveResult, solve, winning_moves
from waffle_core.strategies import STRATEGIES, make_computer, make_decider
from waffle_core.persistence import (
    board_from_json,
    board_to_json,
    engine_from_json,
    engine_to_json,
    load,
    save,
)


def main() -> None:
    # CLI driver delegated to waffle_core.cli
    from waffle_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()

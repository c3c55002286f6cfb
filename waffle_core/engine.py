from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .board import Board, Cell, Coord
from .errors import OutOfBoundsError
from .events import Event, EventBus, EventKind, Subscriber
from .history import HistoryManager
from .players import Player

logger = logging.getLogger(__name__)

# Once both cells next to the poison are gone, the next player has to eat it.
TERMINATION_CELLS = ((0, 1), (1, 0))


class GameEngine:
    """Drives a game of poisoned waffle.

    The engine owns the live board, the players (who play in list order), the
    turn counter and the undo/redo history. Callers drive it with ``do_turn``
    and ``click`` and listen for :class:`Event` notifications.
    """

    def __init__(
        self,
        players: Sequence[Player],
        board: Optional[Board] = None,
        turn: int = 0,
        history: Optional[HistoryManager[Board]] = None,
    ) -> None:
        if not players:
            raise ValueError('A game needs at least one player')
        if turn < 0:
            raise ValueError(f'turn must be non-negative, got {turn}')
        self._board: Board = board if board is not None else Board()
        self._players: List[Player] = list(players)
        self._turn = turn
        self._history: HistoryManager[Board] = history if history is not None else HistoryManager()
        self._events = EventBus()

    # ---- accessors ----

    @property
    def board(self) -> Board:
        return self._board

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def history(self) -> HistoryManager[Board]:
        return self._history

    def current_player(self) -> Player:
        return self._players[self._turn % len(self._players)]

    def last_player(self) -> Player:
        """The player who made the previous move (the winner once terminated)."""
        return self._players[(self._turn - 1) % len(self._players)]

    # ---- events ----

    def subscribe(self, callback: Subscriber) -> None:
        self._events.subscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        self._events.unsubscribe(callback)

    def _emit(self, kind: EventKind, payload=None) -> None:
        self._events.emit(Event(kind, payload))

    # ---- rules ----

    def is_terminated(self) -> bool:
        try:
            return all(self._board.get_cell(x, y) is Cell.EATEN for (x, y) in TERMINATION_CELLS)
        except OutOfBoundsError as e:
            logger.warning("termination cell out of bounds, treating game as over: %s", e)
            return True

    def make_move(self, coord: Coord) -> bool:
        """Applies the elimination rule at ``coord`` for the current player.

        Returns True when the move was committed. A move on a cell that is not
        clean changes nothing, records no history and does not use up the turn.
        """
        x, y = coord
        cell = self._board.get_cell(x, y)
        if cell is not Cell.CLEAN:
            logger.debug("move at %s ignored: cell is %s", coord, cell.value)
            return False
        self._history.add(self._board)
        self._board.eat(x, y)
        logger.debug("turn %d: %s ate %s", self._turn, self.current_player().name, coord)
        self._turn += 1
        self._emit(EventKind.TURN_ENDED)
        return True

    def receive_move(self, coord: Coord) -> bool:
        """Entry point for moves decided by autonomous players."""
        if self.is_terminated():
            return False
        return self.make_move(coord)

    def click(self, x: int, y: int) -> bool:
        """Entry point for interactive input. Returns True when a move was made."""
        if self.is_terminated():
            return False
        if not self.current_player().is_interactive:
            return False
        if not self._board.is_in_bounds(x, y):
            logger.warning("click at (%d, %d) is outside the waffle", x, y)
            return False
        if self._board.get_cell(x, y) is Cell.POISONED:
            return False
        self._emit(EventKind.PLAYER_TURN_END)
        return self.make_move((x, y))

    def do_turn(self) -> None:
        """Advances the game by one step.

        Announces the winner when the game is over, asks an autonomous player
        for its move, or tells the caller an interactive player is up.
        """
        if self.is_terminated():
            self._emit(EventKind.VICTORY, self.last_player().name)
            return
        player = self.current_player()
        if player.is_interactive:
            self._emit(EventKind.PLAYER_TURN_START, player.color)
            return
        move = player.decide(self._board.copy())
        self.receive_move(move)

    # ---- history ----

    def undo_move(self) -> None:
        self._board = self._history.undo(self._board)
        self._turn -= 1
        logger.debug("undo: back to turn %d", self._turn)
        self._emit(EventKind.TURN_ENDED)

    def redo_move(self) -> None:
        self._board = self._history.redo(self._board)
        self._turn += 1
        logger.debug("redo: forward to turn %d", self._turn)
        self._emit(EventKind.TURN_ENDED)

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .board import Board, Coord
from .config import Settings, configure_logging
from .engine import GameEngine
from .errors import InvalidDimensionsError
from .events import Event, EventKind
from .players import Player, human
from .persistence import load, save
from .strategies import make_computer

logger = logging.getLogger(__name__)


def _build_players(opponent: str, ai_first: bool, seed: Optional[int]) -> List[Player]:
    if opponent == 'human':
        return [human('Player 1', 'red'), human('Player 2', 'blue')]
    you = human('You', 'red')
    ai = make_computer(f'AI ({opponent})', 'blue', strategy=opponent, seed=seed)
    return [ai, you] if ai_first else [you, ai]


def parse_move(text: str) -> Optional[Coord]:
    """Parses 'x,y' or 'x y' into a coordinate, or None."""
    sep = ',' if ',' in text else ' '
    try:
        x_s, y_s = [t for t in text.split(sep) if t != '']
        return (int(x_s), int(y_s))
    except ValueError:
        return None


def undo_round(engine: GameEngine) -> bool:
    """Undoes back to the previous interactive turn. Returns False if nothing was undone."""
    if not engine.can_undo():
        return False
    engine.undo_move()
    while engine.can_undo() and not engine.current_player().is_interactive:
        engine.undo_move()
    return True


def redo_round(engine: GameEngine) -> bool:
    """Redoes forward to the next interactive turn. Returns False if nothing was redone."""
    if not engine.can_redo():
        return False
    engine.redo_move()
    while engine.can_redo() and not engine.current_player().is_interactive:
        engine.redo_move()
    return True


def main(argv: Optional[List[str]] = None) -> None:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description='Poisoned waffle: do not eat the poisoned square')
    parser.add_argument('--width', type=int, default=settings.width, help='Waffle width')
    parser.add_argument('--height', type=int, default=settings.height, help='Waffle height')
    parser.add_argument('--opponent', choices=['human', 'random', 'solver'], default='solver',
                        help='Who plays the second seat')
    parser.add_argument('--ai-first', action='store_true', help='Let the computer open the game')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the random opponent')
    parser.add_argument('--load', default=None, help='Resume a saved game from this file')
    parser.add_argument('--save', default=settings.save_path, help='Save file used by the "s" command')
    args = parser.parse_args(argv)
    configure_logging(settings)

    if args.load:
        try:
            engine = load(args.load, seed=args.seed)
        except (OSError, ValueError) as e:
            parser.error(f'could not load {args.load}: {e}')
            return
        logger.info("resumed %dx%d game at turn %d from %s",
                    engine.board.width, engine.board.height, engine.turn, args.load)
    else:
        try:
            board = Board(args.width, args.height)
        except InvalidDimensionsError as e:
            parser.error(str(e))
            return
        engine = GameEngine(_build_players(args.opponent, args.ai_first, args.seed), board=board)

    state = {'winner': None, 'waiting': False}

    def on_event(ev: Event) -> None:
        if ev.kind is EventKind.VICTORY:
            state['winner'] = ev.payload
        elif ev.kind is EventKind.PLAYER_TURN_START:
            state['waiting'] = True
        elif ev.kind is EventKind.PLAYER_TURN_END:
            state['waiting'] = False

    engine.subscribe(on_event)

    while True:
        turn_before = engine.turn
        state['waiting'] = False
        engine.do_turn()
        if state['winner'] is not None:
            print(engine.board.pretty())
            print(f"Winner: {state['winner']}. The next bite would be poisoned.")
            return
        if not state['waiting']:
            if engine.turn == turn_before:
                print(f'error: {engine.current_player().name} did not make a valid move.')
                return
            print(f'{engine.last_player().name} played.')
            continue

        print(engine.board.pretty())
        player = engine.current_player()
        text = input(f'{player.name} ({player.color}) - move as x,y or u/r/s/q: ').strip().lower()
        if text == 'q':
            return
        if text == 'u':
            if not undo_round(engine):
                print('Nothing to undo.')
            continue
        if text == 'r':
            if not redo_round(engine):
                print('Nothing to redo.')
            continue
        if text == 's':
            try:
                save(engine, args.save)
                print(f'Saved to {args.save}')
            except (OSError, ValueError) as e:
                print(f'error: could not save: {e}')
            continue
        move = parse_move(text)
        if move is None:
            print('Could not parse. Try again.')
            continue
        if not engine.click(*move):
            print('Illegal move. Try again.')

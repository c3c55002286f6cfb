from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Dict, Optional

from .board import POISON, Board, Cell
from .engine import GameEngine
from .history import HistoryManager
from .players import Player, human
from .strategies import make_decider

FORMAT_VERSION = 1


def board_to_json(b: Board) -> Dict[str, Any]:
    rows = [[b.get_cell(x, y).value for x in range(b.width)] for y in range(b.height)]
    return {"width": int(b.width), "height": int(b.height), "cells": rows}


def board_from_json(obj: Dict[str, Any]) -> Board:
    try:
        width = int(obj["width"])
        height = int(obj["height"])
        rows = obj["cells"]
        if len(rows) != height or any(len(r) != width for r in rows):
            raise ValueError(f"cells do not match {width}x{height}")
        cells = [Cell(str(v)) for r in rows for v in r]
    except (KeyError, TypeError) as e:
        raise ValueError(f"bad board: {e}") from e
    board = Board(width=width, height=height, cells=cells)
    poisoned = [c for c in board.coords() if board.get_cell(*c) is Cell.POISONED]
    if poisoned != [POISON]:
        raise ValueError(f"board must have exactly one poisoned cell at {POISON}, found {poisoned}")
    return board


def player_to_json(p: Player) -> Dict[str, Any]:
    return {
        "name": p.name,
        "color": p.color,
        "kind": "human" if p.is_interactive else "computer",
        "strategy": p.strategy,
    }


def player_from_json(obj: Dict[str, Any], seed: Optional[int] = None) -> Player:
    try:
        name = str(obj["name"])
        color = str(obj["color"])
    except KeyError as e:
        raise ValueError(f"bad player: missing {e}") from e
    kind = obj.get("kind", "human")
    if kind == "human":
        return human(name, color)
    if kind != "computer":
        raise ValueError(f"bad player kind {kind!r}")
    strategy = obj.get("strategy")
    if not strategy:
        raise ValueError(f"computer player {name!r} has no strategy")
    return Player(name=name, color=color, decide_fn=make_decider(str(strategy), seed), strategy=str(strategy))


def engine_to_json(engine: GameEngine) -> Dict[str, Any]:
    """Captures board, players, turn and history as one document."""
    for p in engine.players:
        if not p.is_interactive and not p.strategy:
            raise ValueError(f"computer player {p.name!r} has no registered strategy and cannot be saved")
    return {
        "version": FORMAT_VERSION,
        "board": board_to_json(engine.board),
        "players": [player_to_json(p) for p in engine.players],
        "turn": int(engine.turn),
        "history": {
            "undo": [board_to_json(b) for b in engine.history.undo_stack],
            "redo": [board_to_json(b) for b in engine.history.redo_stack],
        },
    }


def engine_from_json(obj: Dict[str, Any], seed: Optional[int] = None) -> GameEngine:
    if not isinstance(obj, dict):
        raise ValueError("saved game must be a JSON object")
    version = obj.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"unsupported save format version {version!r}")
    try:
        board = board_from_json(obj["board"])
        players = [player_from_json(p, seed) for p in obj["players"]]
        turn = int(obj["turn"])
        hist = obj.get("history") or {}
        if not isinstance(hist, dict):
            raise ValueError("history must be an object with undo and redo lists")
        undo = [board_from_json(b) for b in hist.get("undo", [])]
        redo = [board_from_json(b) for b in hist.get("redo", [])]
    except (KeyError, TypeError) as e:
        raise ValueError(f"bad saved game: {e}") from e
    if len(undo) > turn:
        raise ValueError(f"history has {len(undo)} undo entries but turn is only {turn}")
    for snap in undo + redo:
        if (snap.width, snap.height) != (board.width, board.height):
            raise ValueError("history snapshot dimensions do not match the board")
    return GameEngine(players, board=board, turn=turn, history=HistoryManager(undo, redo))


def save(engine: GameEngine, path: str) -> None:
    """Writes the game to ``path`` atomically (temp file + replace)."""
    doc = engine_to_json(engine)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".waffle-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(doc, f, indent=2)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


def load(path: str, seed: Optional[int] = None) -> GameEngine:
    with open(path, "r", encoding="utf-8") as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path} is not valid JSON: {e}") from e
    return engine_from_json(doc, seed)

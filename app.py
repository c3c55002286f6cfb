from __future__ import annotations

import logging
import os
import threading
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from game import (
    Board,
    EmptyHistoryError,
    Event,
    GameEngine,
    InvalidDimensionsError,
    Player,
    board_to_json,
    human,
    load,
    make_computer,
    save,
)
from waffle_core.config import MAX_SIDE, Settings, configure_logging
from waffle_core.persistence import player_to_json

SETTINGS = Settings.from_env()
configure_logging(SETTINGS)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# One game per process; every request touching it holds this lock.
_lock = threading.Lock()
_engine: Optional[GameEngine] = None


def _default_players() -> List[Player]:
    return [human("Player", "red"), make_computer("Computer", "blue", strategy="solver")]


def _players_from_body(items: Any) -> List[Player]:
    if not items:
        return _default_players()
    if not isinstance(items, list):
        raise ValueError("players must be a list")
    out: List[Player] = []
    for i, p in enumerate(items):
        if not isinstance(p, dict):
            raise ValueError(f"player {i} must be an object")
        name = str(p.get("name") or f"Player {i + 1}")
        color = str(p.get("color") or "black")
        kind = p.get("kind", "human")
        if kind == "human":
            out.append(human(name, color))
        elif kind == "computer":
            seed = p.get("seed")
            out.append(make_computer(name, color, strategy=str(p.get("strategy", "solver")),
                                     seed=int(seed) if seed is not None else None))
        else:
            raise ValueError(f"unknown player kind {kind!r}")
    return out


def _get_engine() -> GameEngine:
    global _engine
    if _engine is None:
        _engine = GameEngine(_default_players(), board=Board(SETTINGS.width, SETTINGS.height))
    return _engine


def state_to_json(engine: GameEngine) -> Dict[str, Any]:
    terminated = engine.is_terminated()
    return {
        "board": board_to_json(engine.board),
        "players": [player_to_json(p) for p in engine.players],
        "turn": int(engine.turn),
        "currentPlayer": engine.current_player().name,
        "terminated": terminated,
        "winner": engine.last_player().name if terminated else None,
        "canUndo": engine.can_undo(),
        "canRedo": engine.can_redo(),
    }


def _event_to_json(ev: Event) -> Dict[str, Any]:
    return {"kind": ev.kind.value, "payload": ev.payload}


def _advance(engine: GameEngine) -> None:
    """Lets autonomous players move until a human is up or the game is over."""
    while not engine.is_terminated() and not engine.current_player().is_interactive:
        before = engine.turn
        engine.do_turn()
        if engine.turn == before:
            logger.warning("%s did not make a valid move; stopping", engine.current_player().name)
            return
    engine.do_turn()


def _run(engine: GameEngine, action) -> Any:
    """Runs ``action`` with an event recorder attached and returns the JSON response."""
    events: List[Event] = []
    record = events.append
    engine.subscribe(record)
    try:
        result = action(engine)
    finally:
        engine.unsubscribe(record)
    body = {"ok": True, "state": state_to_json(engine), "events": [_event_to_json(e) for e in events]}
    if isinstance(result, dict):
        body.update(result)
    return jsonify(body)


@app.get("/api/state")
def api_state() -> Any:
    with _lock:
        return jsonify({"ok": True, "state": state_to_json(_get_engine()), "events": []})


@app.post("/api/new")
def api_new() -> Any:
    global _engine
    body = request.get_json(force=True, silent=True) or {}
    try:
        width = int(body.get("width", SETTINGS.width))
        height = int(body.get("height", SETTINGS.height))
        if width > MAX_SIDE or height > MAX_SIDE:
            raise ValueError(f"board sides are limited to {MAX_SIDE}, got {width}x{height}")
        board = Board(width, height)
        players = _players_from_body(body.get("players"))
    except (InvalidDimensionsError, ValueError, TypeError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    with _lock:
        _engine = GameEngine(players, board=board)
        logger.info("new %dx%d game with %s", board.width, board.height, [p.name for p in players])
        return _run(_engine, _advance)


@app.post("/api/click")
def api_click() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        x = int(body["x"])
        y = int(body["y"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"ok": False, "error": "x and y are required integers"}), 400
    with _lock:
        engine = _get_engine()
        if not engine.board.is_in_bounds(x, y):
            return jsonify({"ok": False, "error": f"({x}, {y}) is outside the waffle",
                            "state": state_to_json(engine)}), 400

        def action(e: GameEngine) -> Dict[str, Any]:
            accepted = e.click(x, y)
            if accepted:
                _advance(e)
            return {"accepted": accepted}

        return _run(engine, action)


def _history_step(step: str) -> Any:
    with _lock:
        engine = _get_engine()

        def action(e: GameEngine) -> None:
            if step == "undo":
                e.undo_move()
            else:
                e.redo_move()

        try:
            return _run(engine, action)
        except EmptyHistoryError as e:
            return jsonify({"ok": False, "error": str(e), "state": state_to_json(engine)}), 409


@app.post("/api/undo")
def api_undo() -> Any:
    return _history_step("undo")


@app.post("/api/redo")
def api_redo() -> Any:
    return _history_step("redo")


def _save_path(name: Any) -> str:
    """Resolves a client-supplied save name inside the configured save directory."""
    if not name:
        return SETTINGS.save_path
    name = str(name)
    parts = name.replace("\\", "/").split("/")
    if os.path.isabs(name) or name.startswith(("/", "\\")) or ".." in parts:
        raise ValueError(f"save name {name!r} must be a relative path without '..'")
    kept = [p for p in parts if p not in ("", ".")]
    if not kept:
        raise ValueError(f"save name {name!r} does not name a file")
    base = os.path.dirname(os.path.abspath(SETTINGS.save_path))
    return os.path.join(base, *kept)


@app.post("/api/save")
def api_save() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        path = _save_path(body.get("path"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    with _lock:
        try:
            save(_get_engine(), path)
        except (OSError, ValueError) as e:
            return jsonify({"ok": False, "error": str(e)}), 500
    logger.info("saved game to %s", path)
    return jsonify({"ok": True, "path": path})


@app.post("/api/load")
def api_load() -> Any:
    global _engine
    body = request.get_json(force=True, silent=True) or {}
    try:
        path = _save_path(body.get("path"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    if not os.path.isfile(path):
        return jsonify({"ok": False, "error": f"no saved game at {path}"}), 404
    try:
        loaded = load(path)
    except (OSError, ValueError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    with _lock:
        _engine = loaded
        logger.info("loaded game from %s", path)
        return jsonify({"ok": True, "state": state_to_json(_engine), "events": []})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")), debug=debug)

from __future__ import annotations

import os
from typing import Any, Dict, Tuple

from flask import Flask, jsonify, request

from tictacgo_core import config
from tictacgo_core.board import Board, Direction
from tictacgo_core.deal import new_game
from tictacgo_core.generator import Difficulty
from tictacgo_core.logging_config import configure_logging, get_logger
from tictacgo_core.solver import DEFAULT_DEPTH_BUDGET, DEFAULT_NODE_BUDGET, solve
from tictacgo_core.state import GameState

LOGGER = get_logger(__name__)

# Upper bounds on client-requested solver budgets
MAX_NODE_BUDGET = 200_000
MAX_DEPTH_BUDGET = 200

app = Flask(__name__)


def board_to_json(b: Board) -> Dict[str, Any]:
    return {
        "rows": b.rows,
        "rowWidths": list(b.row_widths),
        "cells": [1 if v else 0 for v in b.cells],
    }


def json_to_board(obj: Dict[str, Any]) -> Board:
    widths = tuple(int(w) for w in obj["rowWidths"])
    cells = tuple(bool(int(v)) for v in obj["cells"])
    return Board(row_widths=widths, cells=cells)


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "circles": [[int(r), int(c)] for (r, c) in s.circles],
        "crosses": [[int(r), int(c)] for (r, c) in s.crosses],
        "player": int(s.player_index),
    }


def json_to_state(board: Board, obj: Dict[str, Any]) -> GameState:
    circles = tuple((int(r), int(c)) for r, c in obj["circles"])
    crosses = tuple((int(r), int(c)) for r, c in obj.get("crosses", []))
    return GameState(board=board, circles=circles, crosses=crosses, player_index=int(obj["player"]))


def _status(s: GameState) -> Dict[str, Any]:
    return {
        "won": s.won,
        "lost": s.lost,
        "legalMoves": [d.name.lower() for d in s.legal_moves()],
    }


def _read_board_and_state(body: Dict[str, Any]) -> Tuple[Board, GameState]:
    board = json_to_board(body["board"])
    return board, json_to_state(board, body["state"])


def _bad_request(message: str) -> Any:
    return jsonify({"ok": False, "error": message}), 400


@app.get("/")
def index() -> Any:
    return jsonify({
        "ok": True,
        "game": "tic-tac-go",
        "difficulties": [d.value for d in Difficulty],
        "defaultDifficulty": config.DEFAULT_DIFFICULTY,
    })


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    seed = body.get("seed", None)
    try:
        difficulty = Difficulty.parse(body.get("difficulty") or config.DEFAULT_DIFFICULTY)
        if seed is not None:
            seed = int(seed)
    except (TypeError, ValueError) as e:
        return _bad_request(str(e))
    game = new_game(difficulty, seed=seed)
    payload: Dict[str, Any] = {
        "ok": True,
        "difficulty": game.difficulty.value,
        "fallback": game.fallback,
        "board": board_to_json(game.board),
        "state": state_to_json(game.state),
    }
    payload.update(_status(game.state))
    return jsonify(payload)


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board, state = _read_board_and_state(body)
        direction = Direction.parse(str(body.get("direction", "")))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(f"bad request: {e}")
    if state.finished:
        return _bad_request("Game is over")
    next_state = state.move(direction)
    payload: Dict[str, Any] = {
        "ok": True,
        "moved": next_state is not state,
        "state": state_to_json(next_state),
    }
    payload.update(_status(next_state))
    return jsonify(payload)


@app.post("/api/check")
def api_check() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        _, state = _read_board_and_state(body)
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(f"bad request: {e}")
    return jsonify({"ok": True, "won": state.won, "lost": state.lost, "deadlock": state.deadlocked()})


@app.post("/api/solve")
def api_solve() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board, state = _read_board_and_state(body)
        node_budget = min(int(body.get("nodeBudget", DEFAULT_NODE_BUDGET)), MAX_NODE_BUDGET)
        depth_budget = min(int(body.get("depthBudget", DEFAULT_DEPTH_BUDGET)), MAX_DEPTH_BUDGET)
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(f"bad request: {e}")
    res = solve(state.circles, state.crosses, state.player_index, board, node_budget, depth_budget)
    LOGGER.debug("Solve request: %s", res)
    return jsonify({
        "ok": True,
        "solved": res.solved,
        "moves": res.moves,
        "nodes": res.nodes,
        "exhausted": res.exhausted,
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    configure_logging()
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in config.TRUTHY
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=debug)

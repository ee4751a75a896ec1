import json
import unittest

from app import app as flask_app, board_to_json
import app as app_mod
from game import Board


def _post(client, path, payload):
    return client.post(path, data=json.dumps(payload), content_type="application/json")


class TestFlaskAPIEdges(unittest.TestCase):
    def setUp(self):
        self.client = flask_app.test_client()
        self.board = board_to_json(Board.full(3, 5))
        self.state = {"circles": [[1, 0], [1, 1], [0, 3]], "crosses": [], "player": 2}

    def test_given_unknown_difficulty_or_seed_when_posting_new_then_400(self):
        r = _post(self.client, "/api/new", {"difficulty": "extreme"})
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.get_json()["ok"])
        r = _post(self.client, "/api/new", {"difficulty": "easy", "seed": "abc"})
        self.assertEqual(r.status_code, 400)

    def test_given_bad_direction_when_moving_then_400(self):
        r = _post(self.client, "/api/move", {"board": self.board, "state": self.state, "direction": "north"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("unknown direction", r.get_json()["error"])

    def test_given_blocked_move_when_moving_then_unchanged_state(self):
        r = _post(self.client, "/api/move", {"board": self.board, "state": self.state, "direction": "up"})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertFalse(d["moved"])
        self.assertEqual(d["state"], self.state)

    def test_given_finished_game_when_moving_then_400(self):
        won = {"circles": [[1, 0], [1, 1], [1, 2]], "crosses": [], "player": 2}
        r = _post(self.client, "/api/move", {"board": self.board, "state": won, "direction": "up"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "Game is over")

    def test_given_malformed_board_or_state_when_checking_then_400(self):
        bad_board = {"rows": 1, "rowWidths": [3], "cells": [1, 1]}
        r = _post(self.client, "/api/check", {"board": bad_board, "state": self.state})
        self.assertEqual(r.status_code, 400)

        overlapping = {"circles": [[1, 0], [1, 1], [0, 3]], "crosses": [[1, 1]], "player": 2}
        r = _post(self.client, "/api/check", {"board": self.board, "state": overlapping})
        self.assertEqual(r.status_code, 400)

        r = _post(self.client, "/api/check", {"board": self.board})
        self.assertEqual(r.status_code, 400)

    def test_given_tiny_budget_when_solving_then_exhausted_reported(self):
        r = _post(self.client, "/api/solve", {"board": self.board, "state": self.state, "nodeBudget": 1})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertFalse(d["solved"])
        self.assertTrue(d["exhausted"])
        self.assertIsNone(d["moves"])

    def test_given_oversized_budget_when_solving_then_capped(self):
        seen = {}
        orig = app_mod.solve

        def _spy_solve(circles, crosses, player_index, board, node_budget, depth_budget):
            seen["budgets"] = (node_budget, depth_budget)
            return orig(circles, crosses, player_index, board, node_budget, depth_budget)

        app_mod.solve = _spy_solve
        try:
            payload = {"board": self.board, "state": self.state, "nodeBudget": 10 ** 9, "depthBudget": 10 ** 4}
            r = _post(self.client, "/api/solve", payload)
        finally:
            app_mod.solve = orig
        self.assertEqual(r.status_code, 200)
        self.assertEqual(seen["budgets"], (app_mod.MAX_NODE_BUDGET, app_mod.MAX_DEPTH_BUDGET))


if __name__ == "__main__":
    unittest.main(verbosity=2)

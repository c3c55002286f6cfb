import json
import unittest

from app import app as flask_app  # noqa: E402
import app as app_mod             # noqa: E402

TWO_HUMANS = [
    {"name": "P1", "color": "red", "kind": "human"},
    {"name": "P2", "color": "blue", "kind": "human"},
]


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self._orig_engine = app_mod._engine
        app_mod._engine = None
        self.client = flask_app.test_client()

    def tearDown(self):
        app_mod._engine = self._orig_engine

    def _post(self, url, payload=None):
        return self.client.post(url, data=json.dumps(payload or {}), content_type="application/json")

    def _event_kinds(self, data):
        return [e["kind"] for e in data["events"]]

    def test_given_no_game_when_state_requested_then_default_game_created(self):
        r = self.client.get("/api/state")
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["state"]["board"]["width"], 6)
        self.assertEqual(d["state"]["board"]["height"], 4)
        self.assertEqual(d["state"]["turn"], 0)
        self.assertFalse(d["state"]["terminated"])

    def test_given_two_humans_when_new_and_click_then_events_and_turn_advance(self):
        r = self._post("/api/new", {"width": 3, "height": 3, "players": TWO_HUMANS})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(self._event_kinds(d), ["player_turn_start"])
        self.assertEqual(d["events"][0]["payload"], "red")
        self.assertEqual(d["state"]["currentPlayer"], "P1")

        r1 = self._post("/api/click", {"x": 2, "y": 2})
        self.assertEqual(r1.status_code, 200)
        d1 = r1.get_json()
        self.assertTrue(d1["accepted"])
        self.assertEqual(self._event_kinds(d1), ["player_turn_end", "turn_ended", "player_turn_start"])
        self.assertEqual(d1["state"]["turn"], 1)
        self.assertEqual(d1["state"]["board"]["cells"][2][2], "eaten")
        self.assertTrue(d1["state"]["canUndo"])

    def test_given_move_when_undo_and_redo_then_turn_tracks_history(self):
        self._post("/api/new", {"width": 3, "height": 3, "players": TWO_HUMANS})
        self._post("/api/click", {"x": 1, "y": 1})

        r = self._post("/api/undo")
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["state"]["turn"], 0)
        self.assertTrue(d["state"]["canRedo"])
        self.assertEqual(self._event_kinds(d), ["turn_ended"])

        r2 = self._post("/api/redo")
        self.assertEqual(r2.status_code, 200)
        self.assertEqual(r2.get_json()["state"]["turn"], 1)

    def test_given_human_vs_solver_when_click_then_computer_answers(self):
        r = self._post("/api/new", {"width": 2, "height": 2})
        self.assertEqual(r.status_code, 200)
        r1 = self._post("/api/click", {"x": 1, "y": 1})
        d1 = r1.get_json()
        self.assertTrue(d1["accepted"])
        # Human moved, computer replied, human is up again
        self.assertEqual(d1["state"]["turn"], 2)
        self.assertEqual(d1["state"]["currentPlayer"], "Player")
        self.assertEqual(self._event_kinds(d1)[-1], "player_turn_start")

    def test_given_computer_opens_when_new_then_it_moves_first(self):
        players = [
            {"name": "Bot", "color": "green", "kind": "computer", "strategy": "random", "seed": 4},
            {"name": "Me", "color": "red", "kind": "human"},
        ]
        d = self._post("/api/new", {"width": 4, "height": 4, "players": players}).get_json()
        self.assertEqual(d["state"]["turn"], 1)
        self.assertEqual(d["state"]["currentPlayer"], "Me")
        self.assertEqual(self._event_kinds(d), ["turn_ended", "player_turn_start"])

    def test_given_game_played_out_when_last_click_then_victory_reported(self):
        self._post("/api/new", {"width": 2, "height": 2, "players": TWO_HUMANS})
        self._post("/api/click", {"x": 1, "y": 1})
        self._post("/api/click", {"x": 1, "y": 0})
        d = self._post("/api/click", {"x": 0, "y": 1}).get_json()
        self.assertTrue(d["state"]["terminated"])
        self.assertEqual(d["state"]["winner"], "P1")
        self.assertEqual(d["events"][-1], {"kind": "victory", "payload": "P1"})

        after = self._post("/api/click", {"x": 0, "y": 0}).get_json()
        self.assertFalse(after["accepted"])
        self.assertEqual(after["state"]["turn"], 3)


if __name__ == "__main__":
    unittest.main(verbosity=2)

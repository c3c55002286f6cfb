import json
import os
import tempfile
import unittest

from game import (
    Board,
    Cell,
    GameEngine,
    board_from_json,
    board_to_json,
    computer,
    engine_from_json,
    engine_to_json,
    human,
    load,
    make_computer,
    save,
)


class TestPersistence(unittest.TestCase):
    def _played_engine(self):
        engine = GameEngine([human('Ann', 'red'), make_computer('Bot', 'blue', strategy='random', seed=3)],
                            board=Board(4, 3))
        engine.make_move((3, 2))
        engine.make_move((2, 1))
        engine.make_move((1, 2))
        engine.undo_move()
        return engine

    def test_given_board_when_roundtrip_json_then_equal(self):
        board = Board(4, 3)
        board.eat(2, 1)
        bj = board_to_json(board)
        self.assertEqual(bj["width"], 4)
        self.assertEqual(bj["height"], 3)
        self.assertEqual(len(bj["cells"]), 3)
        self.assertEqual(bj["cells"][0][0], "poisoned")
        self.assertEqual(bj["cells"][1][2], "eaten")
        self.assertEqual(bj["cells"][0][3], "clean")
        self.assertEqual(board_from_json(bj), board)

    def test_given_malformed_board_json_when_decoding_then_value_error(self):
        bad = [
            {"width": 2, "height": 2, "cells": [["clean", "clean"]]},
            {"width": 2, "height": 1, "cells": [["clean", "soggy"]]},
            {"height": 1, "cells": [["clean"]]},
            {"width": 0, "height": 1, "cells": [[]]},
        ]
        for obj in bad:
            with self.assertRaises(ValueError):
                board_from_json(obj)

    def test_given_board_without_single_origin_poison_when_decoding_then_value_error(self):
        no_poison = board_to_json(Board(3, 2))
        no_poison["cells"][0][0] = "clean"
        moved = board_to_json(Board(3, 2))
        moved["cells"][0][0] = "clean"
        moved["cells"][1][2] = "poisoned"
        extra = board_to_json(Board(3, 2))
        extra["cells"][1][1] = "poisoned"
        for obj in (no_poison, moved, extra):
            with self.assertRaises(ValueError):
                board_from_json(obj)

        doc = engine_to_json(self._played_engine())
        doc["history"]["undo"][0]["cells"][0][0] = "eaten"
        with self.assertRaises(ValueError):
            engine_from_json(doc)

    def test_given_engine_when_roundtrip_json_then_state_and_history_preserved(self):
        engine = self._played_engine()
        doc = engine_to_json(engine)
        self.assertEqual(doc["version"], 1)
        self.assertEqual(doc["turn"], 2)
        self.assertEqual(len(doc["history"]["undo"]), 2)
        self.assertEqual(len(doc["history"]["redo"]), 1)
        self.assertEqual(doc["players"][1], {"name": "Bot", "color": "blue", "kind": "computer", "strategy": "random"})

        # Survives a trip through actual JSON text
        back = engine_from_json(json.loads(json.dumps(doc)))
        self.assertEqual(back.board, engine.board)
        self.assertEqual(back.turn, engine.turn)
        self.assertEqual(back.history.undo_stack, engine.history.undo_stack)
        self.assertEqual(back.history.redo_stack, engine.history.redo_stack)
        self.assertTrue(back.players[0].is_interactive)
        self.assertFalse(back.players[1].is_interactive)
        self.assertEqual(back.players[1].strategy, "random")

        back.redo_move()
        self.assertIs(back.board.get_cell(1, 2), Cell.EATEN)
        self.assertEqual(back.turn, 3)

    def test_given_computer_without_strategy_when_saving_then_value_error(self):
        bot = computer('Bot', 'blue', lambda b: b.clean_cells()[0])
        engine = GameEngine([human('Ann', 'red'), bot])
        with self.assertRaises(ValueError):
            engine_to_json(engine)

    def test_given_inconsistent_documents_when_loading_then_value_error(self):
        doc = engine_to_json(self._played_engine())
        cases = []
        d = json.loads(json.dumps(doc))
        d["version"] = 99
        cases.append(d)
        d = json.loads(json.dumps(doc))
        d["turn"] = 1  # fewer turns than undo entries
        cases.append(d)
        d = json.loads(json.dumps(doc))
        d["players"][1]["strategy"] = "telepathy"
        cases.append(d)
        d = json.loads(json.dumps(doc))
        d["players"][1]["kind"] = "ghost"
        cases.append(d)
        d = json.loads(json.dumps(doc))
        d["history"]["undo"][0] = board_to_json(Board(2, 2))
        cases.append(d)
        d = json.loads(json.dumps(doc))
        del d["board"]
        cases.append(d)
        for bad_history in ([1], "undo", 7):
            d = json.loads(json.dumps(doc))
            d["history"] = bad_history
            cases.append(d)
        for case in cases:
            with self.assertRaises(ValueError):
                engine_from_json(case)
        with self.assertRaises(ValueError):
            engine_from_json(["not", "an", "object"])

    def test_given_engine_when_save_and_load_file_then_equivalent(self):
        engine = self._played_engine()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "save.json")
            save(engine, path)
            self.assertTrue(os.path.isfile(path))
            self.assertEqual(os.listdir(os.path.dirname(path)), ["save.json"])
            back = load(path)
        self.assertEqual(back.board, engine.board)
        self.assertEqual(back.turn, engine.turn)
        self.assertEqual([p.name for p in back.players], ["Ann", "Bot"])
        self.assertTrue(back.can_undo())
        self.assertTrue(back.can_redo())

    def test_given_garbage_file_when_load_then_value_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "save.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{not json")
            with self.assertRaises(ValueError):
                load(path)


if __name__ == '__main__':
    unittest.main(verbosity=2)

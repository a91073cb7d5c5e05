import os
import tempfile
import unittest
from datetime import datetime

from fitmate.feedback_store import MemoryStore, SQLiteStore
from fitmate.recommendation_engine import (
    PROGRESS_HISTORY_KEY,
    RecommendationEngine,
    build_progress_entry,
)


class SQLiteStoreTests(unittest.TestCase):
    def test_get_missing_key_returns_none(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SQLiteStore(os.path.join(tmpdir, "fitmate.db"))
            self.assertIsNone(store.get("missing"))
            store.close()

    def test_put_overwrites_and_survives_reopen(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = os.path.join(tmpdir, "nested", "fitmate.db")
            store = SQLiteStore(db_path)
            store.put("history", [{"a": 1}])
            store.put("history", [{"a": 1}, {"a": 2}])
            store.close()

            reopened = SQLiteStore(db_path)
            self.assertEqual(reopened.get("history"), [{"a": 1}, {"a": 2}])
            self.assertEqual(reopened.keys(), ["history"])
            self.assertEqual(reopened.count_summary(), {"history": 2})
            reopened.close()

    def test_malformed_text_raises_value_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SQLiteStore(os.path.join(tmpdir, "fitmate.db"))
            with store.transaction():
                store.put_raw("broken", "[{oops")
            with self.assertRaises(ValueError):
                store.get("broken")
            self.assertEqual(store.count_summary(), {"broken": None})
            store.close()

    def test_unserializable_value_is_not_written(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SQLiteStore(os.path.join(tmpdir, "fitmate.db"))
            with self.assertRaises(TypeError):
                store.put("bad", {"when": datetime(2026, 1, 1)})
            self.assertIsNone(store.get("bad"))
            store.close()

    def test_engine_history_round_trip_across_sessions(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = os.path.join(tmpdir, "fitmate.db")
            entry = build_progress_entry(weight=81.2, date=datetime(2026, 2, 14, 8, 0))

            store = SQLiteStore(db_path)
            RecommendationEngine(store).record_progress(entry)
            store.close()

            store = SQLiteStore(db_path)
            engine = RecommendationEngine(store)
            engine.load_persisted()
            self.assertEqual(engine.progress_history, [entry])
            self.assertEqual(store.get(PROGRESS_HISTORY_KEY)[0]["date"], "2026-02-14T08:00:00")
            store.close()


class MemoryStoreTests(unittest.TestCase):
    def test_values_are_copied_through_json(self):
        store = MemoryStore()
        value = [{"mealId": "Oatmeal"}]
        store.put("meals", value)
        value.append({"mealId": "Salmon Bowl"})

        self.assertEqual(store.get("meals"), [{"mealId": "Oatmeal"}])
        self.assertIsNone(store.get("other"))


if __name__ == "__main__":
    unittest.main()

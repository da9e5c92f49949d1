"""Tests for the Flask JSON API."""

from __future__ import annotations

import os
import sys
import tempfile
import unittest


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from folbridge import web  # noqa: E402


class WebAPITests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = os.path.join(self._tmp.name, "phrases.json")
        web.configure_vocabulary(self.path)
        self.addCleanup(web.configure_vocabulary, None)
        self.client = web.app.test_client()

    def test_english_to_logic(self) -> None:
        response = self.client.post("/api/english-to-logic", json={"text": "every human is mortal"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"ok": True, "result": "∀x ( Human(x) → Mortal(x) )"})

    def test_english_error(self) -> None:
        response = self.client.post("/api/english-to-logic", json={"text": "x loves every y"})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertFalse(body["ok"])
        self.assertIn("x loves every y", body["error"])
        self.assertNotIn("diagnostic", body)

    def test_missing_text(self) -> None:
        response = self.client.post("/api/logic-to-english", json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "request body must be JSON with a 'text' key")

    def test_logic_to_english(self) -> None:
        response = self.client.post("/api/logic-to-english", json={"text": "Human(socrates)"})
        self.assertEqual(response.get_json(), {"ok": True, "result": "Socrates is human."})

    def test_check_reports_diagnostic(self) -> None:
        response = self.client.post("/api/check", json={"text": "P(x) ∧"})
        self.assertEqual(response.status_code, 400)
        diagnostic = response.get_json()["diagnostic"]
        self.assertEqual(diagnostic["line"], 1)
        self.assertEqual(diagnostic["column"], 7)
        self.assertEqual(diagnostic["character_offset"], 6)
        self.assertEqual(diagnostic["actual"], "eof")
        self.assertIn("forall", diagnostic["expected"])

    def test_check_reports_scope(self) -> None:
        response = self.client.post("/api/check", json={"text": "∀x (x < y)"})
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["result"], "∀x ( x < y )")
        self.assertFalse(body["valid"])
        self.assertEqual(body["errors"], ["Unbound variable y"])
        self.assertEqual(body["variables"], ["x"])

    def test_vocabulary_round_trip(self) -> None:
        response = self.client.post("/api/vocabulary", json={"phrase": "being a tomato", "predicate": "Tom"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["overrides"], {"being tomato": "Tom"})
        self.assertTrue(os.path.exists(self.path))

        listing = self.client.get("/api/vocabulary").get_json()
        self.assertEqual(listing["predicates"]["being tomato"], "Tom")

        response = self.client.post(
            "/api/english-to-logic", json={"text": "being a tomato is sufficient for being a fruit"}
        )
        self.assertEqual(response.get_json()["result"], "∀x ( Tom(x) → Fruit(x) )")

    def test_invalid_vocabulary_entry(self) -> None:
        response = self.client.post("/api/vocabulary", json={"phrase": "cow", "predicate": "9Cow"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["ok"])


if __name__ == "__main__":
    unittest.main()

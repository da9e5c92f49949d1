"""Unit tests for the phrase tables and the vocabulary store."""

from __future__ import annotations

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from folbridge.vocabulary import (  # noqa: E402
    Vocabulary,
    VocabularyError,
    VocabularyStore,
    derive_predicate_name,
    phrase_key,
    singular,
)


class PhraseTests(unittest.TestCase):
    def test_phrase_key(self) -> None:
        self.assertEqual(phrase_key("Having a Ticket"), "has ticket")
        self.assertEqual(phrase_key("getting the student id"), "get student id")

    def test_derive_predicate_name(self) -> None:
        self.assertEqual(derive_predicate_name("being divisible by 4"), "DivisibleBy4")
        self.assertEqual(derive_predicate_name("is a red car"), "RedCar")
        self.assertEqual(derive_predicate_name("the moon"), "Moon")
        self.assertEqual(derive_predicate_name("4 legs"), "P4Legs")
        self.assertEqual(derive_predicate_name(""), "P")

    def test_singular(self) -> None:
        words = ("humans", "cities", "boxes", "classes", "bus", "human")
        self.assertEqual([singular(word) for word in words], ["human", "city", "box", "class", "bus", "human"])


class VocabularyTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "phrases.json"

    def test_dictionary_wins_over_derivation(self) -> None:
        vocabulary = Vocabulary.default()
        self.assertEqual(vocabulary.predicate_for("getting a student id"), "StudentID")
        self.assertEqual(vocabulary.predicate_for("a purple cow"), "PurpleCow")

    def test_with_mapping_returns_new_vocabulary(self) -> None:
        original = Vocabulary.default()
        updated = original.with_mapping("a purple cow", "Cow")
        self.assertEqual(updated.predicate_for("purple cow"), "Cow")
        self.assertEqual(original.predicate_for("purple cow"), "PurpleCow")
        self.assertEqual(updated.overrides, {"purple cow": "Cow"})

    def test_noun_predicate_reuses_singular_entry(self) -> None:
        vocabulary = Vocabulary.default()
        self.assertEqual(vocabulary.noun_predicate("humans"), "Human")
        self.assertEqual(vocabulary.noun_predicate("computer programs"), "Program")
        self.assertEqual(vocabulary.noun_predicate("red cars"), "RedCar")

    def test_invalid_mapping(self) -> None:
        with self.assertRaises(VocabularyError):
            Vocabulary.default().with_mapping("cow", "9Cow")
        with self.assertRaises(VocabularyError):
            Vocabulary.default().with_mapping("  ", "Cow")

    def test_missing_file_means_defaults(self) -> None:
        self.assertEqual(Vocabulary.load(self.path).overrides, {})

    def test_save_and_load(self) -> None:
        Vocabulary.default().with_mapping("purple cow", "Cow").save(self.path)
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"purple cow": "Cow"})
        self.assertEqual(Vocabulary.load(self.path).predicate_for("a purple cow"), "Cow")

    def test_invalid_json(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(VocabularyError):
            Vocabulary.load(self.path)

    def test_non_mapping_json(self) -> None:
        self.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(VocabularyError):
            Vocabulary.load(self.path)

    def test_match_domain_prefers_longest(self) -> None:
        vocabulary = Vocabulary.default()
        self.assertEqual(vocabulary.match_domain(["real", "number", "x"]), ("ℝ", 2))
        self.assertEqual(vocabulary.match_domain(["Integers"]), ("ℤ", 1))
        self.assertIsNone(vocabulary.match_domain(["student"]))

    def test_default_and_relation_pattern_are_shared(self) -> None:
        vocabulary = Vocabulary.default()
        self.assertIs(vocabulary, Vocabulary.default())
        self.assertIs(vocabulary.relation_pattern, vocabulary.relation_pattern)
        match = vocabulary.relation_pattern.search("x is greater than or equal to 5")
        self.assertEqual(match.group(0), "is greater than or equal to")

    def test_store_persists_mappings(self) -> None:
        store = VocabularyStore.from_path(self.path)
        store.add_mapping("purple cow", "Cow")
        self.assertEqual(store.current().predicate_for("purple cow"), "Cow")
        self.assertEqual(Vocabulary.load(self.path).overrides, {"purple cow": "Cow"})


if __name__ == "__main__":
    unittest.main()

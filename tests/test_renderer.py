"""Unit tests for rendering ASTs as English."""

from __future__ import annotations

import os
import sys
import unittest


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from folbridge.parser import parse  # noqa: E402
from folbridge.renderer import gerund, predicate_phrase, to_english  # noqa: E402


def render(formula: str) -> str:
    return to_english(parse(formula).ast)


class ToEnglishTests(unittest.TestCase):
    def test_condition_pattern_gets_paraphrases(self) -> None:
        self.assertEqual(
            render("∀x (Tomato(x) → Fruit(x))"),
            "For every x, if x is a tomato, then x is a fruit.\n"
            "(Alternate: Being a tomato is sufficient for being a fruit. "
            "Or: Being a fruit is necessary for being a tomato.)",
        )

    def test_top_level_implication(self) -> None:
        self.assertEqual(
            render("P → Q"),
            "If P, then Q.\n(Alternate: P is sufficient for Q. Or: Q is necessary for P.)",
        )

    def test_top_level_biconditional(self) -> None:
        self.assertEqual(render("P ↔ Q"), "P if and only if Q.\n(Alternate: P is necessary and sufficient for Q.)")

    def test_nested_quantifiers_with_domains(self) -> None:
        self.assertEqual(
            render("∀x∈ℝ ( ∃y∈ℝ ( x < y ) )"),
            "For every real number x, there exists a real number y such that x is less than y.",
        )

    def test_article_follows_domain_name(self) -> None:
        self.assertEqual(render("∃n∈ℤ Even(n)"), "There exists an integer n such that n is even.")

    def test_constants_are_capitalized(self) -> None:
        self.assertEqual(render("Human(socrates)"), "Socrates is human.")
        self.assertEqual(render("Loves(alice, bob)"), "Alice loves Bob.")

    def test_negated_membership(self) -> None:
        self.assertEqual(render("¬(x ∈ ℤ)"), "It is not the case that x is an element of ℤ.")


class PhraseTests(unittest.TestCase):
    def test_predicate_phrases(self) -> None:
        self.assertEqual(predicate_phrase("Student"), "is a student")
        self.assertEqual(predicate_phrase("DivisibleBy4"), "is divisible by 4")
        self.assertEqual(predicate_phrase("HasRedHat"), "has red hat")

    def test_gerunds(self) -> None:
        self.assertEqual(gerund("is a tomato"), "being a tomato")
        self.assertEqual(gerund("has a ticket"), "having a ticket")
        self.assertEqual(gerund("can fly"), "being able to fly")


if __name__ == "__main__":
    unittest.main()

"""Unit tests for the canonical printer and the structure outline."""

from __future__ import annotations

import os
import sys
import unittest


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from folbridge.nodes import (  # noqa: E402
    Binary,
    BinaryOp,
    DomainRef,
    FunctionApp,
    Negation,
    NumberLiteral,
    Paren,
    Predicate,
    Quantifier,
    QuantifierKind,
    RelOp,
    Relation,
    Var,
)
from folbridge.printer import ast_to_tree, expr_to_string, term_to_string  # noqa: E402


class ExprToStringTests(unittest.TestCase):
    def test_quantifier_with_domain(self) -> None:
        expr = Quantifier(
            QuantifierKind.FORALL,
            "x",
            Quantifier(QuantifierKind.EXISTS, "y", Relation(RelOp.LT, Var("x"), Var("y")), DomainRef("ℝ")),
            DomainRef("ℝ"),
        )
        self.assertEqual(expr_to_string(expr), "∀x∈ℝ ( ∃y∈ℝ ( x < y ) )")

    def test_nested_binaries_are_parenthesized(self) -> None:
        expr = Binary(
            BinaryOp.OR,
            Binary(BinaryOp.AND, Predicate("P", (Var("x"),)), Predicate("Q", (Var("x"),))),
            Predicate("R", (Var("x"),)),
        )
        self.assertEqual(expr_to_string(expr), "( P(x) ∧ Q(x) ) ∨ R(x)")

    def test_negation_and_bare_predicate(self) -> None:
        self.assertEqual(expr_to_string(Negation(Predicate.atom("P"))), "¬( P )")

    def test_terms(self) -> None:
        self.assertEqual(term_to_string(FunctionApp("f", (Var("x"), NumberLiteral(2)))), "f(x, 2)")
        self.assertEqual(term_to_string(Paren(NumberLiteral(1.5))), "(1.5)")


class TreeTests(unittest.TestCase):
    def test_outline_indents_children(self) -> None:
        expr = Quantifier(
            QuantifierKind.FORALL,
            "x",
            Binary(BinaryOp.IMPL, Predicate("Human", (Var("x"),)), Negation(Predicate("Mortal", (Var("x"),)))),
            DomainRef("ℕ"),
        )
        expected = "\n".join(
            [
                "∀x ∈ ℕ",
                "  →",
                "    Human(x)",
                "    ¬",
                "      Mortal(x)",
            ]
        )
        self.assertEqual(ast_to_tree(expr), expected)


if __name__ == "__main__":
    unittest.main()

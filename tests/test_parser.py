"""Unit tests for the logic parser and its diagnostics."""

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
    Const,
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
from folbridge.parser import ParseError, character_offset, diagnose, parse  # noqa: E402
from folbridge.printer import expr_to_string  # noqa: E402
from folbridge.tokenizer import TokenType  # noqa: E402


def P(name, *args):
    return Predicate(name, tuple(Var(arg) for arg in args))


class PrecedenceTests(unittest.TestCase):
    def test_and_binds_tighter_than_or(self) -> None:
        ast = parse("P(x) ∧ Q(x) ∨ R(x)").ast
        expected = Binary(BinaryOp.OR, Binary(BinaryOp.AND, P("P", "x"), P("Q", "x")), P("R", "x"))
        self.assertEqual(ast, expected)

    def test_implication_is_left_associative(self) -> None:
        ast = parse("P(x) → Q(x) → R(x)").ast
        expected = Binary(BinaryOp.IMPL, Binary(BinaryOp.IMPL, P("P", "x"), P("Q", "x")), P("R", "x"))
        self.assertEqual(ast, expected)

    def test_iff_is_lowest(self) -> None:
        ast = parse("P(x) → Q(x) ↔ R(x)").ast
        expected = Binary(BinaryOp.IFF, Binary(BinaryOp.IMPL, P("P", "x"), P("Q", "x")), P("R", "x"))
        self.assertEqual(ast, expected)

    def test_negation_binds_tightest(self) -> None:
        ast = parse("¬P(x) ∧ Q(x)").ast
        self.assertEqual(ast, Binary(BinaryOp.AND, Negation(P("P", "x")), P("Q", "x")))

    def test_quantifier_without_parens_takes_one_atom(self) -> None:
        ast = parse("∀x P(x) ∧ Q(x)").ast
        expected = Binary(BinaryOp.AND, Quantifier(QuantifierKind.FORALL, "x", P("P", "x")), P("Q", "x"))
        self.assertEqual(ast, expected)


class AtomTests(unittest.TestCase):
    def test_ascii_and_unicode_are_equivalent(self) -> None:
        self.assertEqual(parse("forall x ( P(x) -> Q(x) )").ast, parse("∀x ( P(x) → Q(x) )").ast)

    def test_quantifier_domain(self) -> None:
        ast = parse("∀x∈ℝ ( ∃y∈ℝ ( x < y ) )").ast
        inner = Quantifier(QuantifierKind.EXISTS, "y", Relation(RelOp.LT, Var("x"), Var("y")), DomainRef("ℝ"))
        self.assertEqual(ast, Quantifier(QuantifierKind.FORALL, "x", inner, DomainRef("ℝ")))

    def test_membership_in_domain_symbol(self) -> None:
        self.assertEqual(parse("x ∈ ℤ").ast, Relation(RelOp.IN, Var("x"), Const("ℤ")))

    def test_function_application_in_relation(self) -> None:
        ast = parse("f(x) < 3").ast
        self.assertEqual(ast, Relation(RelOp.LT, FunctionApp("f", (Var("x"),)), NumberLiteral(3)))

    def test_parenthesized_left_term(self) -> None:
        self.assertEqual(parse("(x) < y").ast, Relation(RelOp.LT, Paren(Var("x")), Var("y")))

    def test_parenthesized_sub_expression(self) -> None:
        ast = parse("(P(x) ∨ Q(x)) ∧ R(x)").ast
        expected = Binary(BinaryOp.AND, Binary(BinaryOp.OR, P("P", "x"), P("Q", "x")), P("R", "x"))
        self.assertEqual(ast, expected)

    def test_constants_and_decimals(self) -> None:
        self.assertEqual(parse("Human(socrates)").ast, Predicate("Human", (Const("socrates"),)))
        self.assertEqual(parse("x ≥ 2.5").ast, Relation(RelOp.GE, Var("x"), NumberLiteral(2.5)))

    def test_bare_identifier_is_predicate_over_itself(self) -> None:
        self.assertEqual(parse("p").ast, Predicate("p", (Const("p"),)))
        self.assertEqual(parse("P → Q").ast, Binary(BinaryOp.IMPL, Predicate.atom("P"), Predicate.atom("Q")))
        self.assertEqual(parse(expr_to_string(parse("¬p ∧ q").ast)).ast, parse("¬p ∧ q").ast)

    def test_tokens_are_returned(self) -> None:
        result = parse("P(x)")
        self.assertEqual(result.tokens[-1].type, TokenType.EOF)


class RoundTripTests(unittest.TestCase):
    FORMULAS = [
        "∀x∈ℝ ( ∃y∈ℝ ( x < y ) )",
        "P(x) ∧ Q(x) ∨ R(x)",
        "P(x) ∧ (Q(x) ∨ R(x))",
        "P(x) → (Q(x) → R(x))",
        "¬(P(x) ∧ Q(x))",
        "∀x ( Human(x) → Mortal(x) )",
        "∃x ( Student(x) ∧ ¬Teacher(x) )",
        "f(x, 2) ≤ g(y)",
        "(x) ≠ 3.5",
        "∀x (Loves(x, bob) ↔ x ∉ ℕ)",
        "P ∨ ¬Q",
    ]

    def test_print_then_parse_is_identity(self) -> None:
        for formula in self.FORMULAS:
            with self.subTest(formula=formula):
                ast = parse(formula).ast
                self.assertEqual(parse(expr_to_string(ast)).ast, ast)

    def test_canonical_text(self) -> None:
        ast = parse("forall x (P(x) -> Q(x))").ast
        self.assertEqual(expr_to_string(ast), "∀x ( P(x) → Q(x) )")


class ErrorTests(unittest.TestCase):
    def test_missing_variable_reports_expected_type(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("∀(P(x))")
        error = ctx.exception
        self.assertEqual(error.expected, (TokenType.VAR,))
        self.assertEqual(error.actual, TokenType.LPAREN)
        self.assertEqual((error.line, error.column), (1, 2))

    def test_unexpected_end_lists_atom_starts(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("P(x) ∧")
        self.assertEqual(ctx.exception.actual, TokenType.EOF)
        self.assertIn(TokenType.FORALL, ctx.exception.expected)
        self.assertIn(TokenType.LPAREN, ctx.exception.expected)

    def test_trailing_atom_lists_binary_operators(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("P(x) Q(x)")
        self.assertEqual(
            set(ctx.exception.expected),
            {TokenType.EOF, TokenType.IFF, TokenType.IMPL, TokenType.OR, TokenType.AND},
        )

    def test_unclosed_parenthesis(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("(P(x) ∧ Q(x)")
        self.assertIn(TokenType.RPAREN, ctx.exception.expected)


class DiagnosticTests(unittest.TestCase):
    def test_valid_input_has_no_diagnostic(self) -> None:
        self.assertIsNone(diagnose("∀x ( P(x) )"))

    def test_diagnostic_offset_points_at_offending_character(self) -> None:
        text = "P(x) ∧\n  ) "
        diagnostic = diagnose(text)
        self.assertIsNotNone(diagnostic)
        self.assertEqual((diagnostic.line, diagnostic.column), (2, 3))
        self.assertEqual(text[diagnostic.character_offset], ")")
        self.assertEqual(diagnostic.actual, TokenType.RPAREN)

    def test_tokenizer_errors_are_diagnosed(self) -> None:
        diagnostic = diagnose("P(x) $")
        self.assertIsNotNone(diagnostic)
        self.assertEqual(diagnostic.character_offset, 5)
        self.assertIn("$", diagnostic.message)

    def test_character_offset(self) -> None:
        self.assertEqual(character_offset("ab\ncd", 2, 2), 4)
        self.assertEqual(character_offset("abc", 1, 1), 0)


if __name__ == "__main__":
    unittest.main()

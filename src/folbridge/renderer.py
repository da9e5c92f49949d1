"""Utilities for rendering logic ASTs as English prose."""

from __future__ import annotations

import re
from typing import List, Optional

from .nodes import (
    Binary,
    BinaryOp,
    Const,
    Expr,
    FunctionApp,
    Negation,
    NumberLiteral,
    Paren,
    Predicate,
    Quantifier,
    QuantifierKind,
    RelOp,
    Relation,
    Term,
    Var,
    unknown_node,
)

PREDICATE_PHRASES = {
    "Human": "is human",
    "Mortal": "is mortal",
    "Student": "is a student",
    "Teacher": "is a teacher",
    "Philosopher": "is a philosopher",
    "Wise": "is wise",
    "Happy": "is happy",
    "Bird": "is a bird",
    "CanFly": "can fly",
    "Loves": "loves",
    "Teaches": "teaches",
    "Knows": "knows",
    "Likes": "likes",
    "ParentOf": "is the parent of",
    "FriendOf": "is a friend of",
    "Tomato": "is a tomato",
    "Fruit": "is a fruit",
    "Citizen": "is a citizen",
    "Vote": "can vote",
    "HasTicket": "has a ticket",
    "EnterConcert": "can enter the concert",
    "StudentID": "has a student ID",
    "UATXStudent": "is a UATX student",
    "Program": "is a program",
    "Bug": "is a bug",
    "Executable": "is executable",
    "Even": "is even",
}

DOMAIN_NAMES = {
    "ℝ": "real number",
    "ℤ": "integer",
    "ℚ": "rational number",
    "ℕ": "natural number",
    "ℂ": "complex number",
}

RELATION_WORDS = {
    RelOp.LT: "is less than",
    RelOp.LE: "is less than or equal to",
    RelOp.GT: "is greater than",
    RelOp.GE: "is greater than or equal to",
    RelOp.EQ: "equals",
    RelOp.NE: "is not equal to",
    RelOp.IN: "is an element of",
    RelOp.NOT_IN: "is not an element of",
}

_NAME_PARTS = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")
_VERB_PREFIXES = ("has", "can", "does")


def predicate_phrase(name: str) -> str:
    """Verb phrase for a predicate name, e.g. ``DivisibleBy4`` -> ``is divisible by 4``."""
    known = PREDICATE_PHRASES.get(name)
    if known is not None:
        return known
    words = [part.lower() for part in _NAME_PARTS.findall(name)]
    if not words:
        return f"satisfies {name}"
    if words[0] in _VERB_PREFIXES or words[0] == "is":
        return " ".join(words)
    return "is " + " ".join(words)


def gerund(phrase: str) -> str:
    """``is a tomato`` -> ``being a tomato``; used by the sufficiency paraphrases."""
    head, _, rest = phrase.partition(" ")
    if head == "is":
        return f"being {rest}"
    if head == "has":
        return f"having {rest}"
    if head == "can":
        return f"being able to {rest}"
    return phrase


def _article(noun: str) -> str:
    return "an" if noun[:1].lower() in "aeiou" else "a"


def _finalize_sentence(text: str) -> str:
    text = text.strip()
    if not text:
        return text
    if not text[0].isupper():
        text = text[0].upper() + text[1:]
    if not text.endswith("."):
        text += "."
    return text


class EnglishRenderer:
    """Renders an AST as an English sentence.

    Implications and biconditionals at the top of the formula get an extra
    line with the equivalent sufficiency/necessity phrasing.
    """

    def render(self, expr: Expr) -> str:
        condition = self._condition_sentence(expr)
        if condition is not None:
            return condition

        primary = _finalize_sentence(self._render(expr))
        if isinstance(expr, Binary) and expr.op is BinaryOp.IMPL:
            left, right = self._render(expr.left), self._render(expr.right)
            return self._with_alternates(
                primary,
                f"{left} is sufficient for {right}",
                f"{right} is necessary for {left}",
            )
        if isinstance(expr, Binary) and expr.op is BinaryOp.IFF:
            left, right = self._render(expr.left), self._render(expr.right)
            return self._with_alternates(primary, f"{left} is necessary and sufficient for {right}")
        return primary

    def _condition_sentence(self, expr: Expr) -> Optional[str]:
        # ∀x (A(x) → B(x)) and ∀x (A(x) ↔ B(x)) over plain unary properties.
        if not (
            isinstance(expr, Quantifier)
            and expr.q is QuantifierKind.FORALL
            and isinstance(expr.body, Binary)
            and expr.body.op in (BinaryOp.IMPL, BinaryOp.IFF)
        ):
            return None
        left, right = expr.body.left, expr.body.right
        subject = (Var(expr.var),)
        if not (
            isinstance(left, Predicate)
            and isinstance(right, Predicate)
            and left.args == subject
            and right.args == subject
        ):
            return None

        left_phrase, right_phrase = predicate_phrase(left.name), predicate_phrase(right.name)
        head = f"for every {self._binder(expr)}"
        if expr.body.op is BinaryOp.IFF:
            primary = f"{head}, {expr.var} {left_phrase} if and only if {expr.var} {right_phrase}"
            return self._with_alternates(
                _finalize_sentence(primary),
                f"{gerund(left_phrase)} is necessary and sufficient for {gerund(right_phrase)}",
            )
        primary = f"{head}, if {expr.var} {left_phrase}, then {expr.var} {right_phrase}"
        return self._with_alternates(
            _finalize_sentence(primary),
            f"{gerund(left_phrase)} is sufficient for {gerund(right_phrase)}",
            f"{gerund(right_phrase)} is necessary for {gerund(left_phrase)}",
        )

    @staticmethod
    def _with_alternates(primary: str, first: str, second: Optional[str] = None) -> str:
        alternate = f"(Alternate: {_finalize_sentence(first)}"
        if second is not None:
            alternate += f" Or: {_finalize_sentence(second)}"
        return f"{primary}\n{alternate})"

    def _render(self, expr: Expr) -> str:
        if isinstance(expr, Quantifier):
            body = self._render(expr.body)
            if expr.q is QuantifierKind.FORALL:
                return f"for every {self._binder(expr)}, {body}"
            return f"there exists {self._binder(expr, with_article=True)} such that {body}"
        if isinstance(expr, Negation):
            return f"it is not the case that {self._render(expr.body)}"
        if isinstance(expr, Binary):
            left, right = self._render(expr.left), self._render(expr.right)
            if expr.op is BinaryOp.AND:
                return f"{left} and {right}"
            if expr.op is BinaryOp.OR:
                return f"{left} or {right}"
            if expr.op is BinaryOp.IMPL:
                return f"if {left}, then {right}"
            return f"{left} if and only if {right}"
        if isinstance(expr, Predicate):
            return self._render_predicate(expr)
        if isinstance(expr, Relation):
            return f"{self._format_term(expr.left)} {RELATION_WORDS[expr.op]} {self._format_term(expr.right)}"
        unknown_node(expr)

    @staticmethod
    def _binder(expr: Quantifier, with_article: bool = False) -> str:
        if expr.domain is None:
            return expr.var
        name = DOMAIN_NAMES.get(expr.domain.name)
        if name is None:
            return f"{expr.var} in {expr.domain.name}"
        if with_article:
            return f"{_article(name)} {name} {expr.var}"
        return f"{name} {expr.var}"

    def _render_predicate(self, expr: Predicate) -> str:
        if expr.is_atom or not expr.args:
            return expr.name
        phrase = predicate_phrase(expr.name)
        subject = self._format_term(expr.args[0])
        if len(expr.args) == 1:
            return f"{subject} {phrase}"
        if len(expr.args) == 2:
            return f"{subject} {phrase} {self._format_term(expr.args[1])}"
        rest: List[str] = [self._format_term(arg) for arg in expr.args]
        return f"{expr.name} holds for {', '.join(rest[:-1])} and {rest[-1]}"

    def _format_term(self, term: Term) -> str:
        if isinstance(term, Var):
            return term.name
        if isinstance(term, Const):
            return self._format_constant(term.name)
        if isinstance(term, NumberLiteral):
            return str(term.value)
        if isinstance(term, FunctionApp):
            return f"{term.name}({', '.join(self._format_term(arg) for arg in term.args)})"
        if isinstance(term, Paren):
            return f"({self._format_term(term.inner)})"
        unknown_node(term)

    @staticmethod
    def _format_constant(name: str) -> str:
        if name.islower():
            return name.capitalize()
        return name


def to_english(expr: Expr) -> str:
    """High-level helper for rendering an AST as English."""
    return EnglishRenderer().render(expr)


__all__ = ["DOMAIN_NAMES", "EnglishRenderer", "PREDICATE_PHRASES", "gerund", "predicate_phrase", "to_english"]

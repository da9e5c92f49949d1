"""Variable-scope checking for logic ASTs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Set, Tuple

from .nodes import (
    Binary,
    Const,
    Expr,
    FunctionApp,
    Negation,
    NumberLiteral,
    Paren,
    Predicate,
    Quantifier,
    Relation,
    Term,
    Var,
    unknown_node,
)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: Tuple[str, ...] = ()
    in_scope_variables: FrozenSet[str] = field(default_factory=frozenset)


class ScopeValidator:
    """Walks an AST and reports every unbound variable occurrence."""

    def __init__(self) -> None:
        self._errors: List[str] = []
        self._bound: Set[str] = set()

    def validate(self, expr: Expr) -> ValidationResult:
        self._errors = []
        self._bound = set()
        self._walk(expr, frozenset())
        return ValidationResult(not self._errors, tuple(self._errors), frozenset(self._bound))

    def _walk(self, expr: Expr, scope: FrozenSet[str]) -> None:
        if isinstance(expr, Quantifier):
            self._bound.add(expr.var)
            self._walk(expr.body, scope | {expr.var})
        elif isinstance(expr, Negation):
            self._walk(expr.body, scope)
        elif isinstance(expr, Binary):
            self._walk(expr.left, scope)
            self._walk(expr.right, scope)
        elif isinstance(expr, Relation):
            self._check_term(expr.left, scope)
            self._check_term(expr.right, scope)
        elif isinstance(expr, Predicate):
            for arg in expr.args:
                self._check_term(arg, scope)
        else:
            unknown_node(expr)

    def _check_term(self, term: Term, scope: FrozenSet[str]) -> None:
        if isinstance(term, Var):
            if term.name not in scope:
                self._errors.append(f"Unbound variable {term.name}")
        elif isinstance(term, (Const, NumberLiteral)):
            return
        elif isinstance(term, FunctionApp):
            for arg in term.args:
                self._check_term(arg, scope)
        elif isinstance(term, Paren):
            self._check_term(term.inner, scope)
        else:
            unknown_node(term)


def validate(expr: Expr) -> ValidationResult:
    """Check that every variable occurrence in *expr* is bound by a quantifier."""
    return ScopeValidator().validate(expr)


__all__ = ["ScopeValidator", "ValidationResult", "validate"]

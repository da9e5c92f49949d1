"""Serialize ASTs back to canonical logic text or an indented outline."""

from __future__ import annotations

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


def expr_to_string(expr: Expr) -> str:
    """Canonical logic text for *expr*; re-parsing it yields the same AST.

    Binary operands are parenthesized only when they are binary or quantified
    themselves, not on both sides unconditionally, so the sufficiency form
    prints as ``∀x ( Tomato(x) → Fruit(x) )``. A predicate applied to itself
    prints as its bare name.
    """
    if isinstance(expr, Quantifier):
        domain = f"∈{expr.domain.name}" if expr.domain is not None else ""
        return f"{expr.q.symbol}{expr.var}{domain} ( {expr_to_string(expr.body)} )"
    if isinstance(expr, Negation):
        return f"¬( {expr_to_string(expr.body)} )"
    if isinstance(expr, Binary):
        return f"{_operand(expr.left)} {expr.op.symbol} {_operand(expr.right)}"
    if isinstance(expr, Predicate):
        if expr.is_atom or not expr.args:
            return expr.name
        return f"{expr.name}({_join_terms(expr.args)})"
    if isinstance(expr, Relation):
        return f"{term_to_string(expr.left)} {expr.op.value} {term_to_string(expr.right)}"
    unknown_node(expr)


def _operand(expr: Expr) -> str:
    # Atoms and negations print bare; nested binaries and quantifiers are wrapped.
    if isinstance(expr, (Binary, Quantifier)):
        return f"( {expr_to_string(expr)} )"
    return expr_to_string(expr)


def term_to_string(term: Term) -> str:
    if isinstance(term, (Var, Const)):
        return term.name
    if isinstance(term, NumberLiteral):
        return str(term.value)
    if isinstance(term, FunctionApp):
        return f"{term.name}({_join_terms(term.args)})"
    if isinstance(term, Paren):
        return f"({term_to_string(term.inner)})"
    unknown_node(term)


def _join_terms(terms) -> str:
    return ", ".join(term_to_string(term) for term in terms)


def ast_to_tree(expr: Expr, indent: int = 0) -> str:
    """Indented structure outline, one node per line."""
    pad = "  " * indent
    if isinstance(expr, Quantifier):
        domain = f" ∈ {expr.domain.name}" if expr.domain is not None else ""
        return f"{pad}{expr.q.symbol}{expr.var}{domain}\n{ast_to_tree(expr.body, indent + 1)}"
    if isinstance(expr, Negation):
        return f"{pad}¬\n{ast_to_tree(expr.body, indent + 1)}"
    if isinstance(expr, Binary):
        return "\n".join(
            [
                f"{pad}{expr.op.symbol}",
                ast_to_tree(expr.left, indent + 1),
                ast_to_tree(expr.right, indent + 1),
            ]
        )
    if isinstance(expr, (Predicate, Relation)):
        return pad + expr_to_string(expr)
    unknown_node(expr)


__all__ = ["ast_to_tree", "expr_to_string", "term_to_string"]

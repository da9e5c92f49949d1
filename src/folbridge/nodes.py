"""AST node types shared by the logic parser and the English pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NoReturn, Optional, Tuple, Union


class QuantifierKind(str, Enum):
    FORALL = "forall"
    EXISTS = "exists"

    @property
    def symbol(self) -> str:
        return "∀" if self is QuantifierKind.FORALL else "∃"


class BinaryOp(str, Enum):
    AND = "and"
    OR = "or"
    IMPL = "impl"
    IFF = "iff"

    @property
    def symbol(self) -> str:
        return _BINARY_SYMBOLS[self]


class RelOp(str, Enum):
    LT = "<"
    LE = "≤"
    GT = ">"
    GE = "≥"
    EQ = "="
    NE = "≠"
    IN = "∈"
    NOT_IN = "∉"

    @property
    def is_membership(self) -> bool:
        return self in (RelOp.IN, RelOp.NOT_IN)


_BINARY_SYMBOLS = {
    BinaryOp.AND: "∧",
    BinaryOp.OR: "∨",
    BinaryOp.IMPL: "→",
    BinaryOp.IFF: "↔",
}

DOMAIN_SYMBOLS = ("ℝ", "ℤ", "ℚ", "ℕ", "ℂ")


# Terms


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class NumberLiteral:
    value: Union[int, float]


@dataclass(frozen=True)
class Const:
    name: str


@dataclass(frozen=True)
class FunctionApp:
    name: str
    args: Tuple["Term", ...]


@dataclass(frozen=True)
class Paren:
    inner: "Term"


Term = Union[Var, NumberLiteral, Const, FunctionApp, Paren]


@dataclass(frozen=True)
class DomainRef:
    name: str


# Expressions


@dataclass(frozen=True)
class Quantifier:
    q: QuantifierKind
    var: str
    body: "Expr"
    domain: Optional[DomainRef] = None


@dataclass(frozen=True)
class Predicate:
    """``name(args...)``.

    A bare identifier such as ``p`` is the predicate applied to itself,
    ``Predicate("p", (Const("p"),))``; see :meth:`atom`.
    """

    name: str
    args: Tuple[Term, ...]

    @classmethod
    def atom(cls, name: str) -> "Predicate":
        return cls(name, (Const(name),))

    @property
    def is_atom(self) -> bool:
        return self.args == (Const(self.name),)


@dataclass(frozen=True)
class Relation:
    op: RelOp
    left: Term
    right: Term


@dataclass(frozen=True)
class Negation:
    body: "Expr"


@dataclass(frozen=True)
class Binary:
    op: BinaryOp
    left: "Expr"
    right: "Expr"


Expr = Union[Quantifier, Predicate, Relation, Negation, Binary]


def unknown_node(node: object) -> NoReturn:
    """Fail loudly when a consumer meets a node kind it does not handle."""
    raise TypeError(f"unknown AST node: {node!r}")


def number_from_text(text: str) -> Union[int, float]:
    if "." in text:
        return float(text)
    return int(text)


def contains_quantifier(expr: Expr) -> bool:
    if isinstance(expr, Quantifier):
        return True
    if isinstance(expr, Negation):
        return contains_quantifier(expr.body)
    if isinstance(expr, Binary):
        return contains_quantifier(expr.left) or contains_quantifier(expr.right)
    if isinstance(expr, (Predicate, Relation)):
        return False
    unknown_node(expr)


__all__ = [
    "Binary",
    "BinaryOp",
    "Const",
    "DOMAIN_SYMBOLS",
    "DomainRef",
    "Expr",
    "FunctionApp",
    "Negation",
    "NumberLiteral",
    "Paren",
    "Predicate",
    "Quantifier",
    "QuantifierKind",
    "RelOp",
    "Relation",
    "Term",
    "Var",
    "contains_quantifier",
    "number_from_text",
    "unknown_node",
]

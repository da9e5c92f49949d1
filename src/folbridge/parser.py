"""Recursive-descent parser for first-order logic formulas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .nodes import (
    Binary,
    BinaryOp,
    Const,
    DomainRef,
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
    number_from_text,
)
from .tokenizer import Token, TokenType, TokenizerError, tokenize


class ParseError(ValueError):
    """Raised when the token stream does not match the logic grammar."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        expected: Optional[Sequence[TokenType]] = None,
        actual: Optional[TokenType] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.expected: Optional[Tuple[TokenType, ...]] = tuple(expected) if expected else None
        self.actual = actual


@dataclass(frozen=True)
class ParseResult:
    ast: Expr
    tokens: List[Token]


@dataclass(frozen=True)
class Diagnostic:
    """First lexical or syntax error of an input, ready for highlighting."""

    message: str
    line: int
    column: int
    character_offset: int
    expected: Optional[Tuple[TokenType, ...]] = None
    actual: Optional[TokenType] = None


_RELATION_TOKENS = {
    TokenType.LT: RelOp.LT,
    TokenType.LE: RelOp.LE,
    TokenType.GT: RelOp.GT,
    TokenType.GE: RelOp.GE,
    TokenType.EQ: RelOp.EQ,
    TokenType.NE: RelOp.NE,
    TokenType.MEMBER: RelOp.IN,
    TokenType.NOT_MEMBER: RelOp.NOT_IN,
}

# (operator token, node operator) from lowest to highest precedence.
_BINARY_LEVELS = (
    (TokenType.IFF, BinaryOp.IFF),
    (TokenType.IMPL, BinaryOp.IMPL),
    (TokenType.OR, BinaryOp.OR),
    (TokenType.AND, BinaryOp.AND),
)

_ATOM_START = (
    TokenType.FORALL,
    TokenType.EXISTS,
    TokenType.NOT,
    TokenType.VAR,
    TokenType.IDENT,
    TokenType.NUM,
    TokenType.LPAREN,
)
_TERM_START = (TokenType.VAR, TokenType.IDENT, TokenType.NUM, TokenType.LPAREN)
_RELATION_EXPECTED = tuple(_RELATION_TOKENS)


class LogicParser:
    def __init__(self, tokens: Sequence[Token]):
        self._tokens: List[Token] = list(tokens)
        if not self._tokens or self._tokens[-1].type is not TokenType.EOF:
            line, column = (self._tokens[-1].line, self._tokens[-1].column) if self._tokens else (1, 1)
            self._tokens.append(Token(TokenType.EOF, "", line, column))
        self._position = 0

    @classmethod
    def from_text(cls, text: str) -> "LogicParser":
        return cls(tokenize(text))

    @property
    def _current(self) -> Token:
        return self._tokens[self._position]

    def parse(self) -> Expr:
        expr = self._parse_expr()
        self._consume(TokenType.EOF, _BINARY_OPERATOR_TOKENS)
        return expr

    def _parse_expr(self) -> Expr:
        return self._parse_binary(0)

    def _parse_binary(self, level: int) -> Expr:
        if level == len(_BINARY_LEVELS):
            return self._parse_not()
        token_type, op = _BINARY_LEVELS[level]
        left = self._parse_binary(level + 1)
        while self._at(token_type):
            self._advance()
            right = self._parse_binary(level + 1)
            left = Binary(op, left, right)
        return left

    def _parse_not(self) -> Expr:
        if self._at(TokenType.NOT):
            self._advance()
            return Negation(self._parse_not())
        return self._parse_atom()

    def _parse_atom(self) -> Expr:
        if self._at(TokenType.FORALL) or self._at(TokenType.EXISTS):
            return self._parse_quantifier()

        if self._at(TokenType.LPAREN):
            relation = self._try_parenthesized_relation()
            if relation is not None:
                return relation
            self._advance()
            expr = self._parse_expr()
            self._consume(TokenType.RPAREN, _BINARY_OPERATOR_TOKENS)
            return expr

        if self._at(TokenType.NUM):
            left = self._parse_term()
            return self._parse_relation_rest(left)

        if self._at(TokenType.VAR) or self._at(TokenType.IDENT):
            name_token = self._advance()
            if self._at(TokenType.LPAREN):
                args = self._parse_arguments()
                if self._relation_operator() is not None:
                    return self._parse_relation_rest(FunctionApp(name_token.value, args))
                return Predicate(name_token.value, args)
            if self._relation_operator() is not None:
                return self._parse_relation_rest(self._name_term(name_token))
            return Predicate.atom(name_token.value)

        raise self._error(f"Unexpected token: {self._current.type.value}", _ATOM_START)

    def _parse_quantifier(self) -> Quantifier:
        kind = QuantifierKind.FORALL if self._at(TokenType.FORALL) else QuantifierKind.EXISTS
        self._advance()
        variable = self._consume(TokenType.VAR).value

        domain: Optional[DomainRef] = None
        if self._at(TokenType.MEMBER):
            self._advance()
            if not (self._at(TokenType.DOMAIN) or self._at(TokenType.IDENT) or self._at(TokenType.VAR)):
                raise self._error(
                    "Expected domain symbol after ∈",
                    (TokenType.DOMAIN, TokenType.IDENT, TokenType.VAR),
                )
            domain = DomainRef(self._advance().value)

        if self._at(TokenType.LPAREN):
            self._advance()
            body = self._parse_expr()
            self._consume(TokenType.RPAREN, _BINARY_OPERATOR_TOKENS)
        else:
            body = self._parse_atom()
        return Quantifier(kind, variable, body, domain)

    def _try_parenthesized_relation(self) -> Optional[Relation]:
        start = self._position
        try:
            left = self._parse_term()
        except ParseError:
            self._position = start
            return None
        if self._relation_operator() is None:
            self._position = start
            return None
        return self._parse_relation_rest(left)

    def _parse_relation_rest(self, left: Term) -> Relation:
        op = self._relation_operator()
        if op is None:
            raise self._error("Expected a relation operator", _RELATION_EXPECTED)
        self._advance()
        if op.is_membership and self._at(TokenType.DOMAIN):
            return Relation(op, left, Const(self._advance().value))
        return Relation(op, left, self._parse_term())

    def _relation_operator(self) -> Optional[RelOp]:
        return _RELATION_TOKENS.get(self._current.type)

    def _parse_term(self) -> Term:
        if self._at(TokenType.NUM):
            return NumberLiteral(number_from_text(self._advance().value))
        if self._at(TokenType.LPAREN):
            self._advance()
            inner = self._parse_term()
            self._consume(TokenType.RPAREN)
            return Paren(inner)
        if self._at(TokenType.VAR) or self._at(TokenType.IDENT):
            name_token = self._advance()
            if self._at(TokenType.LPAREN):
                return FunctionApp(name_token.value, self._parse_arguments())
            return self._name_term(name_token)
        raise self._error(f"Expected term, got {self._current.type.value}", _TERM_START)

    def _parse_arguments(self) -> Tuple[Term, ...]:
        self._consume(TokenType.LPAREN)
        args = [self._parse_term()]
        while self._at(TokenType.COMMA):
            self._advance()
            args.append(self._parse_term())
        self._consume(TokenType.RPAREN, (TokenType.COMMA,))
        return tuple(args)

    @staticmethod
    def _name_term(token: Token) -> Term:
        if token.type is TokenType.VAR:
            return Var(token.value)
        return Const(token.value)

    def _at(self, token_type: TokenType) -> bool:
        return self._current.type is token_type

    def _advance(self) -> Token:
        token = self._current
        if token.type is not TokenType.EOF:
            self._position += 1
        return token

    def _consume(self, expected: TokenType, alternatives: Sequence[TokenType] = ()) -> Token:
        if not self._at(expected):
            accepted = (expected, *alternatives)
            raise self._error(
                f"Expected {format_expected(accepted)}, got {self._current.type.value}",
                accepted,
            )
        return self._advance()

    def _error(self, message: str, expected: Sequence[TokenType]) -> ParseError:
        token = self._current
        return ParseError(message, token.line, token.column, expected, token.type)


_BINARY_OPERATOR_TOKENS = tuple(token_type for token_type, _ in _BINARY_LEVELS)


def format_expected(types: Sequence[TokenType]) -> str:
    names = [token_type.value for token_type in types]
    if not names:
        return "nothing"
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} or {names[1]}"
    return f"{', '.join(names[:-1])}, or {names[-1]}"


def parse(text: str) -> ParseResult:
    """Tokenize and parse *text*; raises ``TokenizerError`` or ``ParseError``."""
    tokens = tokenize(text)
    ast = LogicParser(tokens).parse()
    return ParseResult(ast, tokens)


def character_offset(text: str, line: int, column: int) -> int:
    """Translate a 1-based line/column pair into an index into *text*."""
    current_line = 1
    current_column = 1
    index = 0
    while index < len(text) and (current_line < line or (current_line == line and current_column < column)):
        if text[index] == "\n":
            current_line += 1
            current_column = 1
        else:
            current_column += 1
        index += 1
    return index


def diagnose(text: str) -> Optional[Diagnostic]:
    """Return the first tokenizer or parser error of *text*, or ``None``."""
    try:
        parse(text)
    except ParseError as exc:
        return Diagnostic(
            exc.message,
            exc.line,
            exc.column,
            character_offset(text, exc.line, exc.column),
            exc.expected,
            exc.actual,
        )
    except TokenizerError as exc:
        return Diagnostic(exc.message, exc.line, exc.column, character_offset(text, exc.line, exc.column))
    return None


__all__ = [
    "Diagnostic",
    "LogicParser",
    "ParseError",
    "ParseResult",
    "character_offset",
    "diagnose",
    "format_expected",
    "parse",
]

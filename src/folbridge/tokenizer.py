"""Tokenizer for formal first-order logic (Unicode with ASCII fallbacks)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

from .nodes import DOMAIN_SYMBOLS


class TokenType(str, Enum):
    FORALL = "forall"
    EXISTS = "exists"
    NOT = "not"
    AND = "and"
    OR = "or"
    IMPL = "impl"
    IFF = "iff"
    LPAREN = "lparen"
    RPAREN = "rparen"
    COMMA = "comma"
    VAR = "var"
    IDENT = "ident"
    DOMAIN = "domain"
    MEMBER = "member"
    NOT_MEMBER = "notmember"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    EQ = "eq"
    NE = "ne"
    NUM = "num"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int


class TokenizerError(ValueError):
    """Raised on the first character that does not start any token."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at line {line}, column {column}")
        self.message = message
        self.line = line
        self.column = column


# operator spelling -> (token type, canonical value)
OPERATORS = {
    "∀": (TokenType.FORALL, "∀"),
    "forall": (TokenType.FORALL, "∀"),
    "∃": (TokenType.EXISTS, "∃"),
    "exists": (TokenType.EXISTS, "∃"),
    "¬": (TokenType.NOT, "¬"),
    "!": (TokenType.NOT, "¬"),
    "~": (TokenType.NOT, "¬"),
    "∧": (TokenType.AND, "∧"),
    "&": (TokenType.AND, "∧"),
    "∨": (TokenType.OR, "∨"),
    "|": (TokenType.OR, "∨"),
    "→": (TokenType.IMPL, "→"),
    "->": (TokenType.IMPL, "→"),
    "↔": (TokenType.IFF, "↔"),
    "<->": (TokenType.IFF, "↔"),
    "(": (TokenType.LPAREN, "("),
    ")": (TokenType.RPAREN, ")"),
    ",": (TokenType.COMMA, ","),
    "∈": (TokenType.MEMBER, "∈"),
    "∉": (TokenType.NOT_MEMBER, "∉"),
    "<": (TokenType.LT, "<"),
    "≤": (TokenType.LE, "≤"),
    "<=": (TokenType.LE, "≤"),
    ">": (TokenType.GT, ">"),
    "≥": (TokenType.GE, "≥"),
    ">=": (TokenType.GE, "≥"),
    "=": (TokenType.EQ, "="),
    "≠": (TokenType.NE, "≠"),
    "!=": (TokenType.NE, "≠"),
}
OPERATORS.update({symbol: (TokenType.DOMAIN, symbol) for symbol in DOMAIN_SYMBOLS})

# Longest spelling first so ``<->`` never splits into ``<`` and ``->``.
_OPERATOR_SPELLINGS = sorted(OPERATORS, key=len, reverse=True)

_VARIABLE_PATTERN = re.compile(r"^[A-Za-z]\d*$")


def is_variable_name(name: str) -> bool:
    return bool(_VARIABLE_PATTERN.match(name)) or name in {"x", "y", "z"}


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


class Tokenizer:
    """Converts a logic formula into a flat token stream with positions."""

    def __init__(self, text: str):
        self._text = text
        self._position = 0
        self._line = 1
        self._column = 1
        self._tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        while self._position < len(self._text):
            self._skip_whitespace()
            if self._position >= len(self._text):
                break

            if self._match_operator():
                continue

            char = self._text[self._position]
            if _is_digit(char):
                self._consume_number()
                continue
            if char.isascii() and (char.isalpha() or char == "_"):
                self._consume_identifier()
                continue

            raise TokenizerError(f"Unexpected character: {char!r}", self._line, self._column)

        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column))
        return list(self._tokens)

    def _match_operator(self) -> bool:
        for spelling in _OPERATOR_SPELLINGS:
            if not self._text.startswith(spelling, self._position):
                continue
            end = self._position + len(spelling)
            if spelling.isalpha() and end < len(self._text) and _is_identifier_char(self._text[end]):
                continue
            token_type, value = OPERATORS[spelling]
            self._emit(token_type, value, len(spelling))
            return True
        return False

    def _consume_number(self) -> None:
        end = self._position
        while end < len(self._text) and _is_digit(self._text[end]):
            end += 1
        if end + 1 < len(self._text) and self._text[end] == "." and _is_digit(self._text[end + 1]):
            end += 1
            while end < len(self._text) and _is_digit(self._text[end]):
                end += 1
        self._emit(TokenType.NUM, self._text[self._position:end], end - self._position)

    def _consume_identifier(self) -> None:
        end = self._position
        while end < len(self._text) and _is_identifier_char(self._text[end]):
            end += 1
        word = self._text[self._position:end]
        token_type = TokenType.VAR if is_variable_name(word) else TokenType.IDENT
        self._emit(token_type, word, end - self._position)

    def _emit(self, token_type: TokenType, value: str, length: int) -> None:
        self._tokens.append(Token(token_type, value, self._line, self._column))
        self._advance(length)

    def _advance(self, count: int) -> None:
        for _ in range(count):
            if self._text[self._position] == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
            self._position += 1

    def _skip_whitespace(self) -> None:
        while self._position < len(self._text) and self._text[self._position].isspace():
            self._advance(1)


def tokenize(text: str) -> List[Token]:
    """Convenience wrapper returning the token list for *text*."""
    return Tokenizer(text).tokenize()


__all__ = [
    "OPERATORS",
    "Token",
    "TokenType",
    "Tokenizer",
    "TokenizerError",
    "is_variable_name",
    "tokenize",
]

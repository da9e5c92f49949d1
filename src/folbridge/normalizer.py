"""Normalize controlled English into canonical keyword/identifier tokens."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .vocabulary import LOOKAHEAD_QUANTIFIERS, Keyword, Vocabulary

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    KW = "KW"
    ID = "ID"
    NUM = "NUM"
    OP = "OP"
    SYM = "SYM"


@dataclass(frozen=True)
class NormalizedToken:
    kind: TokenKind
    value: str
    # Surface words the token was read from, for error messages.
    text: str = field(default="", compare=False)

    def is_keyword(self, *keywords: Keyword) -> bool:
        return self.kind is TokenKind.KW and any(self.value == keyword.value for keyword in keywords)

    @property
    def surface(self) -> str:
        return self.text or self.value


def KW(keyword: Keyword, text: str = "") -> NormalizedToken:
    return NormalizedToken(TokenKind.KW, keyword.value, text)


def ID(value: str) -> NormalizedToken:
    return NormalizedToken(TokenKind.ID, value, value)


def NUM(value: str) -> NormalizedToken:
    return NormalizedToken(TokenKind.NUM, value, value)


def OP(value: str, text: str = "") -> NormalizedToken:
    return NormalizedToken(TokenKind.OP, value, text or value)


def SYM(value: str) -> NormalizedToken:
    return NormalizedToken(TokenKind.SYM, value, value)


def tokens_to_text(tokens: Sequence[NormalizedToken]) -> str:
    return " ".join(token.surface for token in tokens)


# Comparison pre-pass


def normalize_comparisons(text: str, vocabulary: Optional[Vocabulary] = None) -> str:
    """Rewrite comparison and membership phrases into relation symbols.

    Runs on the raw text before tokenization: phrases such as
    ``greater than or equal to`` contain ``or`` and must be gone before the
    connective keywords are recognized. The longest phrase wins.
    """
    vocabulary = vocabulary or Vocabulary.default()

    def replace(match: "re.Match[str]") -> str:
        phrase = " ".join(match.group(0).lower().split())
        return f" {vocabulary.relations[phrase]} "

    return vocabulary.relation_pattern.sub(replace, text)


# Low-level tokenizer


class RawKind(str, Enum):
    WORD = "WORD"
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    COMMA = "COMMA"
    SYMBOL = "SYMBOL"


@dataclass(frozen=True)
class RawToken:
    kind: RawKind
    value: str


_OPERATORS = {
    "<=": "≤",
    ">=": "≥",
    "!=": "≠",
    "<": "<",
    ">": ">",
    "=": "=",
    "≤": "≤",
    "≥": "≥",
    "≠": "≠",
    "∈": "∈",
    "∉": "∉",
}
_OPERATOR_SPELLINGS = sorted(_OPERATORS, key=len, reverse=True)
_WORD_JOINERS = {"'", "-"}
_CONNECTIVE_SYMBOLS = {"&", "|"}
_QUOTES = "\"'“”"
_TERMINATORS = ".?!"
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


class EnglishTokenizer:
    """Splits English text into words, numbers, operators, commas and symbols.

    Quotes are dropped and so is punctuation that ends the sentence. Every
    other character is kept as a ``SYMBOL`` token, so nothing the parser
    cannot read disappears silently. ``&`` and ``|`` are read as the words
    they abbreviate.
    """

    def __init__(self, text: str):
        self._text = text.replace("’", "'")
        self._position = 0
        self._tokens: List[RawToken] = []

    def tokenize(self) -> List[RawToken]:
        while self._position < len(self._text):
            char = self._text[self._position]
            if char.isspace():
                self._position += 1
            elif char == ",":
                self._tokens.append(RawToken(RawKind.COMMA, ","))
                self._position += 1
            elif self._match_operator():
                continue
            elif self._starts_number():
                self._consume_number()
            elif char.isalpha() or char == "_":
                self._consume_word()
            elif char in _CONNECTIVE_SYMBOLS:
                self._tokens.append(RawToken(RawKind.WORD, char))
                self._position += 1
            elif char in _QUOTES or (char in _TERMINATORS and self._at_sentence_end()):
                self._position += 1
            else:
                self._tokens.append(RawToken(RawKind.SYMBOL, char))
                self._position += 1
        return list(self._tokens)

    def _at_sentence_end(self) -> bool:
        return not self._text[self._position:].strip(_TERMINATORS + _QUOTES + " \t\r\n")

    def _match_operator(self) -> bool:
        for spelling in _OPERATOR_SPELLINGS:
            if self._text.startswith(spelling, self._position):
                self._tokens.append(RawToken(RawKind.OPERATOR, _OPERATORS[spelling]))
                self._position += len(spelling)
                return True
        return False

    def _starts_number(self) -> bool:
        char = self._text[self._position]
        if "0" <= char <= "9":
            return True
        if char != "-" or self._position + 1 >= len(self._text):
            return False
        following = self._text[self._position + 1]
        previous = self._tokens[-1].kind if self._tokens else None
        return "0" <= following <= "9" and previous not in (RawKind.WORD, RawKind.NUMBER)

    def _consume_number(self) -> None:
        match = _NUMBER.match(self._text, self._position)
        self._tokens.append(RawToken(RawKind.NUMBER, match.group(0)))
        self._position = match.end()

    def _consume_word(self) -> None:
        start = self._position
        while self._position < len(self._text):
            char = self._text[self._position]
            if char.isalnum() or char == "_":
                self._position += 1
            elif (
                char in _WORD_JOINERS
                and self._position + 1 < len(self._text)
                and self._text[self._position + 1].isalpha()
            ):
                self._position += 1
            else:
                break
        self._tokens.append(RawToken(RawKind.WORD, self._text[start:self._position]))


def tokenize_english(text: str) -> List[RawToken]:
    return EnglishTokenizer(text).tokenize()


# Keyword pass


class Canonicalizer:
    """Folds multi-word English phrases into single keyword tokens."""

    def __init__(self, vocabulary: Vocabulary):
        self._vocabulary = vocabulary

    def canonicalize(self, raw_tokens: Sequence[RawToken]) -> List[NormalizedToken]:
        tokens: List[NormalizedToken] = []
        position = 0
        while position < len(raw_tokens):
            raw = raw_tokens[position]
            if raw.kind is RawKind.COMMA:
                tokens.append(KW(Keyword.COMMA, ","))
                position += 1
            elif raw.kind is RawKind.NUMBER:
                tokens.append(NUM(raw.value))
                position += 1
            elif raw.kind is RawKind.OPERATOR:
                tokens.append(OP(raw.value))
                position += 1
            elif raw.kind is RawKind.SYMBOL:
                tokens.append(SYM(raw.value))
                position += 1
            else:
                match = self._match_keyword(raw_tokens, position)
                if match is None:
                    tokens.append(ID(raw.value))
                    position += 1
                    continue
                keyword, length = match
                text = " ".join(token.value for token in raw_tokens[position:position + length])
                if not (keyword in (Keyword.AND, Keyword.OR) and tokens and tokens[-1].is_keyword(keyword)):
                    tokens.append(KW(keyword, text))
                position += length
        return tokens

    def _match_keyword(self, raw_tokens: Sequence[RawToken], start: int) -> Optional[Tuple[Keyword, int]]:
        words: List[str] = []
        for raw in raw_tokens[start:start + self._vocabulary.max_keyword_words]:
            if raw.kind is not RawKind.WORD:
                break
            words.append(raw.value.lower())

        for length in range(len(words), 0, -1):
            keyword = self._vocabulary.keywords.get(tuple(words[:length]))
            if keyword is None:
                continue
            if length == 1 and words[0] in LOOKAHEAD_QUANTIFIERS and not self._word_follows(raw_tokens, start + 1):
                continue
            return keyword, length
        return None

    @staticmethod
    def _word_follows(raw_tokens: Sequence[RawToken], position: int) -> bool:
        return position < len(raw_tokens) and raw_tokens[position].kind is RawKind.WORD


def normalize_english_tokens(text: str, vocabulary: Optional[Vocabulary] = None) -> List[NormalizedToken]:
    """Full normalization pipeline: comparison pre-pass, tokenizer, keyword pass."""
    vocabulary = vocabulary or Vocabulary.default()
    rewritten = normalize_comparisons(text, vocabulary)
    tokens = Canonicalizer(vocabulary).canonicalize(tokenize_english(rewritten))
    logger.debug("normalized %r to %s", text, [f"{token.kind.value}:{token.value}" for token in tokens])
    return tokens


__all__ = [
    "Canonicalizer",
    "EnglishTokenizer",
    "ID",
    "KW",
    "NUM",
    "NormalizedToken",
    "OP",
    "RawKind",
    "RawToken",
    "SYM",
    "TokenKind",
    "normalize_comparisons",
    "normalize_english_tokens",
    "tokenize_english",
    "tokens_to_text",
]

"""Parser that reduces normalized English tokens to logic ASTs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Sequence, Set, Tuple, Union

from .nodes import (
    Binary,
    BinaryOp,
    Const,
    DomainRef,
    Expr,
    Negation,
    NumberLiteral,
    Predicate,
    Quantifier,
    QuantifierKind,
    RelOp,
    Relation,
    Term,
    Var,
    contains_quantifier,
    number_from_text,
)
from .normalizer import ID, NormalizedToken, TokenKind, normalize_english_tokens, tokens_to_text
from .tokenizer import is_variable_name
from .validator import validate
from .vocabulary import ARTICLES, COPULAS, MAX_DOMAIN_WORDS, POSSESSIVES, Keyword, Vocabulary

logger = logging.getLogger(__name__)

Tokens = Sequence[NormalizedToken]


class EnglishParseError(ValueError):
    """Raised when an English statement cannot be reduced to a formula."""


@dataclass(frozen=True)
class ParseContext:
    """Variables bound by enclosing quantifiers; the innermost is the implicit subject."""

    default_var: Optional[str] = None
    bound: FrozenSet[str] = frozenset()

    def binding(self, *names: str) -> "ParseContext":
        if not names:
            return self
        return ParseContext(names[-1], self.bound | frozenset(names))


@dataclass(frozen=True)
class Matched:
    expr: Expr
    remaining: Tuple[NormalizedToken, ...] = ()


@dataclass(frozen=True)
class Malformed:
    message: str


Outcome = Union[Matched, Malformed]
Recognizer = Callable[[Tokens, ParseContext], Optional[Outcome]]


@dataclass(frozen=True)
class QuantifierHeader:
    kind: QuantifierKind
    var: str
    domain: Optional[DomainRef] = None
    restrictor: Optional[str] = None


_QUANTIFIERS = (Keyword.FORALL, Keyword.EXISTS)
_CONDITIONS = (Keyword.NECSUFF, Keyword.SUFFICIENT, Keyword.NECESSARY, Keyword.REQUIRES)
_LINKING_VERBS = COPULAS | POSSESSIVES
_FRESH_VARIABLES = ("x", "y", "z", "u", "v", "w")
_MAX_RESTRICTOR_WORDS = 3


def _is_quantifier(token: NormalizedToken) -> bool:
    return token.is_keyword(*_QUANTIFIERS)


def _is_variable(token: NormalizedToken) -> bool:
    return token.kind is TokenKind.ID and is_variable_name(token.value)


def _is_word(token: NormalizedToken, words: Set[str]) -> bool:
    return token.kind is TokenKind.ID and token.value.lower() in words


def _find(tokens: Tokens, *keywords: Keyword, start: int = 0) -> Optional[int]:
    for index in range(start, len(tokens)):
        if tokens[index].is_keyword(*keywords):
            return index
    return None


def _strip_commas(tokens: Tokens) -> Tokens:
    start, end = 0, len(tokens)
    while start < end and tokens[start].is_keyword(Keyword.COMMA):
        start += 1
    while end > start and tokens[end - 1].is_keyword(Keyword.COMMA):
        end -= 1
    return tokens[start:end]


def _strip_articles(tokens: Tokens) -> Tokens:
    start = 0
    while len(tokens) - start > 1 and _is_word(tokens[start], ARTICLES):
        start += 1
    return tokens[start:]


def _is_property(tokens: Tokens) -> bool:
    """``being a tomato``, ``voting``, ``a citizen``: a property rather than a statement."""
    span = _strip_commas(tokens)
    if not span or span[0].kind is not TokenKind.ID:
        return False
    word = span[0].value.lower()
    return word in ARTICLES or (len(word) > 4 and word.endswith("ing"))


def _not_understood(tokens: Tokens) -> str:
    return f'Could not understand part of the sentence near "{tokens_to_text(tokens)}".'


def _fresh_variable(taken: Set[str]) -> str:
    for name in _FRESH_VARIABLES:
        if name not in taken:
            return name
    index = 1
    while f"x{index}" in taken:
        index += 1
    return f"x{index}"


class ClauseParser:
    """Reduces a token span with the first recognizer that applies to it.

    Every recognizer returns ``None`` when the span does not have its shape,
    ``Matched`` with the reduced expression, or ``Malformed`` when the span has
    its shape but cannot be completed; a malformed span stops the cascade.
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self._vocabulary = vocabulary or Vocabulary.default()
        self._recognizers: Tuple[Tuple[str, Recognizer], ...] = (
            ("quantifier chain", self._quantifier_chain),
            ("quantifier", self._single_quantifier),
            ("relation", self._relation),
            ("condition", self._condition),
            ("conditional", self._conditional),
            ("connective", self._connective),
            ("negation", self._negation),
            ("predicate", self._predicate),
        )

    def reduce(self, tokens: Tokens, context: ParseContext) -> Outcome:
        span = _strip_commas(tuple(tokens))
        if not span:
            return Malformed("Expected a statement but found nothing.")
        for name, recognizer in self._recognizers:
            outcome = recognizer(span, context)
            if outcome is None:
                continue
            if isinstance(outcome, Matched):
                logger.debug("%s matched %r", name, tokens_to_text(span))
            return outcome
        return Malformed(_not_understood(span))

    def _split(
        self,
        tokens: Tokens,
        index: int,
        context: ParseContext,
        build: Callable[[Expr, Expr], Expr],
    ) -> Outcome:
        if index == 0 or index == len(tokens) - 1:
            return Malformed(f'Expected a statement on both sides of "{tokens[index].surface}".')
        left = self.reduce(tokens[:index], context)
        if isinstance(left, Malformed):
            return left
        right = self.reduce(tokens[index + 1:], context)
        if isinstance(right, Malformed):
            return right
        return Matched(build(left.expr, right.expr))

    # Quantifiers

    def _quantifier_chain(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        read = self._read_headers(tokens, context)
        if read is None or isinstance(read, Malformed):
            return read
        headers, body = read
        if len(headers) < 2:
            return None
        return self._quantified(headers, body, context)

    def _single_quantifier(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        read = self._read_headers(tokens, context)
        if read is None or isinstance(read, Malformed):
            return read
        headers, body = read
        if len(headers) != 1:
            return None
        return self._quantified(headers, body, context)

    def _quantified(self, headers: List[QuantifierHeader], body: Tokens, context: ParseContext) -> Outcome:
        outcome = self.reduce(body, context.binding(*(header.var for header in headers)))
        if isinstance(outcome, Malformed):
            return outcome
        expr = outcome.expr
        for header in reversed(headers):
            if header.restrictor is not None:
                guard = Predicate(header.restrictor, (Var(header.var),))
                op = BinaryOp.IMPL if header.kind is QuantifierKind.FORALL else BinaryOp.AND
                expr = Binary(op, guard, expr)
            expr = Quantifier(header.kind, header.var, expr, header.domain)
        return Matched(expr, outcome.remaining)

    def _read_headers(
        self, tokens: Tokens, context: ParseContext
    ) -> Union[None, Malformed, Tuple[List[QuantifierHeader], Tokens]]:
        if not _is_quantifier(tokens[0]):
            return None
        headers: List[QuantifierHeader] = []
        taken = set(context.bound)
        position = 0
        while True:
            read = self._read_header(tokens, position, taken)
            if isinstance(read, Malformed):
                return read
            header, position = read
            headers.append(header)
            taken.add(header.var)
            if position < len(tokens) and tokens[position].is_keyword(Keyword.COMMA):
                position += 1
            if position < len(tokens) and _is_quantifier(tokens[position]):
                continue
            if position < len(tokens) and tokens[position].is_keyword(Keyword.SUCHTHAT):
                position += 1
            break

        body = tokens[position:]
        if not _strip_commas(body):
            return Malformed(f'The quantifier "{tokens_to_text(tokens)}" is missing the statement it applies to.')
        return headers, body

    def _read_header(
        self, tokens: Tokens, start: int, taken: Set[str]
    ) -> Union[Malformed, Tuple[QuantifierHeader, int]]:
        kind = QuantifierKind.FORALL if tokens[start].is_keyword(Keyword.FORALL) else QuantifierKind.EXISTS
        position = start + 1
        # "there is some x"
        while kind is QuantifierKind.EXISTS and position < len(tokens) and tokens[position].is_keyword(Keyword.EXISTS):
            position += 1
        while position + 1 < len(tokens) and _is_word(tokens[position], ARTICLES) and tokens[position + 1].kind is TokenKind.ID:
            position += 1

        domain: Optional[DomainRef] = None
        restrictor: Optional[str] = None
        words: List[str] = []
        for token in tokens[position:position + MAX_DOMAIN_WORDS]:
            if token.kind is not TokenKind.ID:
                break
            words.append(token.value)
        for length in range(len(words), 0, -1):
            symbol = self._vocabulary.domain_symbol(" ".join(words[:length]))
            after = position + length
            if symbol is not None and after < len(tokens) and _is_variable(tokens[after]):
                domain = DomainRef(symbol)
                position = after
                break

        if domain is None:
            noun: List[str] = []
            while (
                len(noun) < _MAX_RESTRICTOR_WORDS
                and position + len(noun) < len(tokens)
                and tokens[position + len(noun)].kind is TokenKind.ID
                and not _is_variable(tokens[position + len(noun)])
                and not _is_word(tokens[position + len(noun)], _LINKING_VERBS)
            ):
                noun.append(tokens[position + len(noun)].value)
            if noun:
                restrictor = self._vocabulary.noun_predicate(" ".join(noun))
                position += len(noun)

        if position < len(tokens) and _is_variable(tokens[position]):
            variable = tokens[position].value
            position += 1
        elif restrictor is not None and position < len(tokens) and _is_word(tokens[position], _LINKING_VERBS):
            variable = _fresh_variable(taken)
        else:
            fragment = tokens_to_text(tokens[start:position + 1])
            return Malformed(f'Expected a variable in the quantifier "{fragment}".')

        if position < len(tokens) and tokens[position].kind is TokenKind.OP and tokens[position].value == RelOp.IN.value:
            read = self._header_domain(tokens, position + 1)
            if read is None:
                fragment = tokens_to_text(tokens[start:position + 1])
                return Malformed(f'Expected a domain after "{fragment}".')
            domain, position = read

        return QuantifierHeader(kind, variable, domain, restrictor), position

    def _header_domain(self, tokens: Tokens, position: int) -> Optional[Tuple[DomainRef, int]]:
        while position + 1 < len(tokens) and _is_word(tokens[position], ARTICLES):
            position += 1
        words: List[str] = []
        for token in tokens[position:position + MAX_DOMAIN_WORDS]:
            if token.kind is not TokenKind.ID:
                break
            words.append(token.value)
        if not words:
            return None
        match = self._vocabulary.match_domain(words)
        if match is not None:
            symbol, length = match
            return DomainRef(symbol), position + length
        return DomainRef(words[0]), position + 1

    # Relations

    def _relation(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        index = next((i for i, token in enumerate(tokens) if token.kind is TokenKind.OP), None)
        if index is None:
            return None
        op = RelOp(tokens[index].value)
        left_span = tokens[:index]
        if left_span and _is_word(left_span[-1], COPULAS):
            left_span = left_span[:-1]
        left = self._term(left_span, context)
        right: Optional[Term] = None
        if op.is_membership:
            right = self._membership_target(tokens[index + 1:], context)
        if right is None:
            right = self._term(tokens[index + 1:], context)
        if left is None or right is None:
            return None
        return Matched(Relation(op, left, right))

    def _term(self, tokens: Tokens, context: ParseContext) -> Optional[Term]:
        span = _strip_articles(tokens)
        if len(span) != 1:
            return None
        token = span[0]
        if token.kind is TokenKind.NUM:
            return NumberLiteral(number_from_text(token.value))
        if token.kind is TokenKind.ID:
            return self._name_term(token.value, context)
        return None

    def _membership_target(self, tokens: Tokens, context: ParseContext) -> Optional[Term]:
        span = _strip_articles(tokens)
        # "the set of reals", "the set S"
        if len(span) > 1 and _is_word(span[0], {"set"}):
            span = _strip_articles(span[2:] if _is_word(span[1], {"of"}) else span[1:])
        if not span or any(token.kind is not TokenKind.ID for token in span):
            return None
        if len(span) == 1 and span[0].value in context.bound:
            return Var(span[0].value)
        match = self._vocabulary.match_domain([token.value for token in span])
        if match is not None and match[1] == len(span):
            return Const(match[0])
        if len(span) == 1:
            return self._name_term(span[0].value, context)
        return None
        if len(span) == 1 and span[0].value in context.bound:
            return Var(span[0].value)
        match = self._vocabulary.match_domain([token.value for token in span])
        if match is not None and match[1] == len(span):
            return Const(match[0])
        if len(span) == 1:
            return Const(span[0].value)
        return None

    @staticmethod
    def _name_term(name: str, context: ParseContext) -> Term:
        if name.lower() == "it" and context.default_var is not None:
            return Var(context.default_var)
        if name in context.bound or is_variable_name(name):
            return Var(name)
        return Const(name)

    # Conditions and conditionals

    def _condition(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        for keyword in _CONDITIONS:
            index = _find(tokens, keyword)
            if index is None:
                continue

            def build(left: Expr, right: Expr, keyword: Keyword = keyword) -> Expr:
                if keyword is Keyword.NECSUFF:
                    return Binary(BinaryOp.IFF, left, right)
                if keyword is Keyword.NECESSARY:
                    return Binary(BinaryOp.IMPL, right, left)
                return Binary(BinaryOp.IMPL, left, right)

            if not (_is_property(tokens[:index]) and _is_property(tokens[index + 1:])):
                # "p is necessary for q" relates two statements.
                return self._split(tokens, index, context, build)
            variable = context.default_var or "x"
            outcome = self._split(tokens, index, context.binding(variable), build)
            if isinstance(outcome, Malformed):
                return outcome
            return Matched(Quantifier(QuantifierKind.FORALL, variable, outcome.expr))
        return None

    def _conditional(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        index = _find(tokens, Keyword.IFF)
        if index is not None:
            return self._split(tokens, index, context, lambda left, right: Binary(BinaryOp.IFF, left, right))

        index = _find(tokens, Keyword.ONLYIF, Keyword.IMPLIES)
        if index is not None:
            return self._split(tokens, index, context, lambda left, right: Binary(BinaryOp.IMPL, left, right))

        index = _find(tokens, Keyword.UNLESS)
        if index is not None:
            return self._split(
                tokens, index, context, lambda left, right: Binary(BinaryOp.IMPL, Negation(right), left)
            )

        if tokens[0].is_keyword(Keyword.IF):
            body = tokens[1:]
            index = _find(body, Keyword.THEN)
            if index is None:
                index = _find(body, Keyword.COMMA)
            if index is None:
                return Malformed(f'Expected "then" after the condition in "{tokens_to_text(tokens)}".')
            return self._split(body, index, context, lambda left, right: Binary(BinaryOp.IMPL, left, right))

        # "A if B" states that B implies A.
        index = _find(tokens, Keyword.IF)
        if index is not None:
            return self._split(tokens, index, context, lambda left, right: Binary(BinaryOp.IMPL, right, left))
        return None

    # Connectives and negation

    def _connective(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        for keyword, op in ((Keyword.OR, BinaryOp.OR), (Keyword.AND, BinaryOp.AND)):
            span = tokens[1:] if keyword is Keyword.OR and tokens[0].is_keyword(Keyword.OR) else tokens
            index = _find(span, keyword)
            if index is None:
                continue
            return self._split(span, index, context, lambda left, right, op=op: Binary(op, left, right))
        return None

    def _negation(self, tokens: Tokens, context: ParseContext) -> Optional[Outcome]:
        if tokens[0].is_keyword(Keyword.NOT):
            if len(tokens) == 1:
                return Malformed(f'Expected a statement after "{tokens[0].surface}".')
            return self._negated(tokens[1:], context)

        span = _strip_articles(tokens)
        if len(span) >= 3 and span[0].kind is TokenKind.ID and span[1].is_keyword(Keyword.NOT):
            # "x is not even" negates "x is even".
            rest = list(span[2:])
            if not _is_word(rest[0], _LINKING_VERBS):
                rest.insert(0, ID("is"))
            return self._negated([span[0], *rest], context)
        return None

    def _negated(self, tokens: Tokens, context: ParseContext) -> Outcome:
        outcome = self.reduce(tokens, context)
        if isinstance(outcome, Malformed):
            return outcome
        return Matched(Negation(outcome.expr), outcome.remaining)

    # Predicates

    def _predicate(self, tokens: Tokens, context: ParseContext) -> Outcome:
        if any(token.kind in (TokenKind.KW, TokenKind.OP, TokenKind.SYM) for token in tokens):
            return Malformed(_not_understood(tokens))

        words = list(_strip_articles(tokens))
        subject: Optional[Term] = None
        if len(words) >= 2 and words[0].kind is TokenKind.ID:
            first = words[0].value
            if first in context.bound or first.lower() == "it" or _is_word(words[1], _LINKING_VERBS):
                subject = self._name_term(first, context)
                words = words[1:]
        if subject is None and context.default_var is not None:
            subject = Var(context.default_var)

        args: Tuple[Term, ...] = () if subject is None else (subject,)
        if subject is not None and len(words) >= 2 and words[-1].kind is TokenKind.ID and words[-1].value in context.bound:
            args = (subject, Var(words[-1].value))
            words = words[:-1]

        phrase = " ".join(token.value for token in words)
        name = self._vocabulary.lookup_predicate(phrase)
        if name is None:
            # A second verb or a subjectless phrase is more than one property.
            if any(_is_word(token, _LINKING_VERBS) for token in words[1:]) or (subject is None and len(words) > 1):
                return Malformed(_not_understood(tokens))
            head = words[0].value.lower()
            rest = " ".join(token.value for token in words[1:])
            if head in _LINKING_VERBS and not rest:
                return Malformed(f'Expected a property after "{tokens_to_text(tokens)}".')
            if head in COPULAS:
                name = self._vocabulary.predicate_for(rest)
            elif head in POSSESSIVES:
                name = "Has" + self._vocabulary.predicate_for(rest)
            else:
                name = self._vocabulary.predicate_for(phrase)
        if not args:
            return Matched(Predicate.atom(name))
        return Matched(Predicate(name, args))


def parse_clause(
    tokens: Tokens,
    context: Optional[ParseContext] = None,
    vocabulary: Optional[Vocabulary] = None,
) -> Matched:
    """Reduce *tokens* to an expression; raises ``EnglishParseError`` when no recognizer applies."""
    outcome = ClauseParser(vocabulary).reduce(tokens, context or ParseContext())
    if isinstance(outcome, Malformed):
        raise EnglishParseError(outcome.message)
    return outcome


def english_to_ast(text: str, vocabulary: Optional[Vocabulary] = None) -> Expr:
    """Translate a controlled-English sentence into a logic AST.

    Quantifier-free sentences such as ``x is at least 5`` are returned as open
    formulas. Once a sentence binds a variable, every other variable it uses
    must be bound as well.
    """
    if not text.strip():
        raise EnglishParseError("Enter an English sentence to translate.")
    tokens = normalize_english_tokens(text, vocabulary)
    if not tokens:
        raise EnglishParseError(f'Could not find anything to translate in "{text.strip()}".')

    result = parse_clause(tokens, vocabulary=vocabulary)
    if result.remaining:
        raise EnglishParseError(_not_understood(result.remaining))

    if contains_quantifier(result.expr):
        validation = validate(result.expr)
        if not validation.ok:
            message = validation.errors[0]
            variable = message.rsplit(" ", 1)[-1]
            raise EnglishParseError(f"{message}. Add a quantifier for {variable}.")
    return result.expr


__all__ = [
    "ClauseParser",
    "EnglishParseError",
    "Malformed",
    "Matched",
    "ParseContext",
    "QuantifierHeader",
    "english_to_ast",
    "parse_clause",
]

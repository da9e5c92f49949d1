"""Vocabulary tables for the English ↔ logic translator."""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from functools import lru_cache
from threading import Lock
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Pattern, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


class Keyword(str, Enum):
    FORALL = "FORALL"
    EXISTS = "EXISTS"
    SUCHTHAT = "SUCHTHAT"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    IF = "IF"
    THEN = "THEN"
    ONLYIF = "ONLYIF"
    IFF = "IFF"
    IMPLIES = "IMPLIES"
    UNLESS = "UNLESS"
    SUFFICIENT = "SUFFICIENT"
    NECESSARY = "NECESSARY"
    REQUIRES = "REQUIRES"
    NECSUFF = "NECSUFF"
    COMMA = ","


DOMAIN_PHRASES = {
    "real numbers": "ℝ",
    "real number": "ℝ",
    "reals": "ℝ",
    "real": "ℝ",
    "r": "ℝ",
    "ℝ": "ℝ",
    "integers": "ℤ",
    "integer": "ℤ",
    "ints": "ℤ",
    "int": "ℤ",
    "z": "ℤ",
    "ℤ": "ℤ",
    "rational numbers": "ℚ",
    "rational number": "ℚ",
    "rationals": "ℚ",
    "rational": "ℚ",
    "q": "ℚ",
    "ℚ": "ℚ",
    "natural numbers": "ℕ",
    "natural number": "ℕ",
    "naturals": "ℕ",
    "natural": "ℕ",
    "n": "ℕ",
    "ℕ": "ℕ",
    "complex numbers": "ℂ",
    "complex number": "ℂ",
    "complexes": "ℂ",
    "complex": "ℂ",
    "c": "ℂ",
    "ℂ": "ℂ",
}

MAX_DOMAIN_WORDS = 3

RELATION_PHRASES = {
    # Less than
    "less than": "<",
    "smaller than": "<",
    "lower than": "<",
    "below": "<",
    "is less than": "<",
    "is smaller than": "<",
    "is lower than": "<",
    "is below": "<",
    # Greater than
    "greater than": ">",
    "larger than": ">",
    "higher than": ">",
    "above": ">",
    "is greater than": ">",
    "is larger than": ">",
    "is higher than": ">",
    "is above": ">",
    # Less than or equal
    "at most": "≤",
    "at most equal to": "≤",
    "less than or equal to": "≤",
    "less than or equal": "≤",
    "smaller than or equal to": "≤",
    "smaller than or equal": "≤",
    "not greater than": "≤",
    "no greater than": "≤",
    "is at most": "≤",
    "is less than or equal to": "≤",
    "is smaller than or equal to": "≤",
    "is not greater than": "≤",
    "is no greater than": "≤",
    # Greater than or equal
    "at least": "≥",
    "at least equal to": "≥",
    "greater than or equal to": "≥",
    "greater than or equal": "≥",
    "larger than or equal to": "≥",
    "larger than or equal": "≥",
    "not less than": "≥",
    "no less than": "≥",
    "is at least": "≥",
    "is greater than or equal to": "≥",
    "is larger than or equal to": "≥",
    "is not less than": "≥",
    "is no less than": "≥",
    # Equal
    "equals": "=",
    "equal to": "=",
    "equal": "=",
    "is equal to": "=",
    "is equal": "=",
    "same as": "=",
    "is the same as": "=",
    "equivalent to": "=",
    "is equivalent to": "=",
    # Not equal
    "not equal to": "≠",
    "not equal": "≠",
    "does not equal": "≠",
    "doesn't equal": "≠",
    "is not equal to": "≠",
    "is not equal": "≠",
    "different from": "≠",
    "is different from": "≠",
    "not the same as": "≠",
    "is not the same as": "≠",
    # Membership
    "in": "∈",
    "is in": "∈",
    "belongs to": "∈",
    "is an element of": "∈",
    "is a member of": "∈",
    "is contained in": "∈",
    # Non-membership
    "not in": "∉",
    "is not in": "∉",
    "does not belong to": "∉",
    "doesn't belong to": "∉",
    "is not an element of": "∉",
    "is not a member of": "∉",
    "is not contained in": "∉",
}

KEYWORD_PHRASES = {
    # Quantifiers
    "for all": Keyword.FORALL,
    "for every": Keyword.FORALL,
    "for each": Keyword.FORALL,
    "for any": Keyword.FORALL,
    "given any": Keyword.FORALL,
    "all": Keyword.FORALL,
    "every": Keyword.FORALL,
    "each": Keyword.FORALL,
    "any": Keyword.FORALL,
    "there exists": Keyword.EXISTS,
    "there exist": Keyword.EXISTS,
    "there is": Keyword.EXISTS,
    "there are": Keyword.EXISTS,
    "there's": Keyword.EXISTS,
    "exists": Keyword.EXISTS,
    "exist": Keyword.EXISTS,
    "we can find": Keyword.EXISTS,
    "some": Keyword.EXISTS,
    "for some": Keyword.EXISTS,
    # Scope markers
    "such that": Keyword.SUCHTHAT,
    "so that": Keyword.SUCHTHAT,
    "where": Keyword.SUCHTHAT,
    "with the property that": Keyword.SUCHTHAT,
    # Connectives
    "and": Keyword.AND,
    "as well as": Keyword.AND,
    "plus": Keyword.AND,
    "also": Keyword.AND,
    "but": Keyword.AND,
    "&": Keyword.AND,
    "or": Keyword.OR,
    "or else": Keyword.OR,
    "either": Keyword.OR,
    "|": Keyword.OR,
    "unless": Keyword.UNLESS,
    # Conditionals
    "if and only if": Keyword.IFF,
    "iff": Keyword.IFF,
    "only if": Keyword.ONLYIF,
    "if": Keyword.IF,
    "whenever": Keyword.IF,
    "every time": Keyword.IF,
    "provided that": Keyword.IF,
    "then": Keyword.THEN,
    "implies": Keyword.IMPLIES,
    # Sufficiency
    "is a sufficient condition for": Keyword.SUFFICIENT,
    "is a sufficient condition to": Keyword.SUFFICIENT,
    "sufficient condition for": Keyword.SUFFICIENT,
    "sufficient condition to": Keyword.SUFFICIENT,
    "is sufficient for": Keyword.SUFFICIENT,
    "is sufficient to": Keyword.SUFFICIENT,
    "sufficient for": Keyword.SUFFICIENT,
    "sufficient to": Keyword.SUFFICIENT,
    "is sufficient": Keyword.SUFFICIENT,
    "sufficient": Keyword.SUFFICIENT,
    "is enough for": Keyword.SUFFICIENT,
    "is enough to": Keyword.SUFFICIENT,
    "suffices for": Keyword.SUFFICIENT,
    "suffices to": Keyword.SUFFICIENT,
    "guarantees": Keyword.SUFFICIENT,
    # Necessity
    "is a necessary condition for": Keyword.NECESSARY,
    "is a necessary condition to": Keyword.NECESSARY,
    "necessary condition for": Keyword.NECESSARY,
    "necessary condition to": Keyword.NECESSARY,
    "is necessary for": Keyword.NECESSARY,
    "is necessary to": Keyword.NECESSARY,
    "necessary for": Keyword.NECESSARY,
    "necessary to": Keyword.NECESSARY,
    "is necessary": Keyword.NECESSARY,
    "necessary": Keyword.NECESSARY,
    "is required for": Keyword.NECESSARY,
    "is required to": Keyword.NECESSARY,
    "required for": Keyword.NECESSARY,
    "required": Keyword.NECESSARY,
    "requires": Keyword.REQUIRES,
    "depends on": Keyword.REQUIRES,
    "depends": Keyword.REQUIRES,
    # Necessary and sufficient
    "is a necessary and sufficient condition for": Keyword.NECSUFF,
    "is a necessary and sufficient condition to": Keyword.NECSUFF,
    "necessary and sufficient condition for": Keyword.NECSUFF,
    "necessary and sufficient condition to": Keyword.NECSUFF,
    "is necessary and sufficient for": Keyword.NECSUFF,
    "is necessary and sufficient to": Keyword.NECSUFF,
    "necessary and sufficient for": Keyword.NECSUFF,
    "necessary and sufficient to": Keyword.NECSUFF,
    "necessary and sufficient": Keyword.NECSUFF,
    # Negation
    "not": Keyword.NOT,
    "is not": Keyword.NOT,
    "isn't": Keyword.NOT,
    "does not": Keyword.NOT,
    "doesn't": Keyword.NOT,
    "do not": Keyword.NOT,
    "don't": Keyword.NOT,
    "it is not the case that": Keyword.NOT,
}

# Bare determiners that only open a quantifier when another word follows.
LOOKAHEAD_QUANTIFIERS = {"all", "every", "each", "any"}

ARTICLES = {"a", "an", "the"}

COPULAS = {"is", "are"}
POSSESSIVES = {"has", "have"}

PHRASE_PREDICATES = {
    # Condition examples
    "being a tomato": "Tomato",
    "being a fruit": "Fruit",
    "being a uatx student": "UATXStudent",
    "being a student": "Student",
    "getting a student id": "StudentID",
    "get a student id": "StudentID",
    "having a student id": "StudentID",
    "has a student id": "StudentID",
    "being a citizen": "Citizen",
    "vote": "Vote",
    "voting": "Vote",
    "having a ticket": "HasTicket",
    "entering the concert": "EnterConcert",
    "being divisible by 4": "DivisibleBy4",
    "being even": "Even",
    # Noun phrases
    "computer program": "Program",
    "program": "Program",
    "student": "Student",
    "bug": "Bug",
    "executable": "Executable",
    "human": "Human",
    "mortal": "Mortal",
    "teacher": "Teacher",
    "philosopher": "Philosopher",
    "wise": "Wise",
    "happy": "Happy",
    "bird": "Bird",
    "can fly": "CanFly",
    "flies": "CanFly",
    # Binary predicates
    "loves": "Loves",
    "teaches": "Teaches",
    "knows": "Knows",
    "likes": "Likes",
    "parent of": "ParentOf",
    "friend of": "FriendOf",
}


class VocabularyError(ValueError):
    """Raised when a persisted phrase dictionary cannot be read."""


def phrase_key(phrase: str) -> str:
    """Lookup key for the phrase dictionary."""
    words = [word for word in phrase.lower().split() if word not in ARTICLES]
    if words and words[0] == "getting":
        words[0] = "get"
    elif words and words[0] == "having":
        words[0] = "has"
    return " ".join(words)


def derive_predicate_name(phrase: str) -> str:
    """PascalCase predicate name for a noun phrase not found in the dictionary."""
    text = phrase.lower().strip()
    text = re.sub(r"^being\s+", "", text)
    text = re.sub(r"^is\s+(a|an|the)\s+", "", text)
    text = re.sub(r"^(a|an|the)\s+", "", text)
    parts = [part for part in re.split(r"[^0-9a-z]+", text) if part]
    name = "".join(part[0].upper() + part[1:] for part in parts)
    if not name:
        return "P"
    if name[0].isdigit():
        return "P" + name
    return name


def singular(word: str) -> str:
    """Naive singular of an English plural noun (``humans`` -> ``human``)."""
    lower = word.lower()
    if len(word) > 4 and lower.endswith("ies"):
        return word[:-3] + "y"
    if lower.endswith(("ches", "shes", "sses", "xes")):
        return word[:-2]
    if len(word) > 3 and lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


class Vocabulary:
    """Immutable snapshot of the phrase tables used by the English pipeline."""

    def __init__(
        self,
        overrides: Optional[Mapping[str, str]] = None,
        *,
        defaults: Mapping[str, str] = PHRASE_PREDICATES,
        domains: Mapping[str, str] = DOMAIN_PHRASES,
        relations: Mapping[str, str] = RELATION_PHRASES,
        keywords: Mapping[str, Keyword] = KEYWORD_PHRASES,
    ):
        self._tables = {"defaults": defaults, "domains": domains, "relations": relations, "keywords": keywords}
        self._overrides: Mapping[str, str] = MappingProxyType(
            {phrase_key(phrase): name for phrase, name in (overrides or {}).items()}
        )
        predicates = {phrase_key(phrase): name for phrase, name in defaults.items()}
        predicates.update(self._overrides)
        self._predicates: Mapping[str, str] = MappingProxyType(predicates)
        self.domains: Mapping[str, str] = MappingProxyType(dict(domains))
        self.relations: Mapping[str, str] = MappingProxyType(dict(relations))
        self.keywords: Mapping[Tuple[str, ...], Keyword] = MappingProxyType(
            {tuple(phrase.split()): keyword for phrase, keyword in keywords.items()}
        )
        self.max_keyword_words = max((len(words) for words in self.keywords), default=1)
        self._relation_pattern: Optional[Pattern[str]] = None

    @classmethod
    def default(cls) -> "Vocabulary":
        return _default_vocabulary()

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Vocabulary":
        """Defaults merged with the phrase overrides stored at *path*."""
        path = Path(path)
        if not path.exists():
            logger.debug("no phrase overrides at %s, using defaults", path)
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise VocabularyError(f"invalid phrase dictionary {path}: {exc}") from exc
        if not isinstance(data, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in data.items()
        ):
            raise VocabularyError(f"phrase dictionary {path} must map phrases to predicate names")
        logger.debug("loaded %d phrase overrides from %s", len(data), path)
        return cls(data)

    @property
    def overrides(self) -> Dict[str, str]:
        return dict(self._overrides)

    @property
    def predicates(self) -> Dict[str, str]:
        return dict(self._predicates)

    def with_mapping(self, phrase: str, predicate: str) -> "Vocabulary":
        if not phrase.strip():
            raise VocabularyError("phrase must not be empty")
        if not re.match(r"^[A-Za-z][A-Za-z0-9_]*$", predicate):
            raise VocabularyError(f"invalid predicate name: {predicate!r}")
        overrides = dict(self._overrides)
        overrides[phrase_key(phrase)] = predicate
        return Vocabulary(overrides, **self._tables)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.write_text(json.dumps(dict(self._overrides), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug("saved %d phrase overrides to %s", len(self._overrides), path)

    def lookup_predicate(self, phrase: str) -> Optional[str]:
        return self._predicates.get(phrase_key(phrase))

    def predicate_for(self, phrase: str) -> str:
        """Dictionary entry for *phrase*, falling back to a derived name."""
        return self.lookup_predicate(phrase) or derive_predicate_name(phrase)

    def noun_predicate(self, phrase: str) -> str:
        """Predicate for a restricting noun; a plural noun reuses the singular entry."""
        name = self.lookup_predicate(phrase)
        if name is not None:
            return name
        words = phrase.split()
        words[-1] = singular(words[-1])
        return self.predicate_for(" ".join(words))

    def domain_symbol(self, phrase: str) -> Optional[str]:
        return self.domains.get(phrase.lower().strip())

    @property
    def relation_pattern(self) -> Pattern[str]:
        """Regex over every relation phrase, longest phrase first."""
        if self._relation_pattern is None:
            phrases = sorted(self.relations, key=lambda phrase: (len(phrase.split()), len(phrase)), reverse=True)
            alternatives = "|".join(r"\s+".join(re.escape(word) for word in phrase.split()) for phrase in phrases)
            self._relation_pattern = re.compile(rf"(?<![\w'])(?:{alternatives})(?![\w'])", re.IGNORECASE)
        return self._relation_pattern

    def match_domain(self, words: Sequence[str]) -> Optional[Tuple[str, int]]:
        """Longest domain phrase at the start of *words* as ``(symbol, length)``."""
        for length in range(min(MAX_DOMAIN_WORDS, len(words)), 0, -1):
            symbol = self.domain_symbol(" ".join(words[:length]))
            if symbol is not None:
                return symbol, length
        return None


@lru_cache(maxsize=None)
def _default_vocabulary() -> Vocabulary:
    return Vocabulary()


class VocabularyStore:
    """Process-wide current vocabulary, swapped atomically on every write."""

    def __init__(self, vocabulary: Optional[Vocabulary] = None, path: Optional[Path] = None):
        self._vocabulary = vocabulary or Vocabulary.default()
        self._path = path
        self._lock = Lock()

    @classmethod
    def from_path(cls, path: Optional[Union[str, Path]]) -> "VocabularyStore":
        if path is None:
            return cls()
        path = Path(path)
        return cls(Vocabulary.load(path), path)

    def current(self) -> Vocabulary:
        with self._lock:
            return self._vocabulary

    def add_mapping(self, phrase: str, predicate: str) -> Vocabulary:
        with self._lock:
            updated = self._vocabulary.with_mapping(phrase, predicate)
            if self._path is not None:
                updated.save(self._path)
            self._vocabulary = updated
        logger.debug("mapped phrase %r to predicate %s", phrase, predicate)
        return updated


__all__ = [
    "ARTICLES",
    "COPULAS",
    "DOMAIN_PHRASES",
    "KEYWORD_PHRASES",
    "Keyword",
    "LOOKAHEAD_QUANTIFIERS",
    "MAX_DOMAIN_WORDS",
    "PHRASE_PREDICATES",
    "POSSESSIVES",
    "RELATION_PHRASES",
    "Vocabulary",
    "VocabularyError",
    "VocabularyStore",
    "derive_predicate_name",
    "phrase_key",
    "singular",
]

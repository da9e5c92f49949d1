"""High-level translation helpers for the English/logic toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .nl_parser import EnglishParseError, english_to_ast
from .nodes import Expr
from .parser import Diagnostic, ParseError, diagnose, parse
from .printer import ast_to_tree, expr_to_string
from .renderer import to_english
from .tokenizer import TokenizerError
from .validator import ValidationResult, validate
from .vocabulary import Vocabulary


class TranslationError(ValueError):
    """Generic wrapper for tokenizer, parse and English errors."""

    def __init__(self, message: str, diagnostic: Optional[Diagnostic] = None):
        super().__init__(message)
        self.diagnostic = diagnostic


@dataclass(frozen=True)
class LogicCheck:
    ast: Expr
    canonical: str
    validation: ValidationResult


def describe(diagnostic: Diagnostic) -> str:
    return f"{diagnostic.message} at line {diagnostic.line}, column {diagnostic.column}"


def parse_logic(formula: str) -> Expr:
    if not formula or not formula.strip():
        raise TranslationError("logic formula is empty")
    try:
        return parse(formula).ast
    except (TokenizerError, ParseError) as exc:
        diagnostic = diagnose(formula)
        if diagnostic is None:
            raise TranslationError(str(exc)) from exc
        raise TranslationError(describe(diagnostic), diagnostic) from exc


def translate_english_to_logic(text: str, vocabulary: Optional[Vocabulary] = None) -> str:
    if not text or not text.strip():
        raise TranslationError("English statement is empty")
    try:
        return expr_to_string(english_to_ast(text, vocabulary))
    except EnglishParseError as exc:
        raise TranslationError(str(exc)) from exc


def translate_logic_to_english(formula: str) -> str:
    return to_english(parse_logic(formula))


def check_logic(formula: str) -> LogicCheck:
    """Parse and scope-check *formula*; scope errors are reported, not raised."""
    ast = parse_logic(formula)
    return LogicCheck(ast, expr_to_string(ast), validate(ast))


def logic_tree(formula: str) -> str:
    return ast_to_tree(parse_logic(formula))


__all__ = [
    "LogicCheck",
    "TranslationError",
    "check_logic",
    "describe",
    "logic_tree",
    "parse_logic",
    "translate_english_to_logic",
    "translate_logic_to_english",
]

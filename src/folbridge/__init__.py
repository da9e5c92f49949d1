"""English ↔ first-order logic translation toolkit."""

from .nl_parser import ClauseParser, EnglishParseError, ParseContext, english_to_ast, parse_clause
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
)
from .normalizer import NormalizedToken, TokenKind, normalize_comparisons, normalize_english_tokens
from .parser import Diagnostic, LogicParser, ParseError, ParseResult, character_offset, diagnose, parse
from .printer import ast_to_tree, expr_to_string
from .renderer import EnglishRenderer, to_english
from .tokenizer import Token, TokenType, Tokenizer, TokenizerError, tokenize
from .translator import (
    TranslationError,
    check_logic,
    translate_english_to_logic,
    translate_logic_to_english,
)
from .validator import ValidationResult, validate
from .vocabulary import Vocabulary, VocabularyError, VocabularyStore

__all__ = [
    "Binary",
    "BinaryOp",
    "ClauseParser",
    "Const",
    "Diagnostic",
    "DomainRef",
    "EnglishParseError",
    "EnglishRenderer",
    "Expr",
    "FunctionApp",
    "LogicParser",
    "Negation",
    "NormalizedToken",
    "NumberLiteral",
    "Paren",
    "ParseContext",
    "ParseError",
    "ParseResult",
    "Predicate",
    "Quantifier",
    "QuantifierKind",
    "RelOp",
    "Relation",
    "Term",
    "Token",
    "TokenKind",
    "TokenType",
    "Tokenizer",
    "TokenizerError",
    "TranslationError",
    "ValidationResult",
    "Var",
    "Vocabulary",
    "VocabularyError",
    "VocabularyStore",
    "ast_to_tree",
    "character_offset",
    "check_logic",
    "diagnose",
    "english_to_ast",
    "expr_to_string",
    "normalize_comparisons",
    "normalize_english_tokens",
    "parse",
    "parse_clause",
    "to_english",
    "tokenize",
    "translate_english_to_logic",
    "translate_logic_to_english",
    "validate",
]

"""Command line interface for the English/logic translator."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional

from .parser import Diagnostic
from .translator import (
    TranslationError,
    check_logic,
    logic_tree,
    translate_english_to_logic,
    translate_logic_to_english,
)
from .vocabulary import Vocabulary, VocabularyError

VOCABULARY_ENV = "FOLBRIDGE_VOCABULARY"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _read_input(text: Optional[str], file: Optional[Path]) -> str:
    if text is not None:
        return text
    if file is not None:
        return file.read_text(encoding="utf-8")
    return sys.stdin.read()


def _caret(text: str, diagnostic: Diagnostic) -> str:
    lines = text.splitlines() or [""]
    line = lines[min(diagnostic.line, len(lines)) - 1]
    return f"  {line}\n  {' ' * (diagnostic.column - 1)}^\n"


def _report(exc: TranslationError, payload: str) -> int:
    sys.stderr.write(f"error: {exc}\n")
    if exc.diagnostic is not None:
        sys.stderr.write(_caret(payload, exc.diagnostic))
    return 1


def _handle_translation(func: Callable[[str], str], payload: str) -> int:
    try:
        result = func(payload.strip())
    except TranslationError as exc:
        return _report(exc, payload.strip())
    sys.stdout.write(result + "\n")
    return 0


def _handle_check(payload: str) -> int:
    formula = payload.strip()
    try:
        check = check_logic(formula)
    except TranslationError as exc:
        return _report(exc, formula)
    sys.stdout.write(check.canonical + "\n")
    for error in check.validation.errors:
        sys.stderr.write(f"error: {error}\n")
    return 0 if check.validation.ok else 1


def _load_vocabulary(path: Optional[str]) -> Vocabulary:
    if not path:
        return Vocabulary.default()
    return Vocabulary.load(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _import_web_run():
    from .web import run

    return run


def _add_input_arguments(parser: argparse.ArgumentParser, name: str, what: str) -> None:
    parser.add_argument(name, nargs="?", help=f"{what} to translate.")
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        help=f"Read the {what.lower()} from a file instead of the command line.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folbridge",
        description="Translate between controlled English and first-order logic.",
    )
    parser.add_argument(
        "--vocabulary",
        default=os.environ.get(VOCABULARY_ENV),
        help=f"JSON file of phrase to predicate overrides (default: ${VOCABULARY_ENV}).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline details to stderr.")
    subparsers = parser.add_subparsers(dest="command")

    english_parser = subparsers.add_parser(
        "english",
        help="Translate an English statement into logic.",
    )
    _add_input_arguments(english_parser, "text", "Statement")

    logic_parser = subparsers.add_parser(
        "logic",
        help="Translate a logic formula into English.",
    )
    _add_input_arguments(logic_parser, "formula", "Formula")

    check_parser = subparsers.add_parser(
        "check",
        help="Parse and scope-check a logic formula, printing its canonical form.",
    )
    _add_input_arguments(check_parser, "formula", "Formula")

    tree_parser = subparsers.add_parser(
        "tree",
        help="Print the structure outline of a logic formula.",
    )
    _add_input_arguments(tree_parser, "formula", "Formula")

    web_parser = subparsers.add_parser(
        "web",
        help="Launch the JSON web API (requires Flask).",
    )
    web_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind (default: 127.0.0.1).",
    )
    web_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind (default: 8000).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "english":
        try:
            vocabulary = _load_vocabulary(args.vocabulary)
        except VocabularyError as exc:
            sys.stderr.write(f"error: {exc}\n")
            return 1
        payload = _read_input(args.text, args.file)
        return _handle_translation(lambda text: translate_english_to_logic(text, vocabulary), payload)
    if args.command == "logic":
        payload = _read_input(args.formula, args.file)
        return _handle_translation(translate_logic_to_english, payload)
    if args.command == "check":
        return _handle_check(_read_input(args.formula, args.file))
    if args.command == "tree":
        payload = _read_input(args.formula, args.file)
        return _handle_translation(logic_tree, payload)
    if args.command == "web":
        try:
            run = _import_web_run()
        except ModuleNotFoundError as exc:  # pragma: no cover - depends on env
            if getattr(exc, "name", None) == "flask":
                sys.stderr.write(
                    "error: Flask is required for the web interface. Install it with `pip install flask`.\n"
                )
                return 1
            raise

        logger.debug("starting web API on %s:%d", args.host, args.port)
        run(host=args.host, port=args.port, vocabulary_path=args.vocabulary)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    sys.exit(main())

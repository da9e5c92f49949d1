"""Flask JSON API for the English/logic translator."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request

from .parser import Diagnostic
from .translator import (
    TranslationError,
    check_logic,
    translate_english_to_logic,
    translate_logic_to_english,
)
from .vocabulary import VocabularyError, VocabularyStore

logger = logging.getLogger(__name__)

app = Flask(__name__)

vocabulary_store = VocabularyStore.from_path(os.environ.get("FOLBRIDGE_VOCABULARY"))


def configure_vocabulary(path: Optional[str]) -> VocabularyStore:
    """Replace the process-wide vocabulary with the overrides stored at *path*."""
    global vocabulary_store
    vocabulary_store = VocabularyStore.from_path(path)
    return vocabulary_store


def diagnostic_to_dict(diagnostic: Diagnostic) -> Dict[str, Any]:
    return {
        "message": diagnostic.message,
        "line": diagnostic.line,
        "column": diagnostic.column,
        "character_offset": diagnostic.character_offset,
        "expected": [token_type.value for token_type in diagnostic.expected or ()],
        "actual": diagnostic.actual.value if diagnostic.actual is not None else None,
    }


def _error(exc: TranslationError):
    body: Dict[str, Any] = {"ok": False, "error": str(exc)}
    if exc.diagnostic is not None:
        body["diagnostic"] = diagnostic_to_dict(exc.diagnostic)
    return jsonify(body), 400


def _translate(func: Callable[[str], Any], payload: Optional[str]):
    if not isinstance(payload, str):
        raise TranslationError("request body must be JSON with a 'text' key")
    return func(payload)


@app.post("/api/english-to-logic")
def english_to_logic_endpoint():
    payload = request.get_json(silent=True) or {}
    vocabulary = vocabulary_store.current()
    try:
        result = _translate(lambda text: translate_english_to_logic(text, vocabulary), payload.get("text"))
    except TranslationError as exc:
        return _error(exc)
    return jsonify({"ok": True, "result": result})


@app.post("/api/logic-to-english")
def logic_to_english_endpoint():
    payload = request.get_json(silent=True) or {}
    try:
        result = _translate(translate_logic_to_english, payload.get("text"))
    except TranslationError as exc:
        return _error(exc)
    return jsonify({"ok": True, "result": result})


@app.post("/api/check")
def check_endpoint():
    payload = request.get_json(silent=True) or {}
    try:
        check = _translate(check_logic, payload.get("text"))
    except TranslationError as exc:
        return _error(exc)
    return jsonify(
        {
            "ok": True,
            "result": check.canonical,
            "valid": check.validation.ok,
            "errors": list(check.validation.errors),
            "variables": sorted(check.validation.in_scope_variables),
        }
    )


@app.get("/api/vocabulary")
def vocabulary_endpoint():
    vocabulary = vocabulary_store.current()
    return jsonify({"ok": True, "overrides": vocabulary.overrides, "predicates": vocabulary.predicates})


@app.post("/api/vocabulary")
def add_vocabulary_endpoint():
    payload = request.get_json(silent=True) or {}
    phrase = payload.get("phrase")
    predicate = payload.get("predicate")
    if not isinstance(phrase, str) or not isinstance(predicate, str):
        return jsonify({"ok": False, "error": "request body must be JSON with 'phrase' and 'predicate' keys"}), 400
    try:
        vocabulary = vocabulary_store.add_mapping(phrase, predicate)
    except VocabularyError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "overrides": vocabulary.overrides})


def run(host: str = "127.0.0.1", port: int = 8000, vocabulary_path: Optional[str] = None) -> None:
    """Start the Flask development server."""
    if vocabulary_path is not None:
        configure_vocabulary(vocabulary_path)
    logger.debug("serving on %s:%d", host, port)
    app.run(host=host, port=port, debug=False)


__all__ = [
    "app",
    "configure_vocabulary",
    "diagnostic_to_dict",
    "run",
]

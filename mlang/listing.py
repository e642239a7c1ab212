"""
Presentation of analysis results: token listings and error reports.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from .errors import MLangUserError
from .tokens import Token


def format_token(token: Token) -> str:
    return f"Token: {str(token.kind):<15} Lexeme: {token.lexeme:<10} Line: {token.line} Col: {token.column}"


def format_token_listing(tokens: Iterable[Token]) -> str:
    """One line per token; empty string for an empty stream."""
    lines = [format_token(t) for t in tokens]
    return "\n".join(lines) + "\n" if lines else ""


def token_to_dict(token: Token) -> Dict[str, Any]:
    return {
        "kind": str(token.kind),
        "lexeme": token.lexeme,
        "line": token.line,
        "column": token.column,
    }


def format_error(error: MLangUserError, phase: str) -> str:
    """Human-readable error line, e.g. ``Syntax error (UndeclaredVariable): Undeclared variable 'y' at 1:29``."""
    return f"{phase} error ({error.kind}): {error}"


def build_report(
    tokens: Optional[Iterable[Token]],
    error: Optional[MLangUserError] = None,
    phase: Optional[str] = None,
) -> Dict[str, Any]:
    """JSON-ready report; ``tokens`` is None when lexing failed."""
    token_list: Optional[List[Dict[str, Any]]] = None
    if tokens is not None:
        token_list = [token_to_dict(t) for t in tokens]
    err: Optional[Dict[str, Any]] = None
    if error is not None:
        err = error.to_dict()
        err["phase"] = phase
    return {"tokens": token_list, "ok": error is None, "error": err}


def dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


__all__ = [
    "format_token",
    "format_token_listing",
    "token_to_dict",
    "format_error",
    "build_report",
    "dumps",
]

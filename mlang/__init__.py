"""
mlang: lexical and syntax analysis for a small imperative teaching language.

Two phases run strictly in sequence: ``tokenize`` turns source text into a
TokenStream, ``parse_program`` validates it against the grammar while
checking declarations. ``analyze`` runs both.
"""

from __future__ import annotations

from .errors import MLangUserError
from .lexer import (
    Lexer,
    LexerError,
    LexState,
    MalformedNumberError,
    UnknownCharacterError,
    UnrecognizedOperatorError,
    UnterminatedCommentError,
    tokenize,
)
from .lexicon import DEFAULT_LEXICON, Lexicon, LexiconError, NumberShape, classify_number
from .parser import Parser, parse_program
from .pipeline import Analysis, analyze
from .symbols import SymbolTable
from .tokens import (
    DuplicateDeclarationError,
    NestingTooDeepError,
    ParserError,
    Token,
    TokenKind,
    TokenStream,
    UndeclaredVariableError,
    UnexpectedTokenError,
)

__all__ = [
    "MLangUserError",
    "Lexer",
    "LexerError",
    "LexState",
    "MalformedNumberError",
    "UnknownCharacterError",
    "UnrecognizedOperatorError",
    "UnterminatedCommentError",
    "tokenize",
    "DEFAULT_LEXICON",
    "Lexicon",
    "LexiconError",
    "NumberShape",
    "classify_number",
    "Parser",
    "parse_program",
    "Analysis",
    "analyze",
    "SymbolTable",
    "DuplicateDeclarationError",
    "ParserError",
    "Token",
    "TokenKind",
    "TokenStream",
    "UndeclaredVariableError",
    "NestingTooDeepError",
    "UnexpectedTokenError",
]

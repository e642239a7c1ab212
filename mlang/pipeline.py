"""
Main processing pipeline.

Lexing runs to completion before parsing starts; a lexical error stops the
pipeline before the parser is created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TextIO, Union

from .lexer import Lexer
from .lexicon import DEFAULT_LEXICON, Lexicon
from .nodes import Program
from .parser import Parser
from .symbols import SymbolTable
from .tokens import TokenStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Analysis:
    """Result of a successful analysis."""
    tokens: TokenStream
    program: Program
    symbols: SymbolTable


def analyze(source: Union[str, TextIO], lexicon: Lexicon = DEFAULT_LEXICON) -> Analysis:
    """
    Tokenizes and parses a program.

    Args:
        source: Source text or a readable text stream
        lexicon: Language tables shared by the lexer and the parser

    Returns:
        Tokens, syntax tree and symbol table

    Raises:
        LexerError: On lexical error (the parser does not run)
        ParserError: On the first syntax or semantic error
    """
    tokens = Lexer(lexicon).tokenize(source)
    parser = Parser(tokens, lexicon)
    program = parser.parse()
    logger.debug(
        "Analysis complete: %d declared names, %d statements",
        len(parser.symbols), len(program.statements),
    )
    return Analysis(tokens=tokens, program=program, symbols=parser.symbols)


__all__ = ["Analysis", "analyze"]

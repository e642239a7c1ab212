"""
Lexical analyzer.

A hand-written state machine over a CharStream. Each LexState has exactly one
transition method that receives the next character (None at end of stream)
and returns the next state:

- START: skips whitespace and comments, emits delimiters, dispatches letters,
  digits and operator characters to the accumulating states.
- IN_IDENTIFIER: letters and digits; the finished word is a keyword, a word
  operator (e.g. ``LE``, ``plus``) or an identifier.
- IN_NUMBER: digits plus literal characters; the finished lexeme must match
  one of the six numeric shapes.
- IN_OPERATOR_CANDIDATE: one character of lookahead decides between a
  two-character and a one-character operator (longest match).

The terminator of an identifier or number, and the rejected lookahead of an
operator candidate, are pushed back and lexed again from START.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, List, Optional, TextIO, Union

from .errors import MLangUserError
from .lexicon import DEFAULT_LEXICON, NUMBER_CHARS, Lexicon, classify_number, is_digit
from .stream import Char, CharStream
from .tokens import Token, TokenKind, TokenStream

logger = logging.getLogger(__name__)


class LexerError(MLangUserError):
    """Lexical analysis error located at the first character of the offending lexeme."""
    kind = "LexicalError"

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.message = message
        self.line = line
        self.column = column

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


class UnknownCharacterError(LexerError):
    kind = "UnknownCharacter"


class MalformedNumberError(LexerError):
    kind = "MalformedNumber"


class UnterminatedCommentError(LexerError):
    kind = "UnterminatedComment"


class UnrecognizedOperatorError(LexerError):
    kind = "UnrecognizedOperator"


class LexState(enum.Enum):
    """States of the lexer automaton."""
    START = "START"
    IN_IDENTIFIER = "IN_IDENTIFIER"
    IN_NUMBER = "IN_NUMBER"
    IN_OPERATOR_CANDIDATE = "IN_OPERATOR_CANDIDATE"


class Lexer:
    """
    Tokenizer for mlang source text.

    A Lexer instance owns its Lexicon and can tokenize any number of inputs;
    every call to ``tokenize`` starts from a clean state.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon
        self._transitions: Dict[LexState, Callable[[Optional[Char]], LexState]] = {
            LexState.START: self._on_start,
            LexState.IN_IDENTIFIER: self._on_identifier,
            LexState.IN_NUMBER: self._on_number,
            LexState.IN_OPERATOR_CANDIDATE: self._on_operator_candidate,
        }
        self._reset(CharStream(""))

    def _reset(self, stream: CharStream) -> None:
        self._stream = stream
        self._tokens = TokenStream()
        self._buffer: List[str] = []
        self._start: Optional[Char] = None

    def tokenize(self, source: Union[str, TextIO, CharStream]) -> TokenStream:
        """
        Tokenizes the whole input.

        Returns:
            Closed TokenStream in source order

        Raises:
            LexerError: On the first lexical error
        """
        stream = source if isinstance(source, CharStream) else CharStream(source)
        self._reset(stream)

        state = LexState.START
        while True:
            ch = stream.read()
            state = self._transitions[state](ch)
            if ch is None and state is LexState.START:
                break

        tokens = self._tokens.close(stream.line, stream.column)
        logger.debug("Tokenized %d tokens (end at %d:%d)", len(tokens), tokens.end_line, tokens.end_column)
        return tokens

    # ----------------------------- transitions ----------------------------- #

    def _on_start(self, ch: Optional[Char]) -> LexState:
        if ch is None:
            return LexState.START

        c = ch.value
        if c.isspace():
            return LexState.START

        if c.isalpha():
            self._begin(ch)
            return LexState.IN_IDENTIFIER

        if is_digit(c):
            self._begin(ch)
            return LexState.IN_NUMBER

        if c in self.lexicon.delimiters:
            if c == self.lexicon.comment_open:
                self._skip_comment(ch)
            else:
                self._emit(TokenKind.DELIMITER, c, ch)
            return LexState.START

        if self.lexicon.is_operator_start(c):
            self._begin(ch)
            return LexState.IN_OPERATOR_CANDIDATE

        raise UnknownCharacterError(f"Unknown character {c!r}", ch.line, ch.column)

    def _on_identifier(self, ch: Optional[Char]) -> LexState:
        if ch is not None and (ch.value.isalpha() or is_digit(ch.value)):
            self._buffer.append(ch.value)
            return LexState.IN_IDENTIFIER

        self._stream.unread()
        lexeme = self._take()
        if lexeme in self.lexicon.keywords:
            kind = TokenKind.KEYWORD
        elif lexeme in self.lexicon.word_operators:
            kind = TokenKind.OPERATOR
        else:
            kind = TokenKind.IDENTIFIER
        self._emit_started(kind, lexeme)
        return LexState.START

    def _on_number(self, ch: Optional[Char]) -> LexState:
        if ch is not None and (is_digit(ch.value) or ch.value in NUMBER_CHARS):
            self._buffer.append(ch.value)
            return LexState.IN_NUMBER

        start = self._start
        assert start is not None
        lexeme = self._take()
        if ch is not None and ch.value.isalpha():
            raise MalformedNumberError(
                f"Malformed number {lexeme + ch.value!r}", start.line, start.column
            )
        if classify_number(lexeme) is None:
            raise MalformedNumberError(f"Malformed number {lexeme!r}", start.line, start.column)

        self._stream.unread()
        self._emit_started(TokenKind.NUMBER, lexeme)
        return LexState.START

    def _on_operator_candidate(self, ch: Optional[Char]) -> LexState:
        start = self._start
        assert start is not None
        first = self._take()
        operators = self.lexicon.symbol_operators

        if ch is not None and first + ch.value in operators:
            self._emit(TokenKind.OPERATOR, first + ch.value, start)
            return LexState.START

        if first not in operators:
            raise UnrecognizedOperatorError(f"Unrecognized operator {first!r}", start.line, start.column)

        self._stream.unread()
        self._emit(TokenKind.OPERATOR, first, start)
        return LexState.START

    # ------------------------------- helpers ------------------------------- #

    def _skip_comment(self, opener: Char) -> None:
        close = self.lexicon.comment_close
        while True:
            ch = self._stream.read()
            if ch is None:
                raise UnterminatedCommentError(
                    f"Unterminated comment: expected {close!r}", opener.line, opener.column
                )
            if ch.value == close:
                return

    def _begin(self, ch: Char) -> None:
        self._start = ch
        self._buffer = [ch.value]

    def _take(self) -> str:
        lexeme = "".join(self._buffer)
        self._buffer = []
        return lexeme

    def _emit_started(self, kind: TokenKind, lexeme: str) -> None:
        start = self._start
        assert start is not None
        self._emit(kind, lexeme, start)

    def _emit(self, kind: TokenKind, lexeme: str, at: Char) -> None:
        self._tokens.append(Token(kind, lexeme, at.line, at.column))
        self._start = None


def tokenize(source: Union[str, TextIO], lexicon: Lexicon = DEFAULT_LEXICON) -> TokenStream:
    """
    Convenience function for tokenizing source text.

    Args:
        source: Source text or a readable text stream
        lexicon: Language tables to use

    Returns:
        Closed token stream

    Raises:
        LexerError: On lexical error
    """
    return Lexer(lexicon).tokenize(source)


__all__ = [
    "LexState",
    "Lexer",
    "LexerError",
    "UnknownCharacterError",
    "MalformedNumberError",
    "UnterminatedCommentError",
    "UnrecognizedOperatorError",
    "tokenize",
]

"""
Token model shared by the lexer and the parser.

A token is a lexeme classified by kind together with the location of its
first character. Token streams are produced once by the lexer and then only
read by the parser.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, overload

from .errors import MLangUserError


class TokenKind(enum.Enum):
    """Token kinds. EOF is never emitted by the lexer, only synthesized by the parser."""
    KEYWORD = "Keyword"
    OPERATOR = "Operator"
    DELIMITER = "Delimiter"
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    EOF = "EOF"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """
    Token with positional information for precise error reporting.
    """
    kind: TokenKind
    lexeme: str
    line: int           # 1-based line number
    column: int         # 1-based column of the first character

    def matches(self, kind: TokenKind, lexeme: Optional[str] = None) -> bool:
        """True if the token has the given kind (and lexeme, when given)."""
        return self.kind is kind and (lexeme is None or self.lexeme == lexeme)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"


class TokenStream(Sequence[Token]):
    """
    Ordered token sequence.

    Append-only while the lexer fills it; after ``close()`` it is read-only and
    records where the input ended so the parser can point at end of input.
    """

    def __init__(self, tokens: Sequence[Token] = ()):
        self._tokens: List[Token] = list(tokens)
        self._closed = False
        self.end_line = 1
        self.end_column = 1

    def append(self, token: Token) -> None:
        if self._closed:
            raise RuntimeError("Token stream is closed")
        self._tokens.append(token)

    def close(self, end_line: int, end_column: int) -> "TokenStream":
        self._closed = True
        self.end_line = end_line
        self.end_column = end_column
        return self

    @property
    def closed(self) -> bool:
        return self._closed

    def eof_token(self) -> Token:
        """Synthetic end-of-input token located just past the last character."""
        return Token(TokenKind.EOF, "", self.end_line, self.end_column)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> List[Token]: ...

    def __getitem__(self, index):
        return self._tokens[index]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenStream):
            return self._tokens == other._tokens
        if isinstance(other, list):
            return self._tokens == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"TokenStream({len(self._tokens)} tokens, end={self.end_line}:{self.end_column})"


class ParserError(MLangUserError):
    """
    Syntax analysis error.

    Carries the expected kind/lexeme (when a specific token was expected) and
    the actual token found. Semantic errors use the same shape.
    """
    kind = "SyntaxError"

    def __init__(
        self,
        message: str,
        token: Token,
        expected_kind: Optional[TokenKind] = None,
        expected_lexeme: Optional[str] = None,
    ):
        super().__init__(f"{message} at {token.line}:{token.column}")
        self.message = message
        self.token = token
        self.expected_kind = expected_kind
        self.expected_lexeme = expected_lexeme
        self.actual_kind = token.kind
        self.actual_lexeme = token.lexeme
        self.line = token.line
        self.column = token.column

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "expectedKind": str(self.expected_kind) if self.expected_kind is not None else None,
            "expectedLexeme": self.expected_lexeme,
            "actualKind": str(self.actual_kind),
            "actualLexeme": self.actual_lexeme,
            "line": self.line,
            "column": self.column,
        }


class UnexpectedTokenError(ParserError):
    kind = "UnexpectedToken"


class DuplicateDeclarationError(ParserError):
    kind = "DuplicateDeclaration"

    def __init__(self, token: Token, previous: Token):
        super().__init__(
            f"Variable '{token.lexeme}' is already declared (first declared at {previous.line}:{previous.column})",
            token,
        )
        self.previous = previous


class UndeclaredVariableError(ParserError):
    kind = "UndeclaredVariable"

    def __init__(self, token: Token):
        super().__init__(f"Undeclared variable '{token.lexeme}'", token)


class NestingTooDeepError(ParserError):
    kind = "NestingTooDeep"

    def __init__(self, token: Token):
        super().__init__("Nesting too deep", token)


__all__ = [
    "TokenKind",
    "Token",
    "TokenStream",
    "ParserError",
    "UnexpectedTokenError",
    "DuplicateDeclarationError",
    "UndeclaredVariableError",
    "NestingTooDeepError",
]

"""
Language tables.

A Lexicon bundles every closed set the analyzers consult: keywords, word and
symbol operators, delimiters, comment markers and the operator classes of the
expression grammar. Lexicons are immutable and validated on construction;
each Lexer owns one (DEFAULT_LEXICON unless configured otherwise).
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, Optional

from .errors import MLangUserError


class LexiconError(MLangUserError, ValueError):
    """Invalid language tables or lexicon configuration."""
    kind = "LexiconError"


class NumberShape(enum.Enum):
    """The six numeric literal shapes."""
    INTEGER = "integer"
    REAL = "real"
    EXPONENT = "exponent"
    BINARY = "binary"
    OCTAL = "octal"
    HEXADECIMAL = "hexadecimal"


# Checked in order; the shapes do not overlap.
NUMBER_PATTERNS = (
    (NumberShape.INTEGER, re.compile(r"\d+d?", re.ASCII)),
    (NumberShape.REAL, re.compile(r"\d*\.\d+(e[-+]?\d+)?", re.ASCII)),
    (NumberShape.EXPONENT, re.compile(r"\d+e[-+]?\d+", re.ASCII)),
    (NumberShape.BINARY, re.compile(r"[01]+b", re.ASCII)),
    (NumberShape.OCTAL, re.compile(r"[0-7]+o", re.ASCII)),
    (NumberShape.HEXADECIMAL, re.compile(r"[0-9a-fA-F]+h", re.ASCII)),
)

# Characters a numeric literal may accumulate besides digits
NUMBER_CHARS = frozenset(".eE+-bohd" + "abcdefABCDEF")


def is_digit(c: str) -> bool:
    """ASCII decimal digit; other Unicode digits are not part of numeric literals."""
    return "0" <= c <= "9"


# Keywords the grammar itself is built from; a lexicon may not drop them.
GRAMMAR_KEYWORDS = frozenset({
    "program", "var", "begin", "end", "int", "float", "bool", "as",
    "if", "then", "else", "for", "to", "do", "while", "read", "write",
    "true", "false",
})

# Delimiters the grammar itself is built from.
GRAMMAR_DELIMITERS = frozenset({";", ":", ",", "(", ")", ".", "[", "]"})


def classify_number(lexeme: str) -> Optional[NumberShape]:
    """Returns the shape the lexeme matches, or None for a malformed literal."""
    for shape, pattern in NUMBER_PATTERNS:
        if pattern.fullmatch(lexeme):
            return shape
    return None


def _frozen(values: Iterable[str]) -> FrozenSet[str]:
    if isinstance(values, str):
        raise LexiconError(f"Expected a list of strings, got {values!r}")
    return frozenset(str(v) for v in values)


def _is_word(value: str) -> bool:
    return bool(value) and value[0].isalpha() and value.isalnum()


@dataclass(frozen=True)
class Lexicon:
    """
    Immutable language tables.

    The operator classes (relational/additive/multiplicative/unary) are used by
    the parser; every member must be a declared word or symbol operator.
    Symbol operators may not start with a character numeric literals
    accumulate (such as `+` or `-`), since `1+2` would lex as one number.
    """
    keywords: FrozenSet[str]
    word_operators: FrozenSet[str]
    symbol_operators: FrozenSet[str]
    delimiters: FrozenSet[str]
    comment_open: str = "{"
    comment_close: str = "}"
    relational: FrozenSet[str] = field(default_factory=frozenset)
    additive: FrozenSet[str] = field(default_factory=frozenset)
    multiplicative: FrozenSet[str] = field(default_factory=frozenset)
    unary: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in ("keywords", "word_operators", "symbol_operators", "delimiters",
                     "relational", "additive", "multiplicative", "unary"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        self._validate()

    def _validate(self) -> None:
        for kw in self.keywords:
            if not _is_word(kw):
                raise LexiconError(f"Keyword {kw!r} must start with a letter and contain only letters and digits")
        for op in self.word_operators:
            if not _is_word(op):
                raise LexiconError(f"Word operator {op!r} must start with a letter and contain only letters and digits")
        clash = self.keywords & self.word_operators
        if clash:
            raise LexiconError(f"Lexemes declared both as keyword and operator: {', '.join(sorted(clash))}")

        for op in self.symbol_operators:
            if len(op) not in (1, 2) or any(ch.isalnum() or ch.isspace() for ch in op):
                raise LexiconError(f"Symbol operator {op!r} must be one or two non-alphanumeric characters")
        for d in self.delimiters:
            if len(d) != 1 or d.isalnum() or d.isspace():
                raise LexiconError(f"Delimiter {d!r} must be a single non-alphanumeric character")
        overlap = {op[0] for op in self.symbol_operators} & self.delimiters
        if overlap:
            raise LexiconError(f"Characters used both as delimiter and operator: {', '.join(sorted(overlap))}")
        numeric = {op for op in self.symbol_operators if op[0] in NUMBER_CHARS}
        if numeric:
            raise LexiconError(
                f"Symbol operators may not start with a numeric literal character: {', '.join(sorted(numeric))}"
            )

        for marker in (self.comment_open, self.comment_close):
            if marker not in self.delimiters:
                raise LexiconError(f"Comment marker {marker!r} must be a delimiter")
        if self.comment_open == self.comment_close:
            raise LexiconError("Comment markers must differ")

        missing = GRAMMAR_KEYWORDS - self.keywords
        if missing:
            raise LexiconError(f"Lexicon is missing grammar keywords: {', '.join(sorted(missing))}")
        missing = GRAMMAR_DELIMITERS - self.delimiters
        if missing:
            raise LexiconError(f"Lexicon is missing grammar delimiters: {' '.join(sorted(missing))}")
        if self.comment_open in GRAMMAR_DELIMITERS:
            raise LexiconError(f"Comment opener {self.comment_open!r} is a grammar delimiter")

        operators = self.word_operators | self.symbol_operators
        for cls in ("relational", "additive", "multiplicative", "unary"):
            unknown = getattr(self, cls) - operators
            if unknown:
                raise LexiconError(f"{cls} operators are not declared operators: {', '.join(sorted(unknown))}")

    # ---------------------------- lookups ---------------------------- #

    @property
    def operators(self) -> FrozenSet[str]:
        return self.word_operators | self.symbol_operators

    def is_operator_start(self, ch: str) -> bool:
        """True if some symbol operator begins with this character."""
        return any(op[0] == ch for op in self.symbol_operators)

    def with_overrides(self, **changes: Any) -> "Lexicon":
        """Returns a copy with the given tables replaced (validated again)."""
        return replace(self, **changes)


DEFAULT_LEXICON = Lexicon(
    keywords=GRAMMAR_KEYWORDS | {"not"},
    word_operators={"NE", "EQ", "LT", "LE", "GT", "GE", "plus", "min", "or", "mult", "div", "and"},
    symbol_operators={"~"},
    delimiters={";", ":", ",", "(", ")", ".", "=", "{", "}", "[", "]"},
    relational={"EQ", "NE", "LT", "LE", "GT", "GE"},
    additive={"plus", "min", "or"},
    multiplicative={"mult", "div", "and"},
    unary={"~"},
)


__all__ = [
    "Lexicon",
    "LexiconError",
    "NumberShape",
    "NUMBER_PATTERNS",
    "NUMBER_CHARS",
    "GRAMMAR_KEYWORDS",
    "GRAMMAR_DELIMITERS",
    "DEFAULT_LEXICON",
    "classify_number",
    "is_digit",
]

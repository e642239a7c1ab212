"""
Positioned character stream with a one-slot pushback buffer.
"""

from __future__ import annotations

import io
from typing import NamedTuple, Optional, TextIO, Union


class Char(NamedTuple):
    """A character together with its 1-based source location."""
    value: str
    line: int
    column: int


class CharStream:
    """
    Reads characters one at a time and tracks their line/column.

    ``unread()`` puts the most recently read character back into a single
    slot; the next ``read()`` returns it again with the same location. Only one
    character of pushback is available. Pushing back after end of stream is a
    no-op, so callers may unread unconditionally after a lookahead.
    """

    def __init__(self, source: Union[str, TextIO]):
        self._source: TextIO = io.StringIO(source) if isinstance(source, str) else source
        self._slot: Optional[Char] = None
        self._last: Optional[Char] = None
        # Location of the next character to be pulled from the source
        self._line = 1
        self._column = 1

    @property
    def line(self) -> int:
        """Line of the next character."""
        return self._slot.line if self._slot is not None else self._line

    @property
    def column(self) -> int:
        """Column of the next character."""
        return self._slot.column if self._slot is not None else self._column

    def read(self) -> Optional[Char]:
        """Returns the next character, or None at end of stream."""
        if self._slot is not None:
            ch, self._slot = self._slot, None
            self._last = ch
            return ch

        value = self._source.read(1)
        if not value:
            self._last = None
            return None

        ch = Char(value, self._line, self._column)
        if value == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        self._last = ch
        return ch

    def unread(self) -> None:
        """Pushes the last read character back."""
        if self._slot is not None:
            raise RuntimeError("CharStream supports only one character of pushback")
        if self._last is None:
            # Nothing to push back: end of stream (or nothing read yet)
            return
        self._slot, self._last = self._last, None

    def peek(self) -> Optional[Char]:
        """Returns the next character without consuming it."""
        ch = self.read()
        self.unread()
        return ch


__all__ = ["Char", "CharStream"]

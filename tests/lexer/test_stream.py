"""
Tests for the positioned character stream and its pushback slot.
"""

import io

import pytest

from mlang.stream import Char, CharStream


class TestCharStream:

    def test_locations_across_lines(self):
        """Columns are 1-based and restart after a newline"""
        stream = CharStream("ab\nc")
        chars = [stream.read() for _ in range(4)]

        assert chars == [
            Char("a", 1, 1),
            Char("b", 1, 2),
            Char("\n", 1, 3),
            Char("c", 2, 1),
        ]
        assert stream.read() is None

    def test_unread_returns_same_char_and_location(self):
        stream = CharStream("xy")
        first = stream.read()
        stream.unread()

        assert stream.read() == first
        assert stream.read() == Char("y", 1, 2)

    def test_unread_newline_keeps_next_position(self):
        """A pushed-back newline still reports the location it was read at"""
        stream = CharStream("a\nb")
        stream.read()
        newline = stream.read()
        assert (stream.line, stream.column) == (2, 1)

        stream.unread()
        assert (stream.line, stream.column) == (1, 2)
        assert stream.read() == newline
        assert stream.read() == Char("b", 2, 1)

    def test_only_one_character_of_pushback(self):
        stream = CharStream("abc")
        stream.read()
        stream.unread()

        with pytest.raises(RuntimeError, match="one character"):
            stream.unread()

    def test_unread_at_end_of_stream_is_noop(self):
        stream = CharStream("a")
        assert stream.read() == Char("a", 1, 1)
        assert stream.read() is None

        stream.unread()
        assert stream.read() is None

    def test_unread_before_any_read_is_noop(self):
        stream = CharStream("a")
        stream.unread()
        assert stream.read() == Char("a", 1, 1)

    def test_peek_does_not_consume(self):
        stream = CharStream("ab")
        assert stream.peek() == Char("a", 1, 1)
        assert stream.read() == Char("a", 1, 1)
        assert stream.peek() == Char("b", 1, 2)

    def test_peek_at_end(self):
        stream = CharStream("")
        assert stream.peek() is None
        assert stream.read() is None

    def test_reads_from_text_stream(self):
        stream = CharStream(io.StringIO("q"))
        assert stream.read() == Char("q", 1, 1)
        assert stream.read() is None

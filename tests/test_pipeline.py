"""
Tests for the two-phase analysis pipeline.
"""

import io

import pytest

from mlang import analyze
from mlang import pipeline
from mlang.lexer import LexerError, MalformedNumberError


class TestAnalyze:

    def test_success(self):
        result = analyze("program var x: int; begin x as 1; write(x) end.")

        assert len(result.tokens) == 17
        assert result.symbols.names == ["x"]
        assert len(result.program.statements) == 2

    def test_reads_text_stream(self):
        result = analyze(io.StringIO("program var x: int;\nbegin\n  read(x)\nend.\n"))
        assert result.program.statements[0].targets == ["x"]

    def test_lexical_error_stops_before_parsing(self, monkeypatch):
        """The parser is never constructed when lexing fails"""
        def fail(*args, **kwargs):
            raise AssertionError("parser must not run")

        monkeypatch.setattr(pipeline, "Parser", fail)
        with pytest.raises(MalformedNumberError):
            analyze("program var x: int; begin x as 12g end.")

    def test_lexical_error_reported_over_syntax_error(self):
        """A program that is also syntactically broken still fails lexically"""
        with pytest.raises(LexerError):
            analyze("begin program $")

    def test_each_run_is_independent(self):
        text = "program var x: int; begin x as 1 end."
        assert analyze(text).symbols.names == analyze(text).symbols.names == ["x"]

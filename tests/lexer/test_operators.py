"""
Tests for symbol operator lexing with one character of lookahead.

The default language has a single symbol operator ('~'); these tests use a
lexicon extended with '<', '<=' and '<>' to exercise longest match.
"""

import pytest

from mlang.lexer import Lexer, UnrecognizedOperatorError
from mlang.lexicon import DEFAULT_LEXICON
from mlang.tokens import Token, TokenKind


def lex(lexicon, text):
    return [(t.kind, t.lexeme, t.column) for t in Lexer(lexicon).tokenize(text)]


class TestLongestMatch:

    def test_two_character_operator(self, compare_lexicon):
        assert lex(compare_lexicon, "a<=b") == [
            (TokenKind.IDENTIFIER, "a", 1),
            (TokenKind.OPERATOR, "<=", 2),
            (TokenKind.IDENTIFIER, "b", 4),
        ]

    def test_single_character_fallback_pushes_back_lookahead(self, compare_lexicon):
        assert lex(compare_lexicon, "a<b") == [
            (TokenKind.IDENTIFIER, "a", 1),
            (TokenKind.OPERATOR, "<", 2),
            (TokenKind.IDENTIFIER, "b", 3),
        ]

    def test_pushed_back_delimiter_is_lexed_again(self, compare_lexicon):
        assert lex(compare_lexicon, "a< =b") == [
            (TokenKind.IDENTIFIER, "a", 1),
            (TokenKind.OPERATOR, "<", 2),
            (TokenKind.DELIMITER, "=", 4),
            (TokenKind.IDENTIFIER, "b", 5),
        ]

    def test_alternative_second_character(self, compare_lexicon):
        assert lex(compare_lexicon, "a<>b")[1] == (TokenKind.OPERATOR, "<>", 2)

    def test_two_character_operator_at_end_of_stream(self, compare_lexicon):
        tokens = Lexer(compare_lexicon).tokenize("a<=")
        assert list(tokens) == [
            Token(TokenKind.IDENTIFIER, "a", 1, 1),
            Token(TokenKind.OPERATOR, "<=", 1, 2),
        ]
        assert (tokens.end_line, tokens.end_column) == (1, 4)

    def test_single_character_operator_at_end_of_stream(self, compare_lexicon):
        assert lex(compare_lexicon, "a<") == [
            (TokenKind.IDENTIFIER, "a", 1),
            (TokenKind.OPERATOR, "<", 2),
        ]

    def test_operator_followed_by_newline(self, compare_lexicon):
        tokens = Lexer(compare_lexicon).tokenize("<\nb")
        assert list(tokens) == [
            Token(TokenKind.OPERATOR, "<", 1, 1),
            Token(TokenKind.IDENTIFIER, "b", 2, 1),
        ]


class TestUnrecognizedOperator:

    @pytest.fixture
    def strict_lexicon(self):
        """'<' starts an operator but is not one by itself"""
        return DEFAULT_LEXICON.with_overrides(
            symbol_operators={"~", "<="},
            relational=DEFAULT_LEXICON.relational | {"<="},
        )

    def test_lone_first_character_is_rejected(self, strict_lexicon):
        with pytest.raises(UnrecognizedOperatorError) as exc:
            Lexer(strict_lexicon).tokenize("a<b")
        assert exc.value.kind == "UnrecognizedOperator"
        assert (exc.value.line, exc.value.column) == (1, 2)

    def test_lone_first_character_at_end_of_stream(self, strict_lexicon):
        with pytest.raises(UnrecognizedOperatorError) as exc:
            Lexer(strict_lexicon).tokenize("a <")
        assert (exc.value.line, exc.value.column) == (1, 3)

    def test_valid_pair_still_accepted(self, strict_lexicon):
        assert lex(strict_lexicon, "a<=b")[1] == (TokenKind.OPERATOR, "<=", 2)

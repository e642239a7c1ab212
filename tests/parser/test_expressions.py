"""
Tests for the expression precedence ladder.

Expressions render fully parenthesized, so the nesting shows how operators
were grouped.
"""

import pytest

from mlang import analyze
from mlang.nodes import BinaryOp, BoolLiteral, NumberLiteral, UnaryOp, VarRef
from mlang.tokens import NestingTooDeepError, UnexpectedTokenError


class TestPrecedence:

    @pytest.mark.parametrize("source, expected", [
        ("a plus b mult c", "(a plus (b mult c))"),
        ("a mult b plus c", "((a mult b) plus c)"),
        ("a LT b plus 1", "(a LT (b plus 1))"),
        ("a or b and c", "(a or (b and c))"),
        ("(a plus b) mult c", "((a plus b) mult c)"),
        ("a div b mult c", "((a div b) mult c)"),
        ("a min b min c", "((a min b) min c)"),
        ("a EQ b NE c", "((a EQ b) NE c)"),
        ("~a and b", "(~a and b)"),
        ("~(a and b)", "~(a and b)"),
        ("~~a", "~~a"),
        ("a GE b mult ~c", "(a GE (b mult ~c))"),
    ])
    def test_grouping(self, parse_expr, source, expected):
        assert str(parse_expr(source)) == expected

    def test_node_types(self, parse_expr):
        expr = parse_expr("~a plus 1")

        assert isinstance(expr, BinaryOp)
        assert expr.operator == "plus"
        assert isinstance(expr.left, UnaryOp)
        assert isinstance(expr.left.operand, VarRef)
        assert isinstance(expr.right, NumberLiteral)

    def test_operator_token_location(self, parse_expr):
        expr = parse_expr("a mult b")
        # "program var a, b, c, d, x: int; begin x as a mult b end."
        assert (expr.token.line, expr.token.column) == (1, 46)

    def test_literals(self, parse_expr):
        assert isinstance(parse_expr("true"), BoolLiteral)
        assert parse_expr("false").value is False
        assert parse_expr("0FFh").lexeme == "0FFh"
        assert str(parse_expr("1.5e-3 plus 101b")) == "(1.5e-3 plus 101b)"

    def test_symbolic_relational_operators(self, parse_expr, compare_lexicon):
        assert str(parse_expr("a<=b plus 1", compare_lexicon)) == "(a <= (b plus 1))"


class TestExpressionErrors:

    def test_missing_factor(self):
        with pytest.raises(UnexpectedTokenError, match="Expected factor, got Keyword 'end'"):
            analyze("program var x: int; begin x as end.")

    def test_unbalanced_parenthesis(self):
        with pytest.raises(UnexpectedTokenError) as exc:
            analyze("program var x: int; begin x as (x plus 1 end.")
        assert exc.value.expected_lexeme == ")"

    def test_dangling_operator(self):
        with pytest.raises(UnexpectedTokenError, match="Expected factor"):
            analyze("program var x: int; begin x as x plus end.")

    def test_reserved_not_is_not_an_operator(self):
        with pytest.raises(UnexpectedTokenError, match="Expected factor, got Keyword 'not'"):
            analyze("program var x: bool; begin x as not x end.")


class TestDeepNesting:

    @pytest.mark.parametrize("expr", [
        "(" * 2000 + "1" + ")" * 2000,
        "~" * 5000 + "x",
    ])
    def test_reported_as_parser_error(self, expr):
        with pytest.raises(NestingTooDeepError) as exc:
            analyze(f"program var x: int; begin x as {expr} end.")
        assert exc.value.kind == "NestingTooDeep"
        assert exc.value.line == 1
        assert exc.value.column > 31

    def test_moderate_nesting_parses(self, parse_expr):
        expr = parse_expr("(" * 20 + "a" + ")" * 20)
        assert isinstance(expr, VarRef)

"""Tests for the parsing primitives and the expression grammar."""

import re

import pytest

from src.core.ast_nodes import (
    Add, Assign, Call, Div, Ident, Index, Mul, Negate, Pow, Real, Root, Sub,
)
from src.core.errors import NestingTooDeep, ParseError
from src.parsing.cursor import Cursor
from src.parsing.parser import parse


def expr(text: str):
    return parse(text).statements[0]


class TestCursor:
    def test_accept_literal_skips_horizontal_space(self):
        cursor = Cursor("  ab \t cd ")
        assert cursor.accept("ab")
        assert cursor.token == "ab"
        assert cursor.remaining == "cd"

    def test_failed_accept_changes_nothing(self):
        cursor = Cursor("ab")
        assert cursor.accept("a")
        assert not cursor.accept("x")
        assert cursor.token == "a"
        assert cursor.remaining == "b"

    def test_peek_does_not_consume(self):
        cursor = Cursor("cd")
        assert cursor.peek("c")
        assert cursor.peek(re.compile(r"[a-z]+"))
        assert cursor.remaining == "cd"

    def test_regex_is_anchored(self):
        cursor = Cursor("1 abc")
        assert not cursor.accept(re.compile(r"[a-z]+"))
        assert cursor.accept(re.compile(r"\d+"))
        assert cursor.accept(re.compile(r"[a-z]+"))
        assert cursor.token == "abc"
        assert cursor.at_end()

    def test_newline_is_not_skipped(self):
        cursor = Cursor("a\nb")
        cursor.accept("a")
        assert cursor.remaining == "\nb"

    def test_require_raises_with_pattern(self):
        cursor = Cursor("x")
        with pytest.raises(ParseError, match=r"syntax error: expected \)"):
            cursor.require(")")


class TestGrammar:
    def test_deterministic(self):
        text = "y[n] = (x[n] + x[n - 2]) / 4 + (x[n - 1] - y[n - 1]) / 2"
        assert parse(text) == parse(text)

    def test_power_is_right_associative(self):
        assert expr("2^3^2") == Pow(Real(2.0), Pow(Real(3.0), Real(2.0)))

    def test_precedence(self):
        assert expr("1 + 2 * 3") == Add(Real(1.0), Mul(Real(2.0), Real(3.0)))
        assert expr("2 * 3 ^ 2") == Mul(Real(2.0), Pow(Real(3.0), Real(2.0)))

    def test_left_associative_sum_and_product(self):
        assert expr("1 - 2 - 3") == Sub(Sub(Real(1.0), Real(2.0)), Real(3.0))
        assert expr("8 / 4 / 2") == Div(Div(Real(8.0), Real(4.0)), Real(2.0))

    def test_implicit_multiplication_matches_explicit(self):
        assert parse("y[n] = 2 x[n]") == parse("y[n] = 2*x[n]")

    def test_implicit_multiplication_is_greedy(self):
        assert expr("2 a b") == Mul(Mul(Real(2.0), Ident("a")), Ident("b"))
        assert expr("2 a 3 (b)") == Mul(Mul(Mul(Real(2.0), Ident("a")), Real(3.0)), Ident("b"))

    def test_identifier_before_paren_is_a_call(self):
        assert expr("2 a (b)") == Mul(Real(2.0), Call("a", [Ident("b")]))

    def test_implicit_binds_tighter_than_division(self):
        assert expr("1 / 2 a") == Div(Real(1.0), Mul(Real(2.0), Ident("a")))

    def test_index(self):
        assert expr("x[n - 1]") == Index(Ident("x"), Sub(Ident("n"), Real(1.0)))

    def test_chained_index(self):
        assert expr("a[1][2]") == Index(Index(Ident("a"), Real(1.0)), Real(2.0))

    def test_call(self):
        assert expr("f(a, 2)") == Call("f", [Ident("a"), Real(2.0)])

    def test_unary_minus_binds_to_atom(self):
        assert expr("-x") == Negate(Ident("x"))
        assert expr("-x[n]") == Index(Negate(Ident("x")), Ident("n"))
        assert expr("-2^2") == Pow(Negate(Real(2.0)), Real(2.0))

    def test_numbers(self):
        assert expr("0.25") == Real(0.25)
        assert expr("3.") == Real(3.0)
        assert expr("42") == Real(42.0)

    def test_identifiers_are_letters_any_case(self):
        assert expr("PI") == Ident("PI")

    def test_assignment(self):
        assert expr("a = 1") == Assign(Ident("a"), Real(1.0))

    def test_assignment_chain_is_left_associative(self):
        assert expr("a = b = 1") == Assign(Assign(Ident("a"), Ident("b")), Real(1.0))


class TestProgram:
    def test_statements_separated_by_newlines(self):
        root = parse("a = 0.5\n\ny[n] = a x[n]\n")
        assert isinstance(root, Root)
        assert len(root.statements) == 2
        assert root.statements[0] == Assign(Ident("a"), Real(0.5))

    def test_statements_separated_by_semicolons(self):
        root = parse("a = 1; b = 2;c = 3")
        assert [s.lhs for s in root.statements] == [Ident("a"), Ident("b"), Ident("c")]

    def test_trailing_input_is_ignored(self):
        assert parse("1 + 2 ) junk") == Root([Add(Real(1.0), Real(2.0))])

    def test_strict_rejects_trailing_input(self):
        with pytest.raises(ParseError, match="unexpected input"):
            parse("1 + 2 ) junk", strict=True)

    def test_strict_accepts_full_program(self):
        assert len(parse("a = 1\ny[n] = a x[n]", strict=True).statements) == 2


class TestErrors:
    def test_empty_input(self):
        with pytest.raises(ParseError, match="expected expression"):
            parse("")

    def test_unclosed_paren(self):
        with pytest.raises(ParseError, match=r"expected \)"):
            parse("(1 + 2")

    def test_unclosed_index(self):
        with pytest.raises(ParseError, match=r"expected \]"):
            parse("x[n")

    def test_call_needs_an_argument(self):
        with pytest.raises(ParseError, match="expected expression"):
            parse("f()")

    def test_dangling_operator(self):
        with pytest.raises(ParseError):
            parse("1 +")

    def test_nesting_limit(self):
        text = "(" * 100 + "1" + ")" * 100
        with pytest.raises(NestingTooDeep):
            parse(text, max_depth=64)

    def test_nesting_within_limit(self):
        text = "(" * 10 + "1" + ")" * 10
        assert expr(text) == Real(1.0)

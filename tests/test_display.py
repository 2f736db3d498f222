"""Tests for transfer-function formatting and rich display helpers."""

import math

from rich.tree import Tree

from src.filters.transfer_function import Term, TermKind, parse_terms
from src.parsing.parser import parse
from src.utils.display import (
    ast_tree, format_number, format_polynomial, format_transfer_function,
)

X, Y = TermKind.X, TermKind.Y


class TestFormatNumber:
    def test_integers_drop_decimal_point(self):
        assert format_number(2.0) == "2"
        assert format_number(-4.0) == "-4"

    def test_fractions(self):
        assert format_number(0.25) == "0.25"

    def test_non_finite(self):
        assert format_number(math.nan) == "nan"
        assert format_number(math.inf) == "inf"


class TestPolynomial:
    def test_highest_power_first(self):
        terms = [Term(X, 1.0, -1), Term(X, 2.0, 0), Term(X, 1.0, 1)]
        assert format_polynomial(terms) == "z + 2 + z^-1"

    def test_signs(self):
        assert format_polynomial([Term(Y, -2.0, 0), Term(Y, 4.0, 1)]) == "4z - 2"
        assert format_polynomial([Term(Y, -1.0, 2)]) == "-z^2"

    def test_unit_constant_is_written(self):
        assert format_polynomial([Term(Y, 1.0, 0)]) == "1"
        assert format_polynomial([Term(Y, -1.0, 0)]) == "-1"

    def test_empty(self):
        assert format_polynomial([]) == ""


class TestTransferFunction:
    def test_worked_example(self):
        terms = parse_terms("y[n] = (x[n] + x[n - 2]) / 4 + (x[n - 1] - y[n - 1]) / 2")
        assert format_transfer_function(terms) == "H(z) = (z + 2 + z^-1) / (4z - 2)"

    def test_empty_numerator_reads_as_one(self):
        terms = parse_terms("y[n] = 0.5 y[n - 1]")
        assert format_transfer_function(terms) == "H(z) = (1) / (z + 0.5)"


class TestAstTree:
    def test_tree_mirrors_structure(self):
        tree = ast_tree(parse("1 + f(a)").statements[0])
        assert isinstance(tree, Tree)
        assert "add" in str(tree.label)
        assert len(tree.children) == 2
        call = tree.children[1]
        assert "call" in str(call.label)
        assert len(call.children) == 1

"""Tests for core data structures: AST nodes and errors."""

import pytest

from src.core.ast_nodes import (
    Add, Assign, Call, Ident, Index, Mul, Negate, Pow, Real, Root, Sub, is_ident,
)
from src.core.errors import (
    ArityMismatch, EvaluationError, FilterError, MissingFilterDefinition,
    NestingTooDeep, ParseError, UndefinedVariable,
)


class TestExpr:
    def test_real(self):
        r = Real(0.5)
        assert r.size() == 1
        assert r.variables() == set()
        assert r.kind == "real"
        assert repr(r) == "0.5"
        assert repr(Real(2.0)) == "2"

    def test_ident(self):
        x = Ident("x")
        assert x.size() == 1
        assert x.variables() == {"x"}
        assert repr(x) == "x"

    def test_binary(self):
        expr = Add(Ident("a"), Mul(Real(2.0), Ident("b")))
        assert expr.size() == 5
        assert expr.variables() == {"a", "b"}
        assert repr(expr) == "(a + (2 * b))"

    def test_index(self):
        expr = Index(Ident("x"), Sub(Ident("n"), Real(1.0)))
        assert expr.kind == "index"
        assert expr.variables() == {"x", "n"}
        assert repr(expr) == "x[(n - 1)]"

    def test_call_args_become_tuple(self):
        expr = Call("f", [Ident("a"), Real(1.0)])
        assert expr.args == (Ident("a"), Real(1.0))
        assert expr.size() == 3
        assert repr(expr) == "f(a, 1)"

    def test_structural_equality(self):
        assert Pow(Real(2.0), Real(3.0)) == Pow(Real(2.0), Real(3.0))
        assert Add(Real(1.0), Real(2.0)) != Sub(Real(1.0), Real(2.0))
        assert hash(Negate(Ident("x"))) == hash(Negate(Ident("x")))

    def test_root(self):
        root = Root([Assign(Ident("a"), Real(1.0)), Ident("a")])
        assert root.statements[1] == Ident("a")
        assert root.kind == "root"
        assert repr(root) == "a = 1; a"

    def test_nodes_are_frozen(self):
        with pytest.raises(AttributeError):
            Ident("x").name = "y"

    def test_is_ident(self):
        assert is_ident(Ident("n"))
        assert is_ident(Ident("n"), "n")
        assert not is_ident(Ident("k"), "n")
        assert not is_ident(Real(1.0))


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(UndefinedVariable, EvaluationError)
        assert issubclass(EvaluationError, FilterError)
        assert issubclass(ParseError, FilterError)

    def test_messages(self):
        assert str(ParseError("expected )")) == "syntax error: expected )"
        assert str(MissingFilterDefinition()) == "must include definition for y[n]"
        assert str(ArityMismatch("f", 2, 1)) == "'f' requires 2 arguments, 1 arguments provided"
        assert NestingTooDeep(10).limit == 10

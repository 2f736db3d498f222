"""Real-number evaluation of AST expressions.

Arithmetic follows IEEE double semantics (x/0 is inf, sqrt(-1) is nan), so
the float work is routed through numpy with floating-point warnings off.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from src.core.ast_nodes import (
    Add, Call, Div, Expr, Ident, Mul, Negate, Pow, Real, Sub,
)
from src.core.errors import (
    ArityMismatch, EvaluationError, NestingTooDeep, NotEvaluable,
    UndefinedFunction, UndefinedVariable,
)
from src.evaluation.environment import Environment

log = logging.getLogger(__name__)

BUILTINS: dict[str, Callable[[np.float64], np.float64]] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "sqrt": np.sqrt,
}


class Evaluator:
    """Reduces expressions to floats against an Environment.

    Usage:
        evaluator = Evaluator()
        evaluator.evaluate(node, env)       # raises EvaluationError
        evaluator.try_evaluate(node, env)   # None if not evaluable
    """

    def __init__(self, max_depth: int = 256):
        self.max_depth = max_depth
        self._depth = 0

    def evaluate(self, node: Expr, env: Environment) -> float:
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(self.max_depth)
        try:
            return self._evaluate(node, env)
        finally:
            self._depth -= 1

    def try_evaluate(self, node: Expr, env: Environment) -> float | None:
        """Evaluate, or return None if `node` has no real value.

        NestingTooDeep is not an EvaluationError and always propagates.
        """
        try:
            return self.evaluate(node, env)
        except EvaluationError as e:
            log.debug("Not a scalar: %r (%s)", node, e)
            return None

    # ------------------------------------------------------------------ dispatch

    def _evaluate(self, node: Expr, env: Environment) -> float:
        if isinstance(node, Real):
            return node.value
        if isinstance(node, Add):
            return self.evaluate(node.lhs, env) + self.evaluate(node.rhs, env)
        if isinstance(node, Sub):
            return self.evaluate(node.lhs, env) - self.evaluate(node.rhs, env)
        if isinstance(node, Mul):
            return self.evaluate(node.lhs, env) * self.evaluate(node.rhs, env)
        if isinstance(node, Div):
            lhs = self.evaluate(node.lhs, env)
            rhs = self.evaluate(node.rhs, env)
            with np.errstate(divide="ignore", invalid="ignore"):
                return float(np.float64(lhs) / np.float64(rhs))
        if isinstance(node, Negate):
            return -self.evaluate(node.rhs, env)
        if isinstance(node, Pow):
            base = self.evaluate(node.lhs, env)
            exponent = self.evaluate(node.rhs, env)
            with np.errstate(all="ignore"):
                return float(np.power(np.float64(base), np.float64(exponent)))
        if isinstance(node, Ident):
            return self._lookup(node.name, env)
        if isinstance(node, Call):
            return self._call(node, env)
        raise NotEvaluable(f"'{node.kind}' expression")

    def _lookup(self, name: str, env: Environment) -> float:
        found = env.lookup(name)
        if found is None:
            raise UndefinedVariable(name)
        definition, scope = found
        return self.evaluate(definition, scope)

    def _call(self, node: Call, env: Environment) -> float:
        user = env.function(node.name)
        if user is not None:
            fn, defining_scope = user
            if len(node.args) != fn.arity:
                raise ArityMismatch(node.name, fn.arity, len(node.args))
            local = defining_scope.child()
            for param, arg in zip(fn.params, node.args):
                local.bind(param, arg, scope=env)
            return self.evaluate(fn.body, local)

        builtin = BUILTINS.get(node.name)
        if builtin is None:
            raise UndefinedFunction(node.name)
        if len(node.args) != 1:
            raise ArityMismatch(node.name, 1, len(node.args))
        value = self.evaluate(node.args[0], env)
        with np.errstate(all="ignore"):
            return float(builtin(np.float64(value)))


def evaluate(node: Expr, env: Environment | None = None, max_depth: int = 256) -> float:
    """Evaluate a single expression; convenience wrapper around Evaluator."""
    return Evaluator(max_depth=max_depth).evaluate(node, env or Environment())

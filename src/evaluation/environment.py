"""Scoped variable and function bindings.

Variables map to unevaluated AST nodes, not numbers: a definition is
evaluated every time it is referenced, which allows forward references
between helper variables. A function call gets a child scope whose
parameter bindings shadow the outer ones; the scope is dropped on return.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from src.core.ast_nodes import Expr, Real


@dataclass(frozen=True)
class Binding:
    """A deferred variable definition.

    `scope` is the environment the node must be evaluated in. None means the
    environment that holds the binding (used for top-level definitions).
    """

    node: Expr
    scope: Environment | None = None


@dataclass(frozen=True)
class FunctionDef:
    """A user function: f(a, b) = body."""

    params: tuple[str, ...]
    body: Expr

    @property
    def arity(self) -> int:
        return len(self.params)


class Environment:
    """One scope of variable and function bindings with an optional parent."""

    def __init__(self, parent: Environment | None = None):
        self.parent = parent
        self._variables: dict[str, Binding] = {}
        self._functions: dict[str, FunctionDef] = {}

    @classmethod
    def from_values(cls, values: Mapping[str, float]) -> Environment:
        """Build a root scope binding each name to a real literal."""
        env = cls()
        for name, value in values.items():
            env.bind(name, Real(float(value)))
        return env

    def child(self) -> Environment:
        return Environment(parent=self)

    # --- variables ---

    def bind(self, name: str, node: Expr, scope: Environment | None = None) -> None:
        self._variables[name] = Binding(node, scope)

    def lookup(self, name: str) -> tuple[Expr, Environment] | None:
        """Return (node, scope to evaluate it in), or None if unbound."""
        env: Environment | None = self
        while env is not None:
            binding = env._variables.get(name)
            if binding is not None:
                return binding.node, binding.scope or env
            env = env.parent
        return None

    # --- functions ---

    def define(self, name: str, params: list[str] | tuple[str, ...], body: Expr) -> None:
        self._functions[name] = FunctionDef(tuple(params), body)

    def function(self, name: str) -> tuple[FunctionDef, Environment] | None:
        """Return (definition, defining scope), or None if undefined."""
        env: Environment | None = self
        while env is not None:
            fn = env._functions.get(name)
            if fn is not None:
                return fn, env
            env = env.parent
        return None

    def names(self) -> Iterator[str]:
        seen: set[str] = set()
        env: Environment | None = self
        while env is not None:
            for name in env._variables:
                if name not in seen:
                    seen.add(name)
                    yield name
            env = env.parent

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __repr__(self) -> str:
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return f"Environment(vars={sorted(self._variables)}, funcs={sorted(self._functions)}, depth={depth})"

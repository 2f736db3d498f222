"""Abstract syntax tree nodes for difference-equation programs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Sequence


class Expr:
    """Base class for AST expressions.

    `kind` is the variant tag (real, ident, add, ...). Nodes are frozen and
    compare structurally, so two parses of the same text are equal.
    """

    kind: ClassVar[str] = ""

    def children(self) -> tuple[Expr, ...]:
        return ()

    def size(self) -> int:
        return 1 + sum(c.size() for c in self.children())

    def variables(self) -> set[str]:
        result: set[str] = set()
        for c in self.children():
            result |= c.variables()
        return result


@dataclass(frozen=True)
class Real(Expr):
    """A numeric literal: 2, 0.5, 3."""

    kind: ClassVar[str] = "real"

    value: float

    def __repr__(self) -> str:
        if float(self.value).is_integer():
            return str(int(self.value))
        return repr(self.value)


@dataclass(frozen=True)
class Ident(Expr):
    """A bare name: x, n, pi, a."""

    kind: ClassVar[str] = "ident"

    name: str

    def variables(self) -> set[str]:
        return {self.name}

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Negate(Expr):
    kind: ClassVar[str] = "negate"

    rhs: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.rhs,)

    def __repr__(self) -> str:
        return f"-{self.rhs!r}"


@dataclass(frozen=True)
class BinaryOp(Expr):
    """Shared shape of the arithmetic nodes."""

    symbol: ClassVar[str] = ""

    lhs: Expr
    rhs: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.lhs, self.rhs)

    def __repr__(self) -> str:
        return f"({self.lhs!r} {self.symbol} {self.rhs!r})"


@dataclass(frozen=True, repr=False)
class Add(BinaryOp):
    kind: ClassVar[str] = "add"
    symbol: ClassVar[str] = "+"


@dataclass(frozen=True, repr=False)
class Sub(BinaryOp):
    kind: ClassVar[str] = "sub"
    symbol: ClassVar[str] = "-"


@dataclass(frozen=True, repr=False)
class Mul(BinaryOp):
    kind: ClassVar[str] = "mul"
    symbol: ClassVar[str] = "*"


@dataclass(frozen=True, repr=False)
class Div(BinaryOp):
    kind: ClassVar[str] = "div"
    symbol: ClassVar[str] = "/"


@dataclass(frozen=True, repr=False)
class Pow(BinaryOp):
    kind: ClassVar[str] = "pow"
    symbol: ClassVar[str] = "^"


@dataclass(frozen=True)
class Index(Expr):
    """Postfix indexing: x[n - 1]."""

    kind: ClassVar[str] = "index"

    obj: Expr
    index: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.obj, self.index)

    def __repr__(self) -> str:
        return f"{self.obj!r}[{self.index!r}]"


@dataclass(frozen=True)
class Call(Expr):
    """Function application: sin(w), f(a, b)."""

    kind: ClassVar[str] = "call"

    name: str
    args: tuple[Expr, ...]

    def __init__(self, name: str, args: Sequence[Expr]):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "args", tuple(args))

    def children(self) -> tuple[Expr, ...]:
        return self.args

    def __repr__(self) -> str:
        args_str = ", ".join(repr(a) for a in self.args)
        return f"{self.name}({args_str})"


@dataclass(frozen=True)
class Assign(Expr):
    """lhs = rhs"""

    kind: ClassVar[str] = "assign"

    lhs: Expr
    rhs: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.lhs, self.rhs)

    def __repr__(self) -> str:
        return f"{self.lhs!r} = {self.rhs!r}"


@dataclass(frozen=True)
class Root(Expr):
    """An ordered sequence of top-level statements."""

    kind: ClassVar[str] = "root"

    statements: tuple[Expr, ...]

    def __init__(self, statements: Sequence[Expr]):
        object.__setattr__(self, "statements", tuple(statements))

    def children(self) -> tuple[Expr, ...]:
        return self.statements

    def __repr__(self) -> str:
        return "; ".join(repr(s) for s in self.statements)


def is_ident(node: Expr, name: str | None = None) -> bool:
    """True if `node` is an identifier (optionally with the given name)."""
    return isinstance(node, Ident) and (name is None or node.name == name)

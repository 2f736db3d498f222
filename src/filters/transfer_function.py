"""Transfer-function builder: difference equation text -> normalized terms.

Given a program such as

    a = 0.5
    y[n] = a x[n] + (1 - a) y[n - 1]

the builder finds the y[n] definition, binds helper variables and functions,
walks the right-hand side collecting signed x[n+k] / y[n+k] terms, combines
like terms and applies a cosmetic normalization (offset re-centering and
coefficient scaling) for display.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Mapping

import numpy as np

from src.core.ast_nodes import (
    Add, Assign, Call, Div, Expr, Ident, Index, Mul, Negate, Root, Sub, is_ident,
)
from src.core.errors import (
    EvaluationError, InvalidAssignmentTarget, InvalidSampleAccess,
    MissingFilterDefinition, NestingTooDeep, UnevaluableTermFactor,
)
from src.evaluation.environment import Environment
from src.evaluation.evaluator import Evaluator
from src.filters.config import FilterConfig
from src.parsing.parser import parse

log = logging.getLogger(__name__)

OFFSET_ERROR = "sample can only be accessed with an integer offset of n"


class TermKind(str, Enum):
    """Which signal a term samples: the input x or the filter's output y."""

    X = "x"
    Y = "y"


@dataclass(frozen=True)
class Term:
    """One monomial: coefficient * kind[n + offset]."""

    kind: TermKind
    coefficient: float
    offset: int

    def scaled(self, factor: float) -> Term:
        return replace(self, coefficient=self.coefficient * factor)

    def divided(self, divisor: float) -> Term:
        return replace(self, coefficient=_ieee_div(self.coefficient, divisor))

    def negated(self) -> Term:
        return replace(self, coefficient=-self.coefficient)

    def shifted(self, shift: int) -> Term:
        return replace(self, offset=self.offset + shift)

    def __repr__(self) -> str:
        return f"{self.kind.value}:{self.offset}:{self.coefficient}"


HEAD_TERM = Term(TermKind.Y, 1.0, 0)


@dataclass(frozen=True)
class SampleAccess:
    """A resolved `name[n + offset]` before validation."""

    name: str
    offset: float


def _ieee_div(a: float, b: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(a) / np.float64(b))


# ── Offset resolution ────────────────────────────────────────────────

def resolve_sample_access(node: Index, env: Environment, evaluator: Evaluator) -> SampleAccess:
    """Resolve `ident[n]`, `ident[n + E]`, `ident[E + n]` or `ident[n - E]`."""
    if not isinstance(node.obj, Ident):
        raise InvalidSampleAccess("tried to access non-variable")
    name = node.obj.name
    index = node.index

    if isinstance(index, Ident):
        if index.name != "n":
            raise InvalidSampleAccess(OFFSET_ERROR)
        return SampleAccess(name, 0.0)

    if isinstance(index, Add):
        if is_ident(index.lhs, "n"):
            return SampleAccess(name, evaluator.evaluate(index.rhs, env))
        if is_ident(index.rhs, "n"):
            return SampleAccess(name, evaluator.evaluate(index.lhs, env))
        raise InvalidSampleAccess(OFFSET_ERROR)

    if isinstance(index, Sub) and is_ident(index.lhs, "n"):
        return SampleAccess(name, -evaluator.evaluate(index.rhs, env))

    raise InvalidSampleAccess(OFFSET_ERROR)


# ── Term extraction ──────────────────────────────────────────────────

class TermExtractor:
    """Walks the right-hand side of y[n] = ... and collects signed terms."""

    def __init__(self, evaluator: Evaluator, max_depth: int = 256):
        self.evaluator = evaluator
        self.max_depth = max_depth
        self._depth = 0

    def get_terms(self, node: Expr, env: Environment) -> list[Term]:
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(self.max_depth)
        try:
            return self._get_terms(node, env)
        finally:
            self._depth -= 1

    def _get_terms(self, node: Expr, env: Environment) -> list[Term]:
        if isinstance(node, Index):
            return [self._sample_term(node, env)]

        if isinstance(node, Add):
            return self.get_terms(node.lhs, env) + self.get_terms(node.rhs, env)

        if isinstance(node, Sub):
            return self.get_terms(node.lhs, env) + [
                t.negated() for t in self.get_terms(node.rhs, env)
            ]

        if isinstance(node, Mul):
            try:
                factor = self.evaluator.evaluate(node.lhs, env)
            except EvaluationError:
                pass
            else:
                return [t.scaled(factor) for t in self.get_terms(node.rhs, env)]
            try:
                factor = self.evaluator.evaluate(node.rhs, env)
            except EvaluationError as e:
                raise UnevaluableTermFactor() from e
            return [t.scaled(factor) for t in self.get_terms(node.lhs, env)]

        if isinstance(node, Div):
            try:
                divisor = self.evaluator.evaluate(node.rhs, env)
            except EvaluationError as e:
                raise UnevaluableTermFactor() from e
            return [t.divided(divisor) for t in self.get_terms(node.lhs, env)]

        if isinstance(node, Negate):
            return [t.negated() for t in self.get_terms(node.rhs, env)]

        # Constants (and anything else) drop out of a linear difference equation
        return []

    def _sample_term(self, node: Index, env: Environment) -> Term:
        access = resolve_sample_access(node, env, self.evaluator)
        if access.name not in ("x", "y"):
            raise InvalidSampleAccess("only indexing of x or y is allowed")
        if access.name == "y" and access.offset == 0:
            raise InvalidSampleAccess("cannot recursively access y")
        if not float(access.offset).is_integer():
            raise InvalidSampleAccess(OFFSET_ERROR)
        return Term(TermKind(access.name), 1.0, int(access.offset))


# ── Program scanning ─────────────────────────────────────────────────

def _is_filter_head(node: Expr) -> bool:
    return isinstance(node, Index) and is_ident(node.obj, "y") and is_ident(node.index, "n")


def build_environment(
    root: Root,
    variables: Mapping[str, float] | None = None,
    config: FilterConfig | None = None,
) -> tuple[Expr | None, Environment]:
    """Bind helper definitions from `root` into a fresh environment.

    Returns (right-hand side of y[n] = ..., environment). The right-hand side
    is None when the program has no filter definition.
    """
    config = config or FilterConfig()
    env = Environment.from_values({**config.constants, **(variables or {})})
    definition: Expr | None = None

    for stmt in root.statements:
        if not isinstance(stmt, Assign):
            continue
        lhs = stmt.lhs
        if _is_filter_head(lhs):
            if definition is not None:
                raise InvalidAssignmentTarget("y[n] can only be defined once")
            definition = stmt.rhs
        elif isinstance(lhs, Ident):
            env.bind(lhs.name, stmt.rhs)
        elif isinstance(lhs, Call) and all(isinstance(a, Ident) for a in lhs.args):
            env.define(lhs.name, [a.name for a in lhs.args], stmt.rhs)
        else:
            raise InvalidAssignmentTarget(f"cannot assign to '{lhs!r}'")

    return definition, env


# ── Combination and normalization ────────────────────────────────────

def combine_terms(terms: list[Term]) -> list[Term]:
    """Merge terms with the same (kind, offset), keeping first-seen order."""
    combined: dict[tuple[TermKind, int], Term] = {}
    for term in terms:
        key = (term.kind, term.offset)
        seen = combined.get(key)
        if seen is None:
            combined[key] = term
        else:
            combined[key] = replace(seen, coefficient=seen.coefficient + term.coefficient)
    return list(combined.values())


def gcd(a: float, b: float) -> float:
    """Euclidean gcd on floats. Stops on a zero or nan remainder."""
    while b and not math.isnan(b):
        a, b = b, a % b
    return a


def lcm(a: float, b: float) -> float:
    return a * b / gcd(a, b)


def normalization(terms: list[Term]) -> tuple[int, float]:
    """Return (offset shift, coefficient scale) for `terms`.

    The shift re-centers offsets around n. The scale tries to turn fractional
    coefficients into whole numbers: it is the lcm of every 1/|c| > 1 and
    every |c| > 1, applied only when at least two coefficients are
    fractional. Zero coefficients are skipped.
    """
    offsets = [t.offset for t in terms]
    shift = math.ceil((max(offsets) - min(offsets)) / 2)

    magnitudes = [abs(t.coefficient) for t in terms if t.coefficient != 0]
    inverse = [1 / m for m in magnitudes if 1 / m > 1]
    direct = [m for m in magnitudes if m > 1]
    scale = 1.0 if len(inverse) < 2 else reduce(lcm, inverse + direct)
    return shift, scale


def simplify_terms(terms: list[Term]) -> list[Term]:
    """Apply the display normalization from normalization() to every term."""
    if not terms:
        return []
    shift, scale = normalization(terms)
    log.debug("Normalizing %d terms: shift=%d scale=%g", len(terms), shift, scale)
    return [t.scaled(scale).shifted(shift) for t in terms]


# ── Public API ───────────────────────────────────────────────────────

def extract_terms(
    text: str,
    variables: Mapping[str, float] | None = None,
    config: FilterConfig | None = None,
) -> list[Term]:
    """Parse `text` and return combined terms, before normalization."""
    config = config or FilterConfig()
    try:
        root = parse(text, strict=config.strict, max_depth=config.max_depth)
        definition, env = build_environment(root, variables, config)
        if definition is None:
            raise MissingFilterDefinition()

        evaluator = Evaluator(max_depth=config.max_eval_depth)
        extractor = TermExtractor(evaluator, max_depth=config.max_eval_depth)
        terms = [HEAD_TERM] + extractor.get_terms(definition, env)
    except RecursionError as e:
        raise NestingTooDeep(config.max_eval_depth) from e

    log.debug("Extracted %d raw terms from %r", len(terms), definition)
    return combine_terms(terms)


def parse_terms(
    text: str,
    variables: Mapping[str, float] | None = None,
    config: FilterConfig | None = None,
) -> list[Term]:
    """Parse a difference equation into normalized transfer-function terms.

    Args:
        text: Program text containing one `y[n] = ...` statement and any
            number of helper assignments (`a = 0.5`, `f(k) = k / 2`).
        variables: Extra named values (e.g. slider settings), bound as
            literals alongside the configured constants.
        config: Depth limit, strictness and constants.

    Returns:
        Combined and normalized terms; the y[n] head term is always present.

    Raises:
        FilterError subclasses; no partial result is produced.
    """
    return simplify_terms(extract_terms(text, variables, config))

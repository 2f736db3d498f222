"""Error hierarchy for parsing, evaluating and building transfer functions.

Every failure aborts the whole call with one of these. Messages are meant to
be shown to the user verbatim.
"""

from __future__ import annotations


class FilterError(Exception):
    """Base class for all errors raised by the filter pipeline."""


class ParseError(FilterError):
    """Unexpected or missing token in the input text."""

    def __init__(self, message: str):
        super().__init__(f"syntax error: {message}")


class NestingTooDeep(FilterError):
    """Expression nesting exceeded the configured depth limit."""

    def __init__(self, limit: int):
        super().__init__(f"expression nested too deeply (limit {limit})")
        self.limit = limit


# --- Evaluation ---

class EvaluationError(FilterError):
    """An expression could not be reduced to a real number."""


class UndefinedVariable(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"cannot access undefined variable '{name}'")
        self.name = name


class UndefinedFunction(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"cannot call undefined function '{name}'")
        self.name = name


class ArityMismatch(EvaluationError):
    def __init__(self, name: str, expected: int, given: int):
        plural = "argument" if expected == 1 else "arguments"
        super().__init__(
            f"'{name}' requires {expected} {plural}, {given} arguments provided"
        )
        self.name = name
        self.expected = expected
        self.given = given


class NotEvaluable(EvaluationError):
    def __init__(self, what: str = "expression"):
        super().__init__(f"cannot evaluate {what} to real number")


# --- Transfer-function building ---

class InvalidSampleAccess(FilterError):
    """Indexing something other than x/y, recursive y[n], or a bad offset."""


class InvalidAssignmentTarget(FilterError):
    """Left side of an assignment is not a name or a function signature."""


class MissingFilterDefinition(FilterError):
    def __init__(self):
        super().__init__("must include definition for y[n]")


class UnevaluableTermFactor(FilterError):
    def __init__(self):
        super().__init__("could not evaluate term factors")


class UnsupportedExponent(FilterError, ValueError):
    """Complex power with an exponent that is not a real integer."""

    def __init__(self):
        super().__init__("Only real integers exponents supported")

"""Recursive-descent parser for difference-equation programs.

Grammar, lowest precedence first:

    program   := statement (SEP statement)*        -- SEP is newline or ';'
    statement := sum ('=' sum)*                     -- left-assoc assignment chain
    sum       := product (('+' | '-') product)*
    product   := implicit (('*' | '/') implicit)*
    implicit  := power power*                       -- while next is ident/number/'('
    power     := index ('^' power)?                 -- right-assoc
    index     := atom ('[' statement ']')*
    atom      := '(' statement ')' | '-' atom | NUMBER | IDENT ('(' args ')')?
    args      := statement (',' statement)*

Trailing input after the last statement is ignored unless `strict` is set.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from src.core.ast_nodes import (
    Add, Assign, Call, Div, Expr, Ident, Index, Mul, Negate, Pow, Real, Root, Sub,
)
from src.core.errors import NestingTooDeep
from src.parsing.cursor import Cursor

log = logging.getLogger(__name__)

IDENTIFIER = re.compile(r"[a-z]+", re.IGNORECASE)
NUMBER = re.compile(r"\d+(\.(\d+)?)?")
SEPARATOR = re.compile(r"[;\r\n][;\s]*")

DEFAULT_MAX_DEPTH = 64


class Parser:
    """Parses one program text into a Root node.

    Usage:
        root = Parser("y[n] = x[n] / 2").parse()
    """

    def __init__(self, text: str, strict: bool = False, max_depth: int = DEFAULT_MAX_DEPTH):
        self._cursor = Cursor(text)
        self.strict = strict
        self.max_depth = max_depth
        self._depth = 0

    # ------------------------------------------------------------------ public

    def parse(self) -> Root:
        statements = [self.parse_statement()]
        while self._cursor.accept(SEPARATOR) and not self._cursor.at_end():
            statements.append(self.parse_statement())

        if not self._cursor.at_end():
            if self.strict:
                self._cursor.error(f"unexpected input {self._cursor.remaining[:20]!r}")
            log.debug("Ignoring trailing input %r", self._cursor.remaining)

        log.debug("Parsed %d statement(s)", len(statements))
        return Root(statements)

    # ------------------------------------------------------------------ rules

    def parse_statement(self) -> Expr:
        return self._nested(self._parse_assign)

    def _parse_assign(self) -> Expr:
        lhs = self._parse_sum()
        while self._cursor.accept("="):
            lhs = Assign(lhs, self._parse_sum())
        return lhs

    def _parse_sum(self) -> Expr:
        lhs = self._parse_product()
        while True:
            if self._cursor.accept("+"):
                lhs = Add(lhs, self._parse_product())
            elif self._cursor.accept("-"):
                lhs = Sub(lhs, self._parse_product())
            else:
                return lhs

    def _parse_product(self) -> Expr:
        lhs = self._parse_implicit_mul()
        while True:
            if self._cursor.accept("*"):
                lhs = Mul(lhs, self._parse_implicit_mul())
            elif self._cursor.accept("/"):
                lhs = Div(lhs, self._parse_implicit_mul())
            else:
                return lhs

    def _parse_implicit_mul(self) -> Expr:
        lhs = self._parse_pow()
        cursor = self._cursor
        while cursor.peek(IDENTIFIER) or cursor.peek(NUMBER) or cursor.peek("("):
            lhs = Mul(lhs, self._parse_pow())
        return lhs

    def _parse_pow(self) -> Expr:
        lhs = self._parse_index()
        if self._cursor.accept("^"):
            return Pow(lhs, self._nested(self._parse_pow))
        return lhs

    def _parse_index(self) -> Expr:
        lhs = self._parse_atom()
        while self._cursor.accept("["):
            lhs = Index(lhs, self.parse_statement())
            self._cursor.require("]")
        return lhs

    def _parse_atom(self) -> Expr:
        cursor = self._cursor
        if cursor.accept("("):
            expr = self.parse_statement()
            cursor.require(")")
            return expr

        if cursor.accept("-"):
            return Negate(self._nested(self._parse_atom))

        if cursor.accept(NUMBER):
            return Real(float(cursor.token))

        if cursor.accept(IDENTIFIER):
            name = cursor.token
            if not cursor.accept("("):
                return Ident(name)
            args = [self.parse_statement()]
            while cursor.accept(","):
                args.append(self.parse_statement())
            cursor.require(")")
            return Call(name, args)

        cursor.error("expected expression")

    # ------------------------------------------------------------------ helpers

    def _nested(self, rule: Callable[[], Expr]) -> Expr:
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(self.max_depth)
        try:
            return rule()
        finally:
            self._depth -= 1


def parse(text: str, strict: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> Root:
    """Parse program text into a Root of statements."""
    try:
        return Parser(text, strict=strict, max_depth=max_depth).parse()
    except RecursionError as e:
        raise NestingTooDeep(max_depth) from e

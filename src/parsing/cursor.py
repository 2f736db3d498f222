"""Parsing primitives: a stateful cursor with accept / peek / require.

Grammar rules consume input only through these calls. `accept` commits only
on success, so a failed alternative leaves the cursor untouched and the next
alternative can be tried without any rewind.
"""

from __future__ import annotations

import re
from typing import Pattern, Union

from src.core.errors import ParseError

TokenPattern = Union[str, Pattern[str]]

_HORIZONTAL_SPACE = re.compile(r"[ \t]+")


def describe(pattern: TokenPattern) -> str:
    """Human-readable form of a pattern for 'expected ...' messages."""
    if isinstance(pattern, str):
        return pattern
    return f"/{pattern.pattern}/"


class Cursor:
    """Cursor over a trimmed input string."""

    def __init__(self, text: str):
        self.remaining = text.strip()
        self.token = ""

    def _match(self, pattern: TokenPattern) -> str | None:
        if isinstance(pattern, str):
            return pattern if self.remaining.startswith(pattern) else None
        m = pattern.match(self.remaining)
        return m.group(0) if m else None

    def accept(self, pattern: TokenPattern) -> bool:
        """Consume `pattern` plus trailing spaces/tabs; set `token` on success."""
        matched = self._match(pattern)
        if matched is None:
            return False
        self.token = matched
        rest = self.remaining[len(matched):]
        space = _HORIZONTAL_SPACE.match(rest)
        self.remaining = rest[space.end():] if space else rest
        return True

    def peek(self, pattern: TokenPattern) -> bool:
        return bool(self._match(pattern))

    def require(self, pattern: TokenPattern) -> None:
        if not self.accept(pattern):
            self.error(f"expected {describe(pattern)}")

    def error(self, message: str):
        raise ParseError(message)

    def at_end(self) -> bool:
        return not self.remaining

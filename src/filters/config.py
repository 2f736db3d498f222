"""Configuration for the transfer-function pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


def default_constants() -> dict[str, float]:
    return {"pi": math.pi, "e": math.e}


@dataclass
class FilterConfig:
    """Knobs shared by parsing, term extraction and response sampling."""

    max_depth: int = 64                 # parenthesis/call nesting limit for the parser
    max_eval_depth: int = 256           # tree depth limit for evaluation and term extraction
    strict: bool = False                # reject trailing input after the last statement
    constants: dict[str, float] = field(default_factory=default_constants)
    response_points: int = 800          # samples across the response span
    response_span: float = math.pi      # sample theta in [0, span)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_eval_depth < 1:
            raise ValueError(f"max_eval_depth must be positive, got {self.max_eval_depth}")
        if self.response_points < 1:
            raise ValueError(f"response_points must be positive, got {self.response_points}")

from src.core.ast_nodes import (
    Expr, Real, Ident, Negate, Add, Sub, Mul, Div, Pow, Index, Call, Assign, Root,
)
from src.core.complex import Complex

__all__ = [
    "Expr", "Real", "Ident", "Negate", "Add", "Sub", "Mul", "Div", "Pow",
    "Index", "Call", "Assign", "Root", "Complex",
]

"""Text formatting and rich console display for transfer functions."""

from __future__ import annotations

import math
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from src.core.ast_nodes import Call, Expr, Ident, Real, Root
from src.filters.response import ResponseSample, transfer_function
from src.filters.transfer_function import Term, TermKind

console = Console()


def format_number(value: float) -> str:
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return f"{value:.6g}"


def format_polynomial(terms: Sequence[Term]) -> str:
    """Render terms as a polynomial in z, highest power first.

    Unit coefficients are omitted except on the constant term, e.g.
    [x:1:1, x:0:2, x:-1:1] -> "z + 2 + z^-1".
    """
    parts: list[str] = []
    for i, term in enumerate(sorted(terms, key=lambda t: t.offset, reverse=True)):
        negative = term.coefficient < 0
        if i == 0:
            sign = "-" if negative else ""
        else:
            sign = " - " if negative else " + "

        magnitude = abs(term.coefficient)
        if magnitude == 1:
            coefficient = "1" if term.offset == 0 else ""
        else:
            coefficient = format_number(magnitude)

        if term.offset == 0:
            power = ""
        elif term.offset == 1:
            power = "z"
        else:
            power = f"z^{term.offset}"

        parts.append(f"{sign}{coefficient}{power}")
    return "".join(parts)


def _fraction_parts(terms: Sequence[Term]) -> tuple[str, str]:
    numerator, denominator = transfer_function(terms)
    num = format_polynomial(numerator) if numerator else "1"
    return num, format_polynomial(denominator)


def format_transfer_function(terms: Sequence[Term]) -> str:
    """H(z) = (numerator) / (denominator); an empty numerator reads as 1."""
    num, den = _fraction_parts(terms)
    return f"H(z) = ({num}) / ({den})"


def display_terms(terms: Sequence[Term], title: str = "Terms") -> None:
    """Display a term list as a table."""
    table = Table(title=title)
    table.add_column("Signal", style="cyan")
    table.add_column("Offset", style="yellow", justify="right")
    table.add_column("Coefficient", style="green", justify="right")

    for term in terms:
        signal = "x" if term.kind == TermKind.X else "y"
        table.add_row(signal, f"{term.offset:+d}", format_number(term.coefficient))

    console.print(table)


def display_transfer_function(terms: Sequence[Term]) -> None:
    """Show H(z) as a stacked fraction, with the one-line form underneath."""
    num, den = _fraction_parts(terms)
    width = max(len(num), len(den))
    body = f"{num.center(width)}\n{'─' * width}\n{den.center(width)}"
    console.print(Panel(body, title="H(z)", border_style="blue", expand=False))
    console.print(f"[dim]{escape(format_transfer_function(terms))}[/dim]")


def _ast_label(node: Expr) -> str:
    if isinstance(node, Real):
        return f"[green]real[/green] {format_number(node.value)}"
    if isinstance(node, Ident):
        return f"[cyan]ident[/cyan] {node.name}"
    if isinstance(node, Call):
        return f"[magenta]call[/magenta] {node.name}"
    if isinstance(node, Root):
        return f"[bold]root[/bold] ({len(node.statements)} statements)"
    return f"[yellow]{node.kind}[/yellow]"


def ast_tree(node: Expr, tree: Tree | None = None) -> Tree:
    """Build a rich Tree mirroring the AST."""
    branch = Tree(_ast_label(node)) if tree is None else tree.add(_ast_label(node))
    for child in node.children():
        ast_tree(child, branch)
    return branch


def display_ast(node: Expr) -> None:
    console.print(Panel(ast_tree(node), title="Syntax Tree", border_style="blue"))


def display_response(samples: Sequence[ResponseSample], rows: int = 16) -> None:
    """Display an evenly thinned selection of response samples."""
    table = Table(title=f"Frequency Response ({len(samples)} samples)")
    table.add_column("θ / π", style="cyan", justify="right")
    table.add_column("|H|", style="green", justify="right")
    table.add_column("Phase", style="yellow", justify="right")
    table.add_column("Visual", style="blue")

    if not samples:
        console.print(table)
        return

    step = max(1, len(samples) // max(rows, 1))
    peak = max((s.magnitude for s in samples if math.isfinite(s.magnitude)), default=0.0)
    for sample in samples[::step]:
        filled = int(sample.magnitude / peak * 20) if peak > 0 and math.isfinite(sample.magnitude) else 0
        bar = "█" * filled + "░" * (20 - filled)
        table.add_row(
            f"{sample.theta / math.pi:.3f}",
            f"{sample.magnitude:.4f}",
            f"{sample.phase:.4f}",
            bar,
        )

    console.print(table)

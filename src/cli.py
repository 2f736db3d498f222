"""CLI interface for deriving transfer functions from difference equations.

Usage:
    filterz terms "y[n] = (x[n] + x[n-2])/4 + (x[n-1] - y[n-1])/2"
    filterz terms "y[n] = a x[n] + (1 - a) y[n-1]" -v a=0.2 --raw
    filterz response "y[n] = x[n] + x[n-1]" --points 400 --rows 20
    filterz ast "2^3^2"
    filterz eval "f(k) = k/2; f(pi)"
"""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from src.core.errors import FilterError

console = Console()


def _parse_assignments(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, float]:
    variables: dict[str, float] = {}
    for item in values:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name.isalpha():
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}")
        try:
            variables[name] = float(raw)
        except ValueError:
            raise click.BadParameter(f"value for {name!r} is not a number: {raw!r}")
    return variables


variable_option = click.option(
    "-v", "--var", "variables", multiple=True, callback=_parse_assignments,
    help="Bind a named value, e.g. -v a=0.5 (repeatable)",
)


def _fail(error: FilterError) -> None:
    console.print(f"[red]{escape(str(error))}[/red]")
    sys.exit(1)


@click.group()
@click.option("--log-level", default="WARNING",
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging verbosity")
@click.option("--strict", is_flag=True, help="Reject trailing input after the last statement")
@click.option("--max-depth", default=64, help="Maximum expression nesting depth")
@click.pass_context
def main(ctx: click.Context, log_level: str, strict: bool, max_depth: int) -> None:
    """Derive and evaluate transfer functions of digital filters."""
    from src.filters.config import FilterConfig

    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = FilterConfig(max_depth=max_depth, strict=strict)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--max-depth")


@main.command()
@click.argument("equation")
@variable_option
@click.option("--raw", is_flag=True, help="Show combined terms without normalization")
@click.pass_context
def terms(ctx: click.Context, equation: str, variables: dict[str, float], raw: bool) -> None:
    """Show the transfer-function terms of a difference equation."""
    from src.filters.transfer_function import extract_terms, parse_terms
    from src.utils.display import display_terms, display_transfer_function

    config = ctx.obj["config"]
    try:
        if raw:
            result = extract_terms(equation, variables, config)
        else:
            result = parse_terms(equation, variables, config)
    except FilterError as e:
        _fail(e)
        return

    display_terms(result, title="Combined Terms" if raw else "Normalized Terms")
    display_transfer_function(result)


@main.command()
@click.argument("equation")
@variable_option
@click.option("--points", default=None, type=int, help="Number of samples over [0, pi)")
@click.option("--rows", default=16, help="Number of rows to display")
@click.pass_context
def response(ctx: click.Context, equation: str, variables: dict[str, float],
             points: int | None, rows: int) -> None:
    """Sample the magnitude and phase response on the unit circle."""
    from src.filters.response import frequency_response
    from src.filters.transfer_function import parse_terms
    from src.utils.display import display_response, display_transfer_function

    config = ctx.obj["config"]
    if points is not None and points < 1:
        raise click.BadParameter("must be positive", param_hint="--points")
    try:
        result = parse_terms(equation, variables, config)
        samples = frequency_response(
            result,
            points=points or config.response_points,
            span=config.response_span,
        )
    except FilterError as e:
        _fail(e)
        return

    display_transfer_function(result)
    display_response(samples, rows=rows)


@main.command()
@click.argument("expression")
@click.pass_context
def ast(ctx: click.Context, expression: str) -> None:
    """Print the syntax tree of an expression or program."""
    from src.parsing.parser import parse
    from src.utils.display import display_ast

    config = ctx.obj["config"]
    try:
        root = parse(expression, strict=config.strict, max_depth=config.max_depth)
    except FilterError as e:
        _fail(e)
        return

    display_ast(root.statements[0] if len(root.statements) == 1 else root)


@main.command("eval")
@click.argument("expression")
@variable_option
@click.pass_context
def eval_(ctx: click.Context, expression: str, variables: dict[str, float]) -> None:
    """Evaluate the last non-assignment statement to a real number."""
    from src.core.ast_nodes import Assign
    from src.evaluation.evaluator import Evaluator
    from src.filters.transfer_function import build_environment
    from src.parsing.parser import parse

    config = ctx.obj["config"]
    try:
        root = parse(expression, strict=config.strict, max_depth=config.max_depth)
        _, env = build_environment(root, variables, config)
        targets = [s for s in root.statements if not isinstance(s, Assign)]
        if not targets:
            console.print("[yellow]Nothing to evaluate: every statement is an assignment.[/yellow]")
            sys.exit(1)
        value = Evaluator(max_depth=config.max_eval_depth).evaluate(targets[-1], env)
    except FilterError as e:
        _fail(e)
        return

    console.print(f"{escape(repr(targets[-1]))} = [bold green]{value!r}[/bold green]")


if __name__ == "__main__":
    main()

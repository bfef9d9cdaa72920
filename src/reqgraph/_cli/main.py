import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from reqgraph._build import DependencyGraph, compile_graph
from reqgraph._cases import TestCase, generate_test_cases
from reqgraph._errors import Issue, MalformedExpressionError
from reqgraph._export import export_graph_to_toml, export_test_cases_to_toml
from reqgraph._expr import format_dependency
from reqgraph._io import InputData, load_input_from_toml
from reqgraph._style import Palette

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Reqgraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_input(input_path: Path) -> InputData:
    err_console.print(f"[cyan]Loading input from:[/cyan] {input_path}")
    try:
        return load_input_from_toml(input_path)
    except (ValidationError, MalformedExpressionError) as e:
        logger.exception("Invalid input file")
        err_console.print(f"[red]✗ Invalid input file:[/red] {input_path}")
        raise typer.Exit(1) from e


def _print_issues(issues: list[Issue], title: str) -> None:
    table = Table(show_header=True, header_style="bold yellow", box=None)
    table.add_column("Kind", style="yellow")
    table.add_column("Item", style="bold")
    table.add_column("Message")
    for issue in issues:
        table.add_row(issue.kind.value, issue.item, issue.message)
    err_console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="yellow"))
    err_console.print()


def _print_graph(dependency_graph: DependencyGraph) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Source", style="bold")
    table.add_column("Target", style="bold")
    table.add_column("Label", justify="center", style="green")
    for edge in dependency_graph.edges:
        label = edge.label.value if edge.label is not None else "[dim]-[/dim]"
        table.add_row(edge.source, edge.target, label)

    out_console.print(
        Panel(
            table,
            title="[bold]Dependency Graph[/bold]",
            subtitle=(
                f"[dim]{len(dependency_graph.requirement_nodes)} requirements, "
                f"{len(dependency_graph.intermediate_nodes)} intermediate nodes, "
                f"{len(dependency_graph.edges)} edges[/dim]"
            ),
            border_style="cyan",
        ),
    )


def _cell(value: bool | None) -> str:
    if value is None:
        return "[red]?[/red]"
    return "[green]T[/green]" if value else "[red]F[/red]"


def _print_test_cases(target_expression: str, test_cases: list[TestCase]) -> None:
    if not test_cases:
        out_console.print("[dim]No test cases[/dim]")
        return

    input_vars = list(test_cases[0].input_values)
    output_vars = list(test_cases[0].case_output)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    for var in input_vars:
        table.add_column(var, justify="center")
    for var in output_vars:
        table.add_column(var, justify="center", style="bold")

    for i, case in enumerate(test_cases):
        table.add_row(
            str(i),
            *(_cell(case.input_values[var]) for var in input_vars),
            *(_cell(case.case_output[var]) for var in output_vars),
        )

    out_console.print(Panel(table, title=f"[bold]{target_expression}[/bold]", border_style="cyan"))


@app.command()
def graph(
    input: Annotated[  # noqa: A002
        Path,
        typer.Argument(help="Path to input TOML file"),
    ],
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ] = None,
    palette: Annotated[
        Palette,
        typer.Option("--palette", help="Colour palette for requirement priorities"),
    ] = Palette.RED,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit non-zero if any issues are found"),
    ] = False,
) -> None:
    """Compile the requirements of an input file into a dependency graph."""
    err_console.print()
    input_data = _load_input(input)

    err_console.print("[cyan]Compiling dependency graph...[/cyan]")
    dependency_graph = compile_graph(input_data.requirements, palette=palette)
    err_console.print()

    _print_graph(dependency_graph)
    if dependency_graph.issues:
        _print_issues(dependency_graph.issues, "Graph Issues")

    if output is not None:
        err_console.print(f"[cyan]Exporting graph to:[/cyan] {output}")
        export_graph_to_toml(dependency_graph, output)

    if strict and dependency_graph.issues:
        err_console.print("[red]✗ Graph has issues[/red]")
        raise typer.Exit(1)

    err_console.print()
    err_console.print("[green]✓ Graph complete[/green]")
    err_console.print()


@app.command()
def cases(
    expression: Annotated[
        str,
        typer.Argument(help="Target expression, e.g. 'X = A AND B'"),
    ],
    *,
    input: Annotated[  # noqa: A002
        Path | None,
        typer.Option("-i", "--input", help="Path to input TOML file with the expression catalog"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit non-zero if any output cannot be evaluated"),
    ] = False,
) -> None:
    """Generate truth-table test cases for a boolean expression."""
    err_console.print()
    catalog = _load_input(input).catalog if input is not None else None
    if catalog is not None and not catalog:
        err_console.print("[yellow]Input file has no expressions, evaluating the target alone[/yellow]")
        catalog = None

    try:
        test_cases = generate_test_cases(expression, catalog)
    except ValueError as e:
        err_console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1) from e

    _print_test_cases(expression, test_cases)

    issues = [issue for case in test_cases for issue in case.errors.values()]
    if issues:
        # A failing expression fails the same way in every row
        _print_issues(list(dict.fromkeys(issues)), "Evaluation Issues")

    if output is not None:
        err_console.print(f"[cyan]Exporting test cases to:[/cyan] {output}")
        export_test_cases_to_toml(expression, test_cases, output)

    if strict and issues:
        err_console.print("[red]✗ Some outputs could not be evaluated[/red]")
        raise typer.Exit(1)

    err_console.print()
    err_console.print(f"[green]✓ Generated {len(test_cases)} test cases[/green]")
    err_console.print()


@app.command()
def check(
    input: Annotated[  # noqa: A002
        Path,
        typer.Argument(help="Path to input TOML file"),
    ],
) -> None:
    """Check the validity of an input file without compiling it."""
    err_console.print()
    input_data = _load_input(input)
    err_console.print()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Requirement", style="bold")
    table.add_column("Priority", justify="right", style="yellow")
    table.add_column("Dependencies", justify="right", style="green")
    table.add_column("Sub-expressions", justify="right", style="magenta")
    table.add_column("Dependency")

    for requirement in input_data.requirements:
        table.add_row(
            requirement.id,
            str(requirement.priority),
            str(len(list(requirement.iter_dependency_ids()))),
            str(requirement.num_subexpressions),
            escape(format_dependency(requirement.dependency)),
        )

    err_console.print(
        Panel(
            table,
            title="[bold]Requirements[/bold]",
            subtitle=f"[dim]{len(input_data.catalog)} expressions[/dim]",
            border_style="cyan",
        ),
    )

    err_console.print()
    err_console.print("[green]✓ Input is valid[/green]")
    err_console.print()


def main() -> None:
    app()

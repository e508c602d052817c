"""
Main CLI entry point using Typer.

This module defines the developer command-line interface for ParseGuard.
It provides three commands: trace, check, and benchmark.
"""

import logging
from typing import List, Optional

import typer
from typing_extensions import Annotated

from .commands import GrammarOptions, benchmark_command, check_command, trace_command
from .display import print_error


# Create Typer app
app = typer.Typer(
    name="parse-guard",
    help="ParseGuard - Incremental parser combinators for constrained decoding",
    add_completion=False,
    rich_markup_mode="rich"
)

SeparatorOption = Annotated[
    str,
    typer.Option("--separator", help="Literal that precedes every item")
]
MinValueOption = Annotated[
    int,
    typer.Option("--min-value", help="Smallest integer accepted")
]
MaxValueOption = Annotated[
    int,
    typer.Option("--max-value", help="Largest integer accepted")
]
MinCountOption = Annotated[
    int,
    typer.Option("--min-count", help="Fewest items in the list")
]
MaxCountOption = Annotated[
    Optional[int],
    typer.Option("--max-count", help="Most items in the list (omit for unbounded)")
]


@app.command("trace")
def trace(
    chunks: Annotated[
        List[str],
        typer.Argument(help="Input pieces, each fed as one decoding step")
    ],
    separator: SeparatorOption = "  ",
    min_value: MinValueOption = 0,
    max_value: MaxValueOption = 9,
    min_count: MinCountOption = 0,
    max_count: MaxCountOption = None,
) -> None:
    """
    Feed input chunk by chunk and show the outcome of every step.

    Example:
        parse-guard trace "  1" "  2" --min-count 3 --max-count 5
    """
    try:
        ok = trace_command(
            chunks=chunks,
            options=GrammarOptions(separator, min_value, max_value, min_count, max_count)
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)

    if not ok:
        raise typer.Exit(code=1)


@app.command("check")
def check(
    text: Annotated[
        str,
        typer.Argument(help="Complete input to parse")
    ],
    separator: SeparatorOption = "  ",
    min_value: MinValueOption = 0,
    max_value: MaxValueOption = 9,
    min_count: MinCountOption = 0,
    max_count: MaxCountOption = None,
) -> None:
    """
    Parse a complete input and report Finished, Incomplete or the error.

    Example:
        parse-guard check "  1  2  3" --min-count 3
    """
    try:
        ok = check_command(
            text=text,
            options=GrammarOptions(separator, min_value, max_value, min_count, max_count)
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)

    if not ok:
        raise typer.Exit(code=1)


@app.command("benchmark")
def benchmark(
    items: Annotated[
        int,
        typer.Option("--items", "-n", help="Number of list items per input")
    ] = 1000,
    chunk_size: Annotated[
        int,
        typer.Option("--chunk-size", "-c", help="Bytes fed per step (roughly one token)")
    ] = 3,
    iterations: Annotated[
        int,
        typer.Option("--iterations", "-i", help="Number of times to parse the input")
    ] = 10,
    separator: SeparatorOption = "  ",
    min_value: MinValueOption = 0,
    max_value: MaxValueOption = 9,
    min_count: MinCountOption = 0,
    max_count: MaxCountOption = None,
) -> None:
    """
    Measure advance() throughput on a generated input.

    Example:
        parse-guard benchmark --items 5000 --chunk-size 4 --iterations 20
    """
    try:
        benchmark_command(
            options=GrammarOptions(separator, min_value, max_value, min_count, max_count),
            items=items,
            chunk_size=chunk_size,
            iterations=iterations
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """
    ParseGuard - Incremental parser combinators for constrained decoding.

    Explore how a grammar reacts to input arriving one token at a time.
    """
    if version:
        from parse_guard import __version__
        typer.echo(f"ParseGuard version {__version__}")
        raise typer.Exit()

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def cli() -> None:
    """CLI entry point for poetry script."""
    app()


if __name__ == "__main__":
    cli()

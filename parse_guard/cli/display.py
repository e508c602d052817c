"""
Rich terminal display utilities for CLI.

Provides formatted output using the Rich library for:
- Step-by-step parse traces
- Outcome summaries
- Benchmark tables
- Success/failure indicators
"""

from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


console = Console()


def print_header(title: str) -> None:
    """Print a formatted header."""
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))
    console.print()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_separator() -> None:
    """Print a visual separator line."""
    console.print("[dim]" + "─" * 70 + "[/dim]")


def format_bytes(data: bytes) -> str:
    """Render bytes for display, markup-escaped."""
    return escape(repr(bytes(data))[1:])


def print_trace(steps: List[Dict[str, Any]]) -> None:
    """
    Print one row per decoding step.

    Args:
        steps: List of step dictionaries with keys:
            - input: Bytes fed in this step
            - status: "Incomplete", "Finished" or "Error"
            - required_next: Required continuation (bytes)
            - detail: Outputs so far, final output or error message
    """
    table = Table(title="Parse Trace", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Input", style="white")
    table.add_column("Status", justify="center")
    table.add_column("Required Next", style="yellow")
    table.add_column("Detail", style="white")

    styles = {"Finished": "green bold", "Incomplete": "cyan", "Error": "red bold"}

    for i, step in enumerate(steps, 1):
        table.add_row(
            str(i),
            format_bytes(step["input"]),
            Text(step["status"], style=styles.get(step["status"], "white")),
            format_bytes(step.get("required_next", b"")),
            escape(str(step.get("detail", "")))
        )

    console.print()
    console.print(table)
    console.print()


def print_outcome(status: str, detail: str, required_next: bytes = b"") -> None:
    """
    Print the outcome of parsing a complete input in a panel.

    Args:
        status: "Finished", "Incomplete" or "Error"
        detail: Output, outputs so far, or error message
        required_next: Required continuation for incomplete parses
    """
    border = {"Finished": "green", "Incomplete": "cyan", "Error": "red"}.get(status, "white")

    lines = [f"[bold]{status}[/bold]", escape(detail)]
    if status == "Incomplete":
        if required_next:
            lines.append(f"Must continue with: [yellow]{format_bytes(required_next)}[/yellow]")
        else:
            lines.append("[dim]Stopping here is legal[/dim]")

    console.print(Panel("\n".join(lines), title="[bold]Outcome[/bold]", border_style=border))


def print_benchmark_results(stats: Dict[str, Any]) -> None:
    """
    Print benchmark statistics in a table.

    Args:
        stats: Dictionary with keys iterations, steps, bytes, total_ms,
            us_per_step and mb_per_second
    """
    table = Table(title="Benchmark Results", show_header=True, header_style="bold green")
    table.add_column("Metric", style="cyan", width=25)
    table.add_column("Value", style="white", width=25)

    table.add_row("Iterations", str(stats["iterations"]))
    table.add_row("Steps", f"{stats['steps']:,}")
    table.add_row("Bytes Parsed", f"{stats['bytes']:,}")
    table.add_row("Total Time", f"{stats['total_ms']:.1f} ms")
    table.add_row("Time per Step", f"{stats['us_per_step']:.2f} µs")
    table.add_row("Throughput", f"{stats['mb_per_second']:.2f} MB/s")

    console.print()
    console.print(table)
    console.print()

"""
Command-line interface module.

This module provides a developer terminal interface for ParseGuard using Typer
and Rich. It drives a demo grammar, a separated list of bounded integers, so
the incremental behaviour of the combinators can be explored by hand.

Commands:
    - trace: Feed input chunk by chunk and show every step
    - check: Parse a complete input and report the outcome
    - benchmark: Measure advance() throughput

Example Usage:
    ```bash
    # Two items fed as two decoding steps; a third item is still required
    parse-guard trace "  1" "  2" --min-count 3 --max-count 5

    # Whole input at once
    parse-guard check ", 4, 17" --separator ", " --max-value 99

    # Throughput
    parse-guard benchmark --items 5000 --chunk-size 4
    ```
"""

from .main import app

__all__ = ["app"]

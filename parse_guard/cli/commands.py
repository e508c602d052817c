"""
CLI command implementations.

This module contains the logic for each CLI command:
- trace: Feed input chunk by chunk, as a decoder would, and show every step
- check: Parse a complete input and report the outcome
- benchmark: Measure advance() throughput

All commands work on a demo grammar, a separated list of bounded integers:

    repeat(literal(separator) then integer(min_value, max_value), min_count, max_count)
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from parse_guard.decoding import ParseSession
from parse_guard.parser import Finished, IntegerParser, LiteralParser, ParseError, Parser, RepeatState

from .display import (
    print_benchmark_results,
    print_header,
    print_info,
    print_outcome,
    print_separator,
    print_success,
    print_trace,
    print_warning,
    format_bytes,
)


@dataclass
class GrammarOptions:
    """
    Options for the demo integer-list grammar.

    Attributes:
        separator: Literal that precedes every item
        min_value: Smallest integer accepted
        max_value: Largest integer accepted
        min_count: Fewest items
        max_count: Most items (None = unbounded)
    """
    separator: str = "  "
    min_value: int = 0
    max_value: int = 9
    min_count: int = 0
    max_count: Optional[int] = None


def build_integer_list_parser(options: GrammarOptions) -> Parser:
    """
    Build the demo grammar from options.

    Raises:
        ValueError: If the value or count range is empty
    """
    item = LiteralParser(options.separator).ignore_output_then(
        IntegerParser(options.min_value, options.max_value)
    )
    return item.repeat(options.min_count, options.max_count)


def describe_progress(checkpoint: Any) -> str:
    """Summarize a checkpoint for display."""
    if isinstance(checkpoint, RepeatState):
        suffix = " (item in progress)" if checkpoint.in_progress else ""
        return f"outputs={list(checkpoint.outputs)}{suffix}"
    return repr(checkpoint)


def print_grammar(options: GrammarOptions) -> None:
    upper = "∞" if options.max_count is None else options.max_count
    print_info(f"Separator: [bold]{format_bytes(options.separator.encode())}[/bold]")
    print_info(f"Values: [bold][{options.min_value}, {options.max_value}][/bold]")
    print_info(f"Items: [bold][{options.min_count}, {upper}][/bold]")
    print_separator()


def warn_unconsumed(session: ParseSession) -> None:
    """Warn when the parse finished before the end of the input."""
    if session.is_finished and session.remaining:
        print_warning(
            f"Parse finished with {len(session.remaining)} unconsumed byte(s): "
            f"{format_bytes(session.remaining)}"
        )


def trace_command(chunks: List[str], options: GrammarOptions) -> bool:
    """
    Execute the trace command.

    Args:
        chunks: Input pieces, each fed as one decoding step
        options: Grammar options

    Returns:
        bool: False if a chunk was rejected
    """
    print_header("ParseGuard - Parse Trace")
    print_grammar(options)

    session = ParseSession(build_integer_list_parser(options))
    steps: List[Dict[str, Any]] = []
    ok = True

    for chunk in chunks:
        data = chunk.encode("utf-8")

        if session.is_finished:
            steps.append({"input": data, "status": "Error", "detail": "parse already finished"})
            ok = False
            break

        try:
            outcome = session.feed(data)
        except ParseError as e:
            steps.append({"input": data, "status": "Error", "detail": e.message})
            ok = False
            break

        if isinstance(outcome, Finished):
            detail = f"output={outcome.output}"
            if session.remaining:
                detail += f" unconsumed={session.remaining!r}"
            steps.append({"input": data, "status": "Finished", "detail": detail})
        else:
            steps.append({
                "input": data,
                "status": "Incomplete",
                "required_next": outcome.required_next.tobytes(),
                "detail": describe_progress(outcome.checkpoint),
            })

    print_trace(steps)
    warn_unconsumed(session)

    if ok:
        if session.can_stop:
            print_success("Input so far is a valid place to stop")
        else:
            print_info(f"Must continue with {format_bytes(session.required_next.tobytes())}")
    return ok


def check_command(text: str, options: GrammarOptions) -> bool:
    """
    Execute the check command.

    Args:
        text: Complete input
        options: Grammar options

    Returns:
        bool: False if the input was rejected
    """
    print_header("ParseGuard - Check")
    print_grammar(options)

    session = ParseSession(build_integer_list_parser(options))

    try:
        outcome = session.feed(text.encode("utf-8"))
    except ParseError as e:
        print_outcome("Error", f"{e.message} (at byte {e.position})")
        return False

    if isinstance(outcome, Finished):
        detail = f"output={outcome.output}"
        if session.remaining:
            detail += f" unconsumed={session.remaining!r}"
        print_outcome("Finished", detail)
        warn_unconsumed(session)
    else:
        print_outcome(
            "Incomplete",
            describe_progress(outcome.checkpoint),
            outcome.required_next.tobytes()
        )
    return True


def make_benchmark_input(options: GrammarOptions, items: int) -> bytes:
    """Build a valid input of `items` items, cycling through the value range."""
    span = options.max_value - options.min_value + 1
    values = [options.min_value + i % span for i in range(items)]
    return b"".join(options.separator.encode("utf-8") + str(v).encode() for v in values)


def benchmark_command(
    options: GrammarOptions,
    items: int,
    chunk_size: int,
    iterations: int
) -> Dict[str, Any]:
    """
    Execute the benchmark command.

    Args:
        options: Grammar options
        items: Number of list items per input
        chunk_size: Bytes fed per step (roughly one token)
        iterations: Number of times to parse the input

    Returns:
        Dict with benchmark statistics
    """
    print_header("ParseGuard - Benchmark")
    print_grammar(options)

    if chunk_size < 1:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")

    parser = build_integer_list_parser(options)
    data = make_benchmark_input(options, items)
    chunks = [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]

    print_info(f"Input: [bold]{len(data):,}[/bold] bytes in [bold]{len(chunks):,}[/bold] steps")

    steps = 0
    start = time.perf_counter()
    for _ in range(iterations):
        session = ParseSession(parser)
        for chunk in chunks:
            if session.is_finished:
                break
            session.feed(chunk)
            steps += 1
    elapsed = time.perf_counter() - start

    total_bytes = len(data) * iterations
    stats = {
        "iterations": iterations,
        "steps": steps,
        "bytes": total_bytes,
        "total_ms": elapsed * 1000,
        "us_per_step": elapsed * 1e6 / steps if steps else 0.0,
        "mb_per_second": total_bytes / elapsed / (1024 * 1024) if elapsed > 0 else 0.0,
    }

    print_benchmark_results(stats)
    return stats

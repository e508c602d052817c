"""
ParseGuard: Incremental Parser Combinators for Grammar-Constrained Decoding

ParseGuard is a resumable parser-combinator engine for constraining the
token-by-token output of a language model to a grammar. Parsers accept input
in arbitrarily small increments, remember exactly how far the grammar has been
satisfied, and at every pause report the bytes that must come next.

Key Features:
    - Pure, resumable advance() over immutable checkpoints
    - Required continuation at every pause (empty = stopping is legal)
    - Literal and bounded-integer primitives
    - Sequence, choice, repetition and output-mapping combinators
    - Driver session and HuggingFace-compatible logits processor

Quick Start:
    ```python
    from parse_guard import IntegerParser, LiteralParser, ParseSession

    item = LiteralParser("  ").ignore_output_then(IntegerParser(1, 3))
    parser = item.repeat(3, 5)

    session = ParseSession(parser)
    session.feed(b"  1  2")
    print(session.required_next)   # Borrowed(b'  ') - a third item is required
    session.feed(b"  3")
    print(session.can_stop)        # True
    ```

Architecture:
    1. Parser core: outcomes, checkpoints, primitives, combinators
    2. Session: owns the checkpoint across decoding steps
    3. Token filter: probes the vocabulary against the current checkpoint
    4. Logits processor: masks invalid tokens during generate()
"""

__version__ = "0.1.0"

from parse_guard.parser import (  # noqa: F401
    Bounds,
    Branch,
    ChoiceParser,
    Finished,
    IgnoreOutputThen,
    Incomplete,
    IntegerParser,
    LiteralParser,
    MapOutputParser,
    ParseError,
    Parser,
    RepeatParser,
    SequenceParser,
    ThenIgnoreOutput,
)
from parse_guard.decoding.session import ParseSession, SessionFinishedError  # noqa: F401

__all__ = [
    "Bounds",
    "Branch",
    "ChoiceParser",
    "Finished",
    "IgnoreOutputThen",
    "Incomplete",
    "IntegerParser",
    "LiteralParser",
    "MapOutputParser",
    "ParseError",
    "Parser",
    "RepeatParser",
    "SequenceParser",
    "ThenIgnoreOutput",
    "ParseSession",
    "SessionFinishedError",
]

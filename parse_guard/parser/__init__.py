"""
Incremental parser-combinator core.

Parsers here consume input in arbitrarily small pieces, as a language model
decodes tokens, and can always say what must come next. The sampler uses that
required continuation to mask tokens that would break the grammar.

Components:
    - status: Parse outcomes (Finished, Incomplete) and ParseError
    - buffer: Borrowed/owned required-continuation values, input views
    - bounds: Inclusive repetition-count ranges
    - base: The Parser interface and composition methods
    - literal: Exact byte sequences
    - integer: Decimal integers within a value range
    - sequence: Run one parser after another
    - choice: Try alternatives in lockstep
    - repeat: Bounded repetition
    - map: Output transformation

Key Properties:
    - advance() is pure: same checkpoint + same bytes = same outcome
    - Checkpoints are immutable values; probing never corrupts them
    - ParseError is an expected outcome, not a crash

Example:
    ```python
    from parse_guard.parser import IntegerParser, LiteralParser

    numbers = LiteralParser(",").ignore_output_then(IntegerParser(0, 99)).repeat(1, 3)
    checkpoint = numbers.create_initial_checkpoint()

    outcome = numbers.advance(checkpoint, b",4,17")
    print(outcome.checkpoint.outputs)   # (4, 17)
    print(outcome.required_next)        # Owned(b'') - may stop here
    ```
"""

from parse_guard.parser.status import Finished, Incomplete, ParseError, ParseOutcome
from parse_guard.parser.buffer import EMPTY, Borrowed, Owned, RequiredNext, as_view, common_prefix
from parse_guard.parser.bounds import Bounds
from parse_guard.parser.base import Parser
from parse_guard.parser.literal import LiteralParser, LiteralState
from parse_guard.parser.integer import IntegerParser, IntegerState
from parse_guard.parser.sequence import (
    IgnoreOutputThen,
    InFirst,
    InSecond,
    SequenceParser,
    ThenIgnoreOutput,
)
from parse_guard.parser.choice import Branch, ChoiceParser, ChoiceState
from parse_guard.parser.repeat import RepeatParser, RepeatState
from parse_guard.parser.map import MapOutputParser

__all__ = [
    "Finished",
    "Incomplete",
    "ParseError",
    "ParseOutcome",
    "EMPTY",
    "Borrowed",
    "Owned",
    "RequiredNext",
    "as_view",
    "common_prefix",
    "Bounds",
    "Parser",
    "LiteralParser",
    "LiteralState",
    "IntegerParser",
    "IntegerState",
    "SequenceParser",
    "IgnoreOutputThen",
    "ThenIgnoreOutput",
    "InFirst",
    "InSecond",
    "ChoiceParser",
    "ChoiceState",
    "Branch",
    "RepeatParser",
    "RepeatState",
    "MapOutputParser",
]

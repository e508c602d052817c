"""
Parser capability interface.

Every parsing unit, primitive or combinator, implements two operations:

    create_initial_checkpoint() -> checkpoint
        Zero-progress starting state. Needs no input and is deterministic, so
        combinators can build fresh child checkpoints whenever they need one.

    advance(checkpoint, data) -> Finished | Incomplete   (raises ParseError)
        Make as much progress as possible with newly available bytes. This is
        a pure function of its arguments: checkpoints are immutable values and
        no parser keeps hidden state, so a driver can probe many candidate
        continuations from the same checkpoint without corrupting it.

Parsers are generic over their checkpoint type `S` and output type `O`.
Composition methods build combinators:

    literal.then(integer)                 -> (None, 42)
    literal.ignore_output_then(integer)   -> 42
    integer.then_ignore_output(literal)   -> 42
    literal.otherwise(other)              -> Branch(index, value)
    integer.repeat(1, 3)                  -> [1, 2, 3]
    integer.map_output(str)               -> "42"

Example:
    ```python
    from parse_guard.parser import LiteralParser, IntegerParser

    parser = LiteralParser(", ").ignore_output_then(IntegerParser(0, 99)).repeat(1, 4)

    checkpoint = parser.create_initial_checkpoint()
    outcome = parser.advance(checkpoint, b", 4, 17")
    ```
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

from parse_guard.parser.buffer import BytesLike
from parse_guard.parser.status import ParseOutcome

S = TypeVar("S")
O = TypeVar("O")


class Parser(ABC, Generic[S, O]):
    """
    Abstract base class for all parsers.

    Subclasses define the checkpoint type they thread through `advance()` and
    the output they produce when finished.
    """

    @abstractmethod
    def create_initial_checkpoint(self) -> S:
        """
        Build the zero-progress checkpoint.

        Returns:
            Checkpoint for the start of a parse
        """
        pass

    @abstractmethod
    def advance(self, checkpoint: S, data: BytesLike) -> ParseOutcome:
        """
        Advance a checkpoint with newly available bytes.

        Args:
            checkpoint: Checkpoint produced by this parser
            data: New input bytes (may be empty to ask "can we stop here?")

        Returns:
            Finished with output and remainder, or Incomplete with a new
            checkpoint and the required continuation

        Raises:
            ParseError: If the input cannot be part of a valid parse
        """
        pass

    def then(self, other: "Parser") -> "Parser":
        """Run this parser, then `other`; output both as a tuple."""
        from parse_guard.parser.sequence import SequenceParser
        return SequenceParser(self, other)

    def ignore_output_then(self, other: "Parser") -> "Parser":
        """Run this parser, then `other`; keep only `other`'s output."""
        from parse_guard.parser.sequence import IgnoreOutputThen
        return IgnoreOutputThen(self, other)

    def then_ignore_output(self, other: "Parser") -> "Parser":
        """Run this parser, then `other`; keep only this parser's output."""
        from parse_guard.parser.sequence import ThenIgnoreOutput
        return ThenIgnoreOutput(self, other)

    def otherwise(self, *others: "Parser") -> "Parser":
        """Try this parser and the given alternatives on the same input."""
        from parse_guard.parser.choice import ChoiceParser
        return ChoiceParser(self, *others)

    def repeat(self, min: int = 0, max: Optional[int] = None) -> "Parser":
        """Run this parser between `min` and `max` times (inclusive)."""
        from parse_guard.parser.bounds import Bounds
        from parse_guard.parser.repeat import RepeatParser
        return RepeatParser(self, Bounds(min, max))

    def map_output(self, fn: Callable[[O], Any]) -> "Parser":
        """Transform this parser's output with `fn`."""
        from parse_guard.parser.map import MapOutputParser
        return MapOutputParser(self, fn)

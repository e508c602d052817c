"""
Sequence combinators - run one parser, then another.

The checkpoint records which half of the sequence is active:

    InFirst(checkpoint)                   still inside the first parser
    InSecond(checkpoint, first_output)    first parser done, resuming the second

Once the first parser finishes, the second parser's initial checkpoint is built
and advanced with the remainder right away, even if the remainder is empty. An
empty advance is what surfaces the second parser's required continuation (e.g.
the separator that has to follow a list item).

Variants differ only in which outputs they keep:

    SequenceParser       (first_output, second_output)
    IgnoreOutputThen     second_output
    ThenIgnoreOutput     first_output
"""

from dataclasses import dataclass
from typing import Any, Union

from parse_guard.parser.base import Parser
from parse_guard.parser.buffer import BytesLike, as_view
from parse_guard.parser.status import Finished, Incomplete, ParseOutcome


@dataclass(frozen=True)
class InFirst:
    """Sequence is inside its first parser."""
    checkpoint: Any


@dataclass(frozen=True)
class InSecond:
    """Sequence has finished its first parser and is inside the second."""
    checkpoint: Any
    first_output: Any


SequenceState = Union[InFirst, InSecond]


class SequenceParser(Parser[SequenceState, Any]):
    """
    Parser that runs `first` to completion, then `second`.

    Attributes:
        first: Parser for the leading part
        second: Parser for the trailing part
    """

    def __init__(self, first: Parser, second: Parser):
        self.first = first
        self.second = second

    def combine(self, first_output: Any, second_output: Any) -> Any:
        return (first_output, second_output)

    def create_initial_checkpoint(self) -> SequenceState:
        return InFirst(self.first.create_initial_checkpoint())

    def advance(self, checkpoint: SequenceState, data: BytesLike) -> ParseOutcome:
        remaining = as_view(data)

        if isinstance(checkpoint, InFirst):
            outcome = self.first.advance(checkpoint.checkpoint, remaining)
            if isinstance(outcome, Incomplete):
                return Incomplete(InFirst(outcome.checkpoint), outcome.required_next)

            first_output = outcome.output
            second_checkpoint = self.second.create_initial_checkpoint()
            remaining = outcome.remaining
        else:
            first_output = checkpoint.first_output
            second_checkpoint = checkpoint.checkpoint

        outcome = self.second.advance(second_checkpoint, remaining)
        if isinstance(outcome, Incomplete):
            return Incomplete(
                InSecond(outcome.checkpoint, first_output),
                outcome.required_next
            )

        return Finished(self.combine(first_output, outcome.output), outcome.remaining)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.first!r}, {self.second!r})"


class IgnoreOutputThen(SequenceParser):
    """Sequence that keeps only the second parser's output."""

    def combine(self, first_output: Any, second_output: Any) -> Any:
        return second_output


class ThenIgnoreOutput(SequenceParser):
    """Sequence that keeps only the first parser's output."""

    def combine(self, first_output: Any, second_output: Any) -> Any:
        return first_output

"""
Parse outcomes - the result of a single `advance()` step.

Every step of every parser ends in exactly one of three ways:

    Finished(output, remaining)
        The parser matched completely. `remaining` is a memoryview over the
        bytes it did not consume (a view into the caller's buffer, not a copy).

    Incomplete(checkpoint, required_next)
        The input ran out before the parser could decide. `checkpoint` resumes
        the parse on the next call; `required_next` holds the bytes any further
        input must start with (empty means stopping here is legal).

    ParseError (raised)
        The input can't be part of a valid parse from this checkpoint. This is
        an ordinary outcome: samplers probe candidate tokens constantly and
        most of them fail.

Usage:
    ```python
    outcome = parser.advance(checkpoint, b"12")

    if isinstance(outcome, Finished):
        print(outcome.output, bytes(outcome.remaining))
    else:
        checkpoint = outcome.checkpoint
        print("must continue with", bytes(outcome.required_next))
    ```
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from parse_guard.parser.buffer import EMPTY, RequiredNext

S = TypeVar("S")
O = TypeVar("O")


@dataclass(frozen=True)
class Finished(Generic[O]):
    """
    Parser matched completely.

    Attributes:
        output: Value produced by the parser
        remaining: Unconsumed tail of the input
    """
    output: O
    remaining: memoryview


@dataclass(frozen=True)
class Incomplete(Generic[S]):
    """
    Parser needs more input.

    Attributes:
        checkpoint: State to resume from
        required_next: Bytes that must prefix further input (may be empty)
    """
    checkpoint: S
    required_next: RequiredNext = EMPTY

    @property
    def can_stop(self) -> bool:
        """True if ending the input here would be acceptable."""
        return not self.required_next


ParseOutcome = Union[Finished, Incomplete]


class ParseError(Exception):
    """
    Input is incompatible with the grammar at this position.

    Attributes:
        message: Human-readable reason
        position: Offset into the input of the failing `advance()` call
        expected: Bytes the parser would have accepted, if known
        found: Bytes the parser saw instead, if any
    """

    def __init__(
        self,
        message: str,
        position: int = 0,
        expected: Optional[bytes] = None,
        found: Optional[bytes] = None
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expected = expected
        self.found = found

    def __repr__(self) -> str:
        return (
            f"ParseError({self.message!r}, position={self.position}, "
            f"expected={self.expected!r}, found={self.found!r})"
        )

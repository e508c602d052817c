"""
Literal parser - match an exact, fixed byte sequence.

The checkpoint is just the number of literal bytes matched so far. When input
runs out mid-literal, the required continuation is a borrowed view of the
unmatched suffix, so the sampler knows exactly which bytes must come next.

Example:
    ```python
    parser = LiteralParser("true")
    checkpoint = parser.create_initial_checkpoint()

    outcome = parser.advance(checkpoint, b"tr")
    # Incomplete(checkpoint=LiteralState(matched=2), required_next=b"ue")

    outcome = parser.advance(outcome.checkpoint, b"ue,")
    # Finished(output=None, remaining=b",")
    ```
"""

from dataclasses import dataclass
from typing import Union

from parse_guard.parser.base import Parser
from parse_guard.parser.buffer import Borrowed, BytesLike, as_view
from parse_guard.parser.status import Finished, Incomplete, ParseError, ParseOutcome


@dataclass(frozen=True)
class LiteralState:
    """Number of literal bytes already matched."""
    matched: int = 0


class LiteralParser(Parser[LiteralState, None]):
    """
    Parser for a fixed byte sequence.

    Attributes:
        literal: Bytes to match (str literals are UTF-8 encoded)
    """

    def __init__(self, literal: Union[str, bytes]):
        if isinstance(literal, str):
            literal = literal.encode("utf-8")
        self.literal = bytes(literal)
        self._view = memoryview(self.literal)

    def create_initial_checkpoint(self) -> LiteralState:
        return LiteralState()

    def advance(self, checkpoint: LiteralState, data: BytesLike) -> ParseOutcome:
        view = as_view(data)
        matched = checkpoint.matched
        literal = self.literal

        consumed = 0
        while matched < len(literal) and consumed < len(view):
            if view[consumed] != literal[matched]:
                raise ParseError(
                    f"Expected {literal[matched:matched + 1]!r} of literal {literal!r}",
                    position=consumed,
                    expected=literal[matched:matched + 1],
                    found=bytes(view[consumed:consumed + 1])
                )
            matched += 1
            consumed += 1

        if matched == len(literal):
            return Finished(None, view[consumed:])

        return Incomplete(LiteralState(matched), Borrowed(self._view[matched:]))

    def __repr__(self) -> str:
        return f"LiteralParser({self.literal!r})"

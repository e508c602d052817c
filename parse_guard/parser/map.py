"""
Output mapping combinator.
"""

from typing import Any, Callable

from parse_guard.parser.base import Parser
from parse_guard.parser.buffer import BytesLike
from parse_guard.parser.status import Finished, ParseOutcome


class MapOutputParser(Parser[Any, Any]):
    """
    Parser that applies `fn` to the output of `parser`.

    Checkpoints and required continuations are those of the wrapped parser.
    """

    def __init__(self, parser: Parser, fn: Callable[[Any], Any]):
        self.parser = parser
        self.fn = fn

    def create_initial_checkpoint(self) -> Any:
        return self.parser.create_initial_checkpoint()

    def advance(self, checkpoint: Any, data: BytesLike) -> ParseOutcome:
        outcome = self.parser.advance(checkpoint, data)
        if isinstance(outcome, Finished):
            return Finished(self.fn(outcome.output), outcome.remaining)
        return outcome

    def __repr__(self) -> str:
        return f"MapOutputParser({self.parser!r}, {self.fn!r})"

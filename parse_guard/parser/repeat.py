"""
Repeat combinator - run one parser between `min` and `max` times.

This is the most intricate combinator because it must decide, at every pause,
whether the sequence may legally end and, if not, what has to come next.

Algorithm (per `advance()` call):
    Loop over the input, delegating to the child parser:

    Child finished:
        Record the output, reset the child to a fresh checkpoint, clear the
        in-progress flag. Then, in this order:
        1. Count reached max  -> Finished (hard ceiling, checked before looking
           at the remaining bytes, so unbounded input can't loop forever)
        2. Input exhausted    -> Incomplete; the required continuation is empty
           if the count is within bounds, else whatever a fresh child requires
        3. Otherwise          -> keep repeating greedily

    Child incomplete:
        Adopt the child's checkpoint, set the in-progress flag and forward the
        child's required continuation unchanged.

    Child failed:
        The sequence may end here only if no attempt is half-consumed and the
        count is within bounds; the failing bytes stay unconsumed. Otherwise the
        child's error propagates.

The in-progress flag is what separates "the next item doesn't start here"
(a legal end of the sequence) from "the item we already started is broken"
(bytes were consumed and can't be given back).

Example:
    ```python
    item = LiteralParser("  ").ignore_output_then(IntegerParser(0, 9))
    parser = RepeatParser(item, Bounds(3, 5))
    checkpoint = parser.create_initial_checkpoint()

    outcome = parser.advance(checkpoint, b"  1  2")
    # Incomplete: outputs (1, 2), required_next == b"  " (a third item is mandatory)

    outcome = parser.advance(checkpoint, b"  1  2  3")
    # Incomplete: outputs (1, 2, 3), required_next == b"" (stopping is legal)
    ```
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Tuple

from parse_guard.parser.base import Parser
from parse_guard.parser.bounds import Bounds
from parse_guard.parser.buffer import EMPTY, BytesLike, RequiredNext, as_view
from parse_guard.parser.status import Finished, Incomplete, ParseError, ParseOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepeatState:
    """
    Progress through a repetition.

    Attributes:
        child: Checkpoint of the repetition currently being parsed
        outputs: Outputs of completed repetitions, in order
        in_progress: True while a repetition has consumed input but not finished
    """
    child: Any
    outputs: Tuple[Any, ...] = field(default_factory=tuple)
    in_progress: bool = False


class RepeatParser(Parser[RepeatState, List[Any]]):
    """
    Parser that repeats `parser` a bounded number of times.

    Attributes:
        parser: Parser for a single repetition
        bounds: Inclusive range on the number of repetitions
    """

    def __init__(self, parser: Parser, bounds: Bounds = Bounds()):
        self.parser = parser
        self.bounds = bounds

    def create_initial_checkpoint(self) -> RepeatState:
        return RepeatState(child=self.parser.create_initial_checkpoint())

    def advance(self, checkpoint: RepeatState, data: BytesLike) -> ParseOutcome:
        remaining = as_view(data)
        state = checkpoint

        if self.bounds.max == 0:
            return Finished([], remaining)

        while True:
            resumed = state.in_progress
            try:
                outcome = self.parser.advance(state.child, remaining)
            except ParseError:
                if not state.in_progress and self.bounds.contains(len(state.outputs)):
                    logger.debug(
                        f"Repeat stopped after {len(state.outputs)} item(s) "
                        f"with {len(remaining)} byte(s) left"
                    )
                    return Finished(list(state.outputs), remaining)
                raise

            if isinstance(outcome, Incomplete):
                return Incomplete(
                    replace(state, child=outcome.checkpoint, in_progress=True),
                    outcome.required_next
                )

            state = RepeatState(
                child=self.parser.create_initial_checkpoint(),
                outputs=state.outputs + (outcome.output,),
                in_progress=False
            )
            count = len(state.outputs)

            if self.bounds.is_ceiling(count):
                return Finished(list(state.outputs), outcome.remaining)

            if len(outcome.remaining) == 0:
                return Incomplete(state, self._required_next(state))

            if not resumed and len(outcome.remaining) == len(remaining):
                # Fresh repetition matched nothing; repeating it would never make progress
                if self.bounds.contains(count):
                    return Finished(list(state.outputs), outcome.remaining)
                raise ParseError(
                    f"Repetition matched no input after {count} item(s); "
                    f"at least {self.bounds.min} required"
                )

            remaining = outcome.remaining

    def _required_next(self, state: RepeatState) -> RequiredNext:
        """Required continuation at a pause with no input left."""
        if self.bounds.contains(len(state.outputs)):
            return EMPTY

        # Another repetition is mandatory; ask a fresh child what it needs
        try:
            probe = self.parser.advance(state.child, b"")
        except ParseError:
            return EMPTY
        if isinstance(probe, Incomplete):
            return probe.required_next
        return EMPTY

    def __repr__(self) -> str:
        return f"RepeatParser({self.parser!r}, {self.bounds!r})"

"""
Choice combinator - try several alternatives on the same input.

All live alternatives advance in lockstep. An alternative that raises
ParseError is dead for the rest of the parse; its slot in the checkpoint
becomes None.

Finishing:
    The choice finishes only once no alternative is still incomplete. An
    alternative that finishes while others are live is kept as a fallback
    in the checkpoint, together with the bytes it left over, and the parse
    continues. When everything has finished or failed, the longest match
    wins (fewest bytes left over); ties go to the earlier alternative.

Required continuation:
    - a fallback is held: empty (the choice may end with the fallback)
    - one live alternative: its own requirement, passed through unchanged
    - several: the longest prefix all of them require (often empty)

Example:
    ```python
    parser = ChoiceParser(LiteralParser("a"), LiteralParser("ab"))
    checkpoint = parser.create_initial_checkpoint()

    outcome = parser.advance(checkpoint, b"a")
    # Incomplete - "a" matched but "ab" is still alive, required_next == b""

    parser.advance(outcome.checkpoint, b"b")
    # Finished(Branch(index=1, value=None), remaining=b"")

    parser.advance(outcome.checkpoint, b"x")
    # Finished(Branch(index=0, value=None), remaining=b"x")
    ```
"""

import logging
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Tuple

from parse_guard.parser.base import Parser
from parse_guard.parser.buffer import EMPTY, BytesLike, as_view, common_prefix
from parse_guard.parser.status import Finished, Incomplete, ParseError, ParseOutcome

logger = logging.getLogger(__name__)


class Branch(NamedTuple):
    """Output of a choice: which alternative matched and what it produced."""
    index: int
    value: Any


@dataclass(frozen=True)
class ChoiceState:
    """
    One checkpoint per alternative, plus the best finished match so far.

    Attributes:
        checkpoints: Child checkpoints, None for alternatives that are done
        fallback: Branch that finished while others were still live
        leftover: Bytes the fallback did not consume
    """
    checkpoints: Tuple[Optional[Any], ...]
    fallback: Optional[Branch] = None
    leftover: bytes = b""

    @property
    def live(self) -> int:
        return sum(1 for c in self.checkpoints if c is not None)


class ChoiceParser(Parser[ChoiceState, Branch]):
    """
    Parser that accepts whatever any of its alternatives accepts.

    Attributes:
        alternatives: Parsers tried in order of preference
    """

    def __init__(self, *alternatives: Parser):
        if not alternatives:
            raise ValueError("ChoiceParser needs at least one alternative")
        self.alternatives = alternatives

    def create_initial_checkpoint(self) -> ChoiceState:
        return ChoiceState(
            tuple(p.create_initial_checkpoint() for p in self.alternatives)
        )

    def advance(self, checkpoint: ChoiceState, data: BytesLike) -> ParseOutcome:
        view = as_view(data)
        next_checkpoints = []
        requirements = []
        best: Optional[Finished] = None
        last_error = None

        for index, (parser, child) in enumerate(zip(self.alternatives, checkpoint.checkpoints)):
            if child is None:
                next_checkpoints.append(None)
                continue

            try:
                outcome = parser.advance(child, view)
            except ParseError as e:
                logger.debug(f"Choice dropped alternative {index}: {e.message}")
                last_error = e
                next_checkpoints.append(None)
                continue

            if isinstance(outcome, Finished):
                next_checkpoints.append(None)
                if best is None or len(outcome.remaining) < len(best.remaining):
                    best = Finished(Branch(index, outcome.output), outcome.remaining)
                continue

            next_checkpoints.append(outcome.checkpoint)
            requirements.append(outcome.required_next)

        if not requirements:
            if best is not None:
                return best
            if checkpoint.fallback is not None:
                # Nothing matched further; end with the earlier match
                return Finished(
                    checkpoint.fallback,
                    memoryview(checkpoint.leftover + view.tobytes())
                )
            if last_error is None:
                raise ParseError("No alternative left to try")
            raise ParseError(
                f"No alternative matched: {last_error.message}",
                position=last_error.position,
                expected=last_error.expected,
                found=last_error.found
            )

        if best is not None:
            # Any match made in this call is longer than an earlier fallback
            state = ChoiceState(tuple(next_checkpoints), best.output, best.remaining.tobytes())
        else:
            state = ChoiceState(
                tuple(next_checkpoints),
                checkpoint.fallback,
                checkpoint.leftover + view.tobytes() if checkpoint.fallback else b""
            )

        if state.fallback is not None:
            required_next = EMPTY
        elif len(requirements) == 1:
            required_next = requirements[0]
        else:
            required_next = common_prefix(requirements)

        return Incomplete(state, required_next)

    def __repr__(self) -> str:
        inner = ", ".join(repr(p) for p in self.alternatives)
        return f"ChoiceParser({inner})"

"""
Parse Session - drive a parser through one generation, step by step.

During constrained generation the driver feeds the bytes of each newly sampled
token to the top-level parser and reads back what must come next. The session
owns the current checkpoint so callers don't have to thread it themselves.

Session Flow:
    1. Start from the parser's initial checkpoint
    2. Probe candidate tokens speculatively (probe / accepts)
    3. Feed the sampled token (feed) to commit it
    4. Read required_next / can_stop to bias the next sampling step
    5. Repeat until the parser finishes or generation stops

Probing never changes the session. Because `advance()` is pure and checkpoints
are immutable, any number of probes (from any number of threads) can share
the current checkpoint.

Usage:
    ```python
    from parse_guard.decoding import ParseSession

    session = ParseSession(parser)

    for token_bytes in sampled_tokens:
        if not session.accepts(token_bytes):
            continue  # sampler should have masked this token
        session.feed(token_bytes)

        if session.is_finished:
            print("Parsed:", session.output)
            break
    ```
"""

import logging
from typing import Any, Optional

from parse_guard.parser.base import Parser
from parse_guard.parser.buffer import EMPTY, BytesLike, RequiredNext
from parse_guard.parser.status import Finished, Incomplete, ParseError, ParseOutcome

logger = logging.getLogger(__name__)


class SessionFinishedError(RuntimeError):
    """Raised when input is fed to a session whose parser already finished."""


class ParseSession:
    """
    Track one parse across decoding steps.

    Attributes:
        parser: Top-level parser
        checkpoint: Current checkpoint (None once finished)
        required_next: Required continuation after the last committed step
        output: Parser output once finished
        remaining: Unconsumed bytes of the finishing step
        steps: Number of committed steps
    """

    def __init__(self, parser: Parser):
        self.parser = parser
        self.reset()

        logger.debug(f"ParseSession initialized for {parser!r}")

    def reset(self) -> None:
        """
        Start over from the parser's initial checkpoint.

        Example:
            ```python
            session.reset()  # New generation
            ```
        """
        self.checkpoint: Optional[Any] = self.parser.create_initial_checkpoint()
        self.output: Optional[Any] = None
        self.remaining: bytes = b""
        self.steps = 0

        # Ask the parser for its requirement before any input arrives
        probe = self.probe(b"")
        if isinstance(probe, Incomplete):
            self.required_next: RequiredNext = probe.required_next
            self._can_stop = probe.can_stop
        else:
            self.required_next = EMPTY
            self._can_stop = probe is not None

    @property
    def is_finished(self) -> bool:
        return self.checkpoint is None

    @property
    def can_stop(self) -> bool:
        """True if ending generation now would leave a valid parse."""
        return self.is_finished or self._can_stop

    def feed(self, data: BytesLike) -> ParseOutcome:
        """
        Commit newly generated bytes.

        Args:
            data: Bytes of the sampled token

        Returns:
            The parser's outcome for this step

        Raises:
            ParseError: If the bytes are invalid here (session is unchanged)
            SessionFinishedError: If the parser already finished

        Example:
            ```python
            outcome = session.feed(b"12")
            ```
        """
        if self.is_finished:
            raise SessionFinishedError(
                f"Parse already finished after {self.steps} step(s)"
            )

        try:
            outcome = self.parser.advance(self.checkpoint, data)
        except ParseError as e:
            logger.debug(f"Rejected {bytes(data)!r} at step {self.steps}: {e.message}")
            raise

        self.steps += 1

        if isinstance(outcome, Finished):
            self.checkpoint = None
            self.output = outcome.output
            self.remaining = bytes(outcome.remaining)
            self.required_next = EMPTY
            self._can_stop = True
            logger.debug(f"Parse finished at step {self.steps}: {self.output!r}")
        else:
            self.checkpoint = outcome.checkpoint
            self.required_next = outcome.required_next
            self._can_stop = outcome.can_stop

        return outcome

    def probe(self, data: BytesLike) -> Optional[ParseOutcome]:
        """
        Advance speculatively without committing.

        Args:
            data: Candidate bytes

        Returns:
            The outcome, or None if the bytes are invalid here
        """
        if self.is_finished:
            return None
        try:
            return self.parser.advance(self.checkpoint, data)
        except ParseError:
            return None

    def accepts(self, data: BytesLike) -> bool:
        """
        Check whether `data` could be fed at this point.

        Uses the required continuation as a cheap prefix filter before probing.
        """
        if self.is_finished:
            return False
        if self.required_next and not self.required_next.compatible_with(data):
            return False
        return self.probe(data) is not None

    def __repr__(self) -> str:
        return (
            f"ParseSession(steps={self.steps}, finished={self.is_finished}, "
            f"required_next={self.required_next!r})"
        )

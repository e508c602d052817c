"""
Unit tests for ParseSession.
"""

import pytest

from parse_guard.decoding import ParseSession, SessionFinishedError
from parse_guard.parser import Finished, Incomplete, IntegerParser, LiteralParser, ParseError


@pytest.fixture
def list_parser():
    """Between three and five separated integers in [1, 3]."""
    item = LiteralParser("  ").ignore_output_then(IntegerParser(1, 3))
    return item.repeat(3, 5)


class TestParseSession:
    """Test driving a parser across decoding steps."""

    def test_initial_requirement(self, list_parser):
        """Test the requirement is known before any input."""
        session = ParseSession(list_parser)

        assert session.steps == 0
        assert not session.is_finished
        assert session.required_next == b"  "
        assert not session.can_stop

    def test_feed_updates_state(self, list_parser):
        session = ParseSession(list_parser)
        outcome = session.feed(b"  1  2")

        assert isinstance(outcome, Incomplete)
        assert session.steps == 1
        assert session.checkpoint.outputs == (1, 2)
        assert session.required_next == b"  "
        assert not session.can_stop

    def test_reaching_minimum_allows_stop(self, list_parser):
        session = ParseSession(list_parser)
        session.feed(b"  1  2")
        session.feed(b"  3")

        assert session.can_stop
        assert session.required_next == b""
        assert not session.is_finished

    def test_rejected_bytes_leave_session_unchanged(self, list_parser):
        """Test a failed feed does not commit anything."""
        session = ParseSession(list_parser)
        session.feed(b"  1")
        checkpoint = session.checkpoint

        with pytest.raises(ParseError):
            session.feed(b"x")

        assert session.steps == 1
        assert session.checkpoint == checkpoint

        session.feed(b"  2")
        assert session.checkpoint.outputs == (1, 2)

    def test_finish(self, list_parser):
        """Test a terminating byte finishes the parse."""
        session = ParseSession(list_parser)
        session.feed(b"  1  2  3")
        outcome = session.feed(b"x")

        assert isinstance(outcome, Finished)
        assert session.is_finished
        assert session.output == [1, 2, 3]
        assert session.remaining == b"x"
        assert session.can_stop
        assert session.required_next == b""

    def test_feed_after_finish_raises(self):
        session = ParseSession(LiteralParser("ab"))
        session.feed(b"ab")

        assert session.is_finished
        assert session.output is None

        with pytest.raises(SessionFinishedError):
            session.feed(b"c")

        assert session.probe(b"c") is None
        assert not session.accepts(b"c")

    def test_probe_does_not_commit(self, list_parser):
        session = ParseSession(list_parser)
        outcome = session.probe(b"  1")

        assert isinstance(outcome, Incomplete)
        assert session.steps == 0
        assert session.checkpoint == list_parser.create_initial_checkpoint()

    def test_probe_returns_none_on_error(self, list_parser):
        session = ParseSession(list_parser)

        assert session.probe(b"1") is None

    def test_accepts(self, list_parser):
        session = ParseSession(list_parser)

        assert session.accepts(b" ")
        assert session.accepts(b"  1")
        assert not session.accepts(b"1")
        assert not session.accepts(b"  9")

    def test_reset(self, list_parser):
        session = ParseSession(list_parser)
        session.feed(b"  1  2  3x")
        assert session.is_finished

        session.reset()

        assert session.steps == 0
        assert not session.is_finished
        assert session.output is None
        assert session.required_next == b"  "

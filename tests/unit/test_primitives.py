"""
Unit tests for the literal and integer parsers.
"""

import pytest

from parse_guard.parser import (
    Borrowed,
    Finished,
    Incomplete,
    IntegerParser,
    IntegerState,
    LiteralParser,
    LiteralState,
    ParseError,
)


class TestLiteralParser:
    """Test fixed byte sequences."""

    def test_partial_match(self):
        """Test a prefix pauses with the unmatched suffix required."""
        parser = LiteralParser("true")
        result = parser.advance(parser.create_initial_checkpoint(), b"tr")

        assert isinstance(result, Incomplete)
        assert result.checkpoint == LiteralState(matched=2)
        assert result.required_next == b"ue"
        assert isinstance(result.required_next, Borrowed)

    def test_resume_and_finish(self):
        """Test finishing a literal across two calls."""
        parser = LiteralParser("true")
        first = parser.advance(parser.create_initial_checkpoint(), b"tr")
        second = parser.advance(first.checkpoint, b"ue,")

        assert isinstance(second, Finished)
        assert second.output is None
        assert bytes(second.remaining) == b","

    def test_mismatch(self):
        """Test a wrong byte raises with details."""
        parser = LiteralParser("true")

        with pytest.raises(ParseError) as exc_info:
            parser.advance(parser.create_initial_checkpoint(), b"tx")

        error = exc_info.value
        assert error.position == 1
        assert error.expected == b"r"
        assert error.found == b"x"

    def test_mismatch_after_resume(self):
        parser = LiteralParser("abc")
        first = parser.advance(parser.create_initial_checkpoint(), b"ab")

        with pytest.raises(ParseError):
            parser.advance(first.checkpoint, b"x")

    def test_empty_input_requires_whole_literal(self):
        parser = LiteralParser("  ")
        result = parser.advance(parser.create_initial_checkpoint(), b"")

        assert isinstance(result, Incomplete)
        assert result.required_next == b"  "
        assert not result.can_stop

    def test_empty_literal(self):
        """Test the empty literal matches without consuming."""
        parser = LiteralParser(b"")
        result = parser.advance(parser.create_initial_checkpoint(), b"abc")

        assert isinstance(result, Finished)
        assert bytes(result.remaining) == b"abc"

    def test_utf8_literal(self):
        """Test multi-byte characters can be split across calls."""
        parser = LiteralParser("é")
        encoded = "é".encode("utf-8")
        first = parser.advance(parser.create_initial_checkpoint(), encoded[:1])

        assert isinstance(first, Incomplete)
        assert first.required_next == encoded[1:]

        second = parser.advance(first.checkpoint, encoded[1:])
        assert isinstance(second, Finished)

    def test_accepts_bytearray_and_memoryview(self):
        parser = LiteralParser("ab")
        state = parser.create_initial_checkpoint()

        assert isinstance(parser.advance(state, bytearray(b"ab")), Finished)
        assert isinstance(parser.advance(state, memoryview(b"ab")), Finished)

    def test_rejects_str_input(self):
        parser = LiteralParser("ab")

        with pytest.raises(TypeError):
            parser.advance(parser.create_initial_checkpoint(), "ab")

    def test_remaining_is_view_into_input(self):
        """Test the remainder shares memory with the caller's buffer."""
        parser = LiteralParser("a")
        buffer = bytearray(b"abc")
        result = parser.advance(parser.create_initial_checkpoint(), buffer)

        buffer[1] = ord("z")
        assert bytes(result.remaining) == b"zc"


class TestIntegerParser:
    """Test bounded decimal integers."""

    def test_pauses_while_more_digits_fit(self):
        """Test "25" in [0, 255] waits for a possible third digit."""
        parser = IntegerParser(0, 255)
        result = parser.advance(parser.create_initial_checkpoint(), b"25")

        assert isinstance(result, Incomplete)
        assert result.checkpoint == IntegerState(negative=False, value=25, digits=2)
        assert result.required_next == b""

    def test_terminator_finishes(self):
        parser = IntegerParser(0, 255)
        result = parser.advance(parser.create_initial_checkpoint(), b"25,")

        assert isinstance(result, Finished)
        assert result.output == 25
        assert bytes(result.remaining) == b","

    def test_out_of_range_digit_is_left_over(self):
        """Test "256" stops at 25 and leaves "6" unconsumed."""
        parser = IntegerParser(0, 255)
        result = parser.advance(parser.create_initial_checkpoint(), b"256")

        assert isinstance(result, Finished)
        assert result.output == 25
        assert bytes(result.remaining) == b"6"

    def test_finishes_eagerly_at_max_digits(self):
        """Test no terminator is needed once no digit can follow."""
        parser = IntegerParser(0, 255)
        result = parser.advance(parser.create_initial_checkpoint(), b"255")

        assert isinstance(result, Finished)
        assert result.output == 255
        assert bytes(result.remaining) == b""

    def test_finishes_when_next_digit_overflows(self):
        """Test 30 can't grow within [0, 255] so it finishes immediately."""
        parser = IntegerParser(0, 255)
        result = parser.advance(parser.create_initial_checkpoint(), b"300")

        assert isinstance(result, Finished)
        assert result.output == 30
        assert bytes(result.remaining) == b"0"

    def test_single_digit_range(self):
        """Test [1, 3] reads exactly one digit."""
        parser = IntegerParser(1, 3)
        result = parser.advance(parser.create_initial_checkpoint(), b"23")

        assert isinstance(result, Finished)
        assert result.output == 2
        assert bytes(result.remaining) == b"3"

    def test_zero_has_no_leading_zeros(self):
        parser = IntegerParser(0, 99)
        result = parser.advance(parser.create_initial_checkpoint(), b"05")

        assert isinstance(result, Finished)
        assert result.output == 0
        assert bytes(result.remaining) == b"5"

    def test_non_digit_raises(self):
        parser = IntegerParser(0, 255)

        with pytest.raises(ParseError) as exc_info:
            parser.advance(parser.create_initial_checkpoint(), b"x")

        assert exc_info.value.found == b"x"

    def test_value_below_minimum_raises(self):
        """Test a terminated value under the minimum is rejected."""
        parser = IntegerParser(10, 20)
        first = parser.advance(parser.create_initial_checkpoint(), b"1")

        assert isinstance(first, Incomplete)

        with pytest.raises(ParseError):
            parser.advance(first.checkpoint, b",")

    def test_unreachable_prefix_raises(self):
        """Test "25" can't become a value in [10, 20]."""
        parser = IntegerParser(10, 20)

        with pytest.raises(ParseError):
            parser.advance(parser.create_initial_checkpoint(), b"25")

    def test_resume_across_calls(self):
        parser = IntegerParser(0, 255)
        first = parser.advance(parser.create_initial_checkpoint(), b"2")
        second = parser.advance(first.checkpoint, b"5,")

        assert isinstance(second, Finished)
        assert second.output == 25
        assert bytes(second.remaining) == b","

    def test_negative_values(self):
        parser = IntegerParser(-10, 10)
        state = parser.create_initial_checkpoint()

        result = parser.advance(state, b"-5")
        assert isinstance(result, Finished)
        assert result.output == -5

        result = parser.advance(state, b"-10")
        assert isinstance(result, Finished)
        assert result.output == -10

    def test_lone_minus_pauses(self):
        parser = IntegerParser(-10, 10)
        result = parser.advance(parser.create_initial_checkpoint(), b"-")

        assert isinstance(result, Incomplete)
        assert result.checkpoint == IntegerState(negative=True, value=0, digits=0)

    def test_minus_rejected_for_non_negative_range(self):
        parser = IntegerParser(0, 10)

        with pytest.raises(ParseError):
            parser.advance(parser.create_initial_checkpoint(), b"-1")

    def test_double_minus_rejected(self):
        parser = IntegerParser(-10, 10)

        with pytest.raises(ParseError):
            parser.advance(parser.create_initial_checkpoint(), b"--")

    def test_negative_only_range_requires_minus(self):
        """Test a range without non-negative values reports "-" as required."""
        parser = IntegerParser(-20, -5)
        result = parser.advance(parser.create_initial_checkpoint(), b"")

        assert isinstance(result, Incomplete)
        assert result.required_next == b"-"

        with pytest.raises(ParseError):
            parser.advance(parser.create_initial_checkpoint(), b"7")

        result = parser.advance(parser.create_initial_checkpoint(), b"-7")
        assert isinstance(result, Finished)
        assert result.output == -7

    def test_empty_range_rejected(self):
        with pytest.raises(ValueError):
            IntegerParser(5, 1)

    def test_map_output(self):
        """Test map_output transforms only finished values."""
        parser = IntegerParser(0, 9).map_output(lambda value: value * 2)
        state = parser.create_initial_checkpoint()

        assert parser.advance(state, b"7").output == 14
        assert state == IntegerState()

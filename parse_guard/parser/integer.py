"""
Integer parser - match a decimal integer within an inclusive value range.

The range bounds the number of digits as well as the value: `IntegerParser(1, 3)`
accepts exactly one digit, `IntegerParser(0, 255)` at most three. The parser
finishes as soon as no further digit could keep the value in range, without
waiting for a terminator. This matters during generation: after "7" in a
`[0, 9]` field the parse is already complete and the sampler may move on.

Rules:
    - Optional leading "-" when the range contains negative values
    - No leading zeros ("0" is a complete number on its own, "-0" is rejected)
    - Every accepted prefix can still be completed to a value in range
    - A non-digit byte ends the number (left unconsumed) if the value is in range

Example:
    ```python
    parser = IntegerParser(0, 255)
    checkpoint = parser.create_initial_checkpoint()

    parser.advance(checkpoint, b"25")     # Incomplete - "250".."255" still possible
    parser.advance(checkpoint, b"25,")    # Finished(25, remaining=b",")
    parser.advance(checkpoint, b"256")    # Finished(25, remaining=b"6")
    parser.advance(checkpoint, b"x")      # raises ParseError
    ```
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from parse_guard.parser.base import Parser
from parse_guard.parser.buffer import EMPTY, Borrowed, BytesLike, as_view
from parse_guard.parser.status import Finished, Incomplete, ParseError, ParseOutcome

_MINUS = ord("-")
_ZERO = ord("0")
_NINE = ord("9")
_MINUS_REQUIRED = Borrowed(b"-")


@dataclass(frozen=True)
class IntegerState:
    """
    Progress through an integer.

    Attributes:
        negative: Whether a leading "-" has been read
        value: Magnitude of the digits read so far
        digits: Number of digits read so far
    """
    negative: bool = False
    value: int = 0
    digits: int = 0


def _reachable(prefix: int, low: int, high: int, start: int = 0) -> bool:
    """
    Check whether appending `start` or more digits to a non-zero prefix can
    land in [low, high].
    """
    scale = 10 ** start
    while prefix * scale <= high:
        if prefix * scale + scale - 1 >= low:
            return True
        scale *= 10
    return False


class IntegerParser(Parser[IntegerState, int]):
    """
    Parser for a decimal integer in `[minimum, maximum]`.

    Attributes:
        minimum: Smallest accepted value
        maximum: Largest accepted value
    """

    def __init__(self, minimum: int, maximum: int):
        if minimum > maximum:
            raise ValueError(
                f"Integer range is empty: minimum {minimum} > maximum {maximum}"
            )
        self.minimum = minimum
        self.maximum = maximum

        # Magnitude ranges per sign, None when that sign can't occur
        self._positive = self._magnitudes(max(minimum, 0), maximum)
        self._negative = self._magnitudes(max(-maximum, 1), -minimum)

    @staticmethod
    def _magnitudes(low: int, high: int) -> Optional[Tuple[int, int]]:
        return (low, high) if low <= high else None

    def create_initial_checkpoint(self) -> IntegerState:
        return IntegerState()

    def _viable(self, negative: bool, value: int, digits: int) -> bool:
        """Check whether this prefix can still become a value in range."""
        magnitudes = self._negative if negative else self._positive
        if magnitudes is None:
            return False
        low, high = magnitudes
        if digits == 0:
            return True
        if value == 0:
            return low <= 0 <= high
        return _reachable(value, low, high)

    def _can_extend(self, negative: bool, value: int) -> bool:
        """Check whether another digit could follow `value`."""
        magnitudes = self._negative if negative else self._positive
        if magnitudes is None or value == 0:
            return False
        low, high = magnitudes
        return _reachable(value, low, high, start=1)

    def _in_range(self, negative: bool, value: int) -> bool:
        signed = -value if negative else value
        return self.minimum <= signed <= self.maximum

    def _finish(
        self,
        negative: bool,
        value: int,
        digits: int,
        view: memoryview,
        position: int
    ) -> Finished:
        """End the number before `position`, or raise if that is not legal."""
        if digits > 0 and self._in_range(negative, value):
            return Finished(-value if negative else value, view[position:])

        found = bytes(view[position:position + 1])
        if digits == 0:
            message = f"Expected a digit, found {found!r}"
        else:
            message = (
                f"Integer {'-' if negative else ''}{value} is outside "
                f"[{self.minimum}, {self.maximum}]"
            )
        raise ParseError(message, position=position, found=found)

    def advance(self, checkpoint: IntegerState, data: BytesLike) -> ParseOutcome:
        view = as_view(data)
        negative = checkpoint.negative
        value = checkpoint.value
        digits = checkpoint.digits

        for position in range(len(view)):
            byte = view[position]

            if (
                byte == _MINUS
                and digits == 0
                and not negative
                and self._negative is not None
            ):
                negative = True
                continue

            if not _ZERO <= byte <= _NINE:
                return self._finish(negative, value, digits, view, position)

            candidate = value * 10 + byte - _ZERO
            if not self._viable(negative, candidate, digits + 1):
                return self._finish(negative, value, digits, view, position)

            value = candidate
            digits += 1

            # A lone "0" can't be extended either, so it finishes here too
            if not self._can_extend(negative, value):
                return Finished(-value if negative else value, view[position + 1:])

        required = EMPTY
        if digits == 0 and not negative and self._positive is None:
            required = _MINUS_REQUIRED

        return Incomplete(IntegerState(negative, value, digits), required)

    def __repr__(self) -> str:
        return f"IntegerParser({self.minimum}, {self.maximum})"

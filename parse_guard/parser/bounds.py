"""
Inclusive count bounds for repetition.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Bounds:
    """
    Inclusive `[min, max]` range on a repetition count.

    Attributes:
        min: Fewest repetitions that may end the sequence (>= 0)
        max: Most repetitions allowed (None = unbounded)
    """

    min: int = 0
    max: Optional[int] = None

    def __post_init__(self):
        if self.min < 0:
            raise ValueError(f"Minimum count must be >= 0, got {self.min}")
        if self.max is not None and self.max < self.min:
            raise ValueError(
                f"Maximum count {self.max} is below minimum count {self.min}"
            )

    def contains(self, count: int) -> bool:
        """Check whether stopping after `count` repetitions is legal."""
        if count < self.min:
            return False
        return self.max is None or count <= self.max

    def is_ceiling(self, count: int) -> bool:
        """Check whether `count` has reached the hard maximum."""
        return self.max is not None and count >= self.max

    def __contains__(self, count: int) -> bool:
        return self.contains(count)

    def __repr__(self) -> str:
        upper = "inf" if self.max is None else self.max
        return f"Bounds([{self.min}, {upper}])"

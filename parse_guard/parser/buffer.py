"""
Byte buffer helpers - borrowed views and required-continuation values.

Parsers never copy their input. Every `advance()` call wraps the incoming bytes
in a `memoryview` and hands slices of that view back as the unconsumed
remainder.

The required continuation reported by an incomplete parse is either a slice of
bytes the parser already owns (a literal's unmatched suffix) or bytes computed
on the fly (the common prefix of several alternatives). Both are modelled as a
small sum type so that the common case never allocates:

    RequiredNext
    ├── Borrowed: memoryview into existing bytes
    └── Owned: freshly computed bytes

Usage:
    ```python
    from parse_guard.parser.buffer import Borrowed, Owned, EMPTY

    literal = b"true"
    required = Borrowed(memoryview(literal)[1:])

    required == b"rue"              # True
    required.compatible_with(b"r")  # True - "r" is a prefix of "rue"
    bool(EMPTY)                     # False - stopping here is legal
    ```
"""

from abc import ABC, abstractmethod
from typing import Iterable, Union

BytesLike = Union[bytes, bytearray, memoryview]


def as_view(data: BytesLike) -> memoryview:
    """
    Wrap bytes-like input in a flat, byte-addressed memoryview.

    Args:
        data: bytes, bytearray or memoryview

    Returns:
        memoryview: View over the same memory, one item per byte

    Raises:
        TypeError: If data is text or not bytes-like
    """
    if isinstance(data, str):
        raise TypeError("Parsers consume bytes, not str; encode the text first")

    view = data if isinstance(data, memoryview) else memoryview(data)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


class RequiredNext(ABC):
    """
    Byte sequence that must prefix any further input.

    An empty value means it is currently legal to stop. Instances compare
    equal to each other and to bytes-like objects by content.
    """

    __slots__ = ()

    @abstractmethod
    def tobytes(self) -> bytes:
        pass

    def __bytes__(self) -> bytes:
        return self.tobytes()

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RequiredNext):
            return self.tobytes() == other.tobytes()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.tobytes() == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.tobytes())

    def startswith(self, prefix: BytesLike) -> bool:
        return self.tobytes().startswith(bytes(prefix))

    def compatible_with(self, data: BytesLike) -> bool:
        """
        Check whether `data` can be fed without violating this requirement.

        True when either the requirement is a prefix of `data` or `data` is a
        prefix of the requirement. An empty requirement accepts anything.
        """
        required = self.tobytes()
        candidate = bytes(data)
        if len(candidate) >= len(required):
            return candidate.startswith(required)
        return required.startswith(candidate)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tobytes()!r})"


class Borrowed(RequiredNext):
    """Requirement that points into bytes owned by a parser."""

    __slots__ = ("view",)

    def __init__(self, view: BytesLike):
        self.view = as_view(view)

    def tobytes(self) -> bytes:
        return self.view.tobytes()

    def __len__(self) -> int:
        return len(self.view)


class Owned(RequiredNext):
    """Requirement computed at parse time."""

    __slots__ = ("data",)

    def __init__(self, data: BytesLike = b""):
        self.data = bytes(data)

    def tobytes(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)


EMPTY = Owned(b"")


def common_prefix(requirements: Iterable[RequiredNext]) -> RequiredNext:
    """
    Narrow several requirements to the bytes they all agree on.

    Args:
        requirements: Required continuations of live alternatives

    Returns:
        RequiredNext: Longest shared prefix, EMPTY if none or if any is empty
    """
    values = [r.tobytes() for r in requirements]
    if not values:
        return EMPTY

    prefix = values[0]
    for value in values[1:]:
        end = 0
        limit = min(len(prefix), len(value))
        while end < limit and prefix[end] == value[end]:
            end += 1
        prefix = prefix[:end]
        if not prefix:
            return EMPTY

    return Owned(prefix)

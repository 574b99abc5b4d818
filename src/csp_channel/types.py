"""Shared types: the end-of-stream sentinel, the channel marker and capacity.

Usage:
    >>> from csp_channel import END, Channel, is_channel
    >>> is_channel(Channel())
    True
    >>> is_channel([0, 1, 2])
    False
    >>> END
    END

`Capacity` is a constrained alias validated by msgspec:

    >>> import msgspec
    >>> msgspec.convert(3, Capacity)
    3
    >>> msgspec.convert(-1, Capacity)
    # ValidationError: Expected `int` >= 0

See Also:
    - https://jcristharif.com/msgspec/constraints.html
"""

from __future__ import annotations

from typing import Annotated, Final

import msgspec

__all__ = [
    'END',
    'Capacity',
    'ChannelBase',
    'EndOfStream',
    'is_channel',
]

Capacity = Annotated[int, msgspec.Meta(ge=0)]
"""Channel buffer capacity.

Valid: 0 (unbuffered), 1, 100
Invalid: -1, 1.5, True
"""


class EndOfStream:
    """Type of the `END` sentinel returned by shift on a closed, drained channel."""

    __slots__ = ()

    _instance: EndOfStream | None = None

    def __new__(cls) -> EndOfStream:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'END'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'END'


END: Final = EndOfStream()


class ChannelBase:
    """Marker base for channels and their read-only and write-only views."""

    __slots__ = ()


def is_channel(value: object) -> bool:
    """Return True if `value` is a channel or a view of one.

    Example:
        ```python
        is_channel(Channel().read_only())  # True
        is_channel((0, 1, 2))  # False
        ```
    """
    return isinstance(value, ChannelBase)

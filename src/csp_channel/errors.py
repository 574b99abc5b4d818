"""Channel error types: dual struct+exception for Result-style and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'AlreadyClosed',
    'AlreadyClosedError',
    'ChannelClosed',
    'ChannelClosedError',
    'EmptyReduce',
    'EmptyReduceError',
    'EndOfStreamPush',
    'EndOfStreamPushError',
    'InvalidCapacity',
    'InvalidCapacityError',
    'InvalidSelect',
    'InvalidSelectError',
    'MultiplePush',
    'MultiplePushError',
]

SELECT_NOT_SEQUENCE = 'select: Argument must be an array.'
SELECT_NOT_ORDER = 'select accepts only promises returned by push & shift.'


# --- Close/Push Errors ---


class AlreadyClosed(msgspec.Struct, frozen=True, gc=False):
    """close() called twice - struct variant."""

    def to_exception(self) -> AlreadyClosedError:
        """Convert to exception for raise-based code."""
        return AlreadyClosedError()


class AlreadyClosedError(Exception):
    """close() called twice - exception variant."""

    def __init__(self) -> None:
        super().__init__("Can't close an already-closed channel.")

    def to_struct(self) -> AlreadyClosed:
        """Convert to struct for Result-based code."""
        return AlreadyClosed()


class ChannelClosed(msgspec.Struct, frozen=True, gc=False):
    """Push to a closed channel - struct variant."""

    def to_exception(self) -> ChannelClosedError:
        """Convert to exception for raise-based code."""
        return ChannelClosedError()


class ChannelClosedError(Exception):
    """Push to a closed channel - exception variant."""

    def __init__(self) -> None:
        super().__init__("Can't push to closed channel.")

    def to_struct(self) -> ChannelClosed:
        """Convert to struct for Result-based code."""
        return ChannelClosed()


class EndOfStreamPush(msgspec.Struct, frozen=True, gc=False):
    """Push of the END sentinel - struct variant."""

    def to_exception(self) -> EndOfStreamPushError:
        """Convert to exception for raise-based code."""
        return EndOfStreamPushError()


class EndOfStreamPushError(TypeError):
    """Push of the END sentinel - exception variant."""

    def __init__(self) -> None:
        super().__init__("Can't push END to channel, use close instead.")

    def to_struct(self) -> EndOfStreamPush:
        """Convert to struct for Result-based code."""
        return EndOfStreamPush()


class MultiplePush(msgspec.Struct, frozen=True, gc=False):
    """push() given more than one value - struct variant."""

    count: int

    def to_exception(self) -> MultiplePushError:
        """Convert to exception for raise-based code."""
        return MultiplePushError(self.count)


class MultiplePushError(Exception):
    """push() given more than one value - exception variant."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__("Can't push more than one value at a time.")

    def to_struct(self) -> MultiplePush:
        """Convert to struct for Result-based code."""
        return MultiplePush(self.count)


# --- Combinator Errors ---


class EmptyReduce(msgspec.Struct, frozen=True, gc=False):
    """reduce() on an empty channel without an initial value - struct variant."""

    def to_exception(self) -> EmptyReduceError:
        """Convert to exception for raise-based code."""
        return EmptyReduceError()


class EmptyReduceError(TypeError):
    """reduce() on an empty channel without an initial value - exception variant."""

    def __init__(self) -> None:
        super().__init__("No values in channel and initialValue wasn't provided.")

    def to_struct(self) -> EmptyReduce:
        """Convert to struct for Result-based code."""
        return EmptyReduce()


# --- Argument Errors ---


class InvalidSelect(msgspec.Struct, frozen=True, gc=False):
    """Malformed select() arguments - struct variant."""

    reason: str

    def to_exception(self) -> InvalidSelectError:
        """Convert to exception for raise-based code."""
        return InvalidSelectError(self.reason)


class InvalidSelectError(TypeError):
    """Malformed select() arguments - exception variant."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)

    def to_struct(self) -> InvalidSelect:
        """Convert to struct for Result-based code."""
        return InvalidSelect(self.reason)


class InvalidCapacity(msgspec.Struct, frozen=True, gc=False):
    """Capacity is not a non-negative integer - struct variant."""

    capacity: str

    def to_exception(self) -> InvalidCapacityError:
        """Convert to exception for raise-based code."""
        return InvalidCapacityError(self.capacity)


class InvalidCapacityError(ValueError):
    """Capacity is not a non-negative integer - exception variant."""

    def __init__(self, capacity: str) -> None:
        self.capacity = capacity
        super().__init__(f'Channel capacity must be a non-negative integer, got {capacity}')

    def to_struct(self) -> InvalidCapacity:
        """Convert to struct for Result-based code."""
        return InvalidCapacity(self.capacity)

"""Channel protocols: Sender and Receiver capability interfaces.

`Channel` satisfies both; `ReadOnlyChannel` satisfies only Receiver and
`WriteOnlyChannel` only Sender. Annotate parameters with these when a function
needs just one direction.

Uses PEP 695 type parameter syntax so type checkers infer variance:
- Sender[T] as contravariant (T appears in input positions)
- Receiver[T] as covariant (T appears in output positions)
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import asyncio
    from collections.abc import AsyncIterator

    from csp_channel.order import Order

__all__ = ['Receiver', 'Sender']


class Sender[T](Protocol):
    """Send half of a channel."""

    @property
    @abstractmethod
    def capacity(self) -> int:
        """Fixed buffer capacity."""
        ...

    @abstractmethod
    def push(self, *values: T) -> Order[int]:
        """Send exactly one value.

        Example:
            ```python
            await tx.push(42)
            ```
        """
        ...

    @abstractmethod
    def close(self) -> asyncio.Future[None]:
        """Close the channel; pending and future shifts drain to END."""
        ...


class Receiver[T](Protocol):
    """Receive half of a channel."""

    @abstractmethod
    def shift(self) -> Order[T]:
        """Receive the next value, or END once closed and drained.

        Example:
            ```python
            value = await rx.shift()
            ```
        """
        ...

    @abstractmethod
    def value(self) -> Any:
        """Last value transferred out of the channel, or END."""
        ...

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[T]:
        """Iterate until the channel is closed and drained."""
        ...

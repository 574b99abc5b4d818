"""Stream combinators built from shift and push.

`Receiving` is mixed into `Channel` and `ReadOnlyChannel`. Every method is a
plain consumer loop over `shift()`; channel-producing methods return a fresh
unbuffered `Channel` immediately and fill it from a background task, closing
it when the input is exhausted (or when a callback fails, after logging the
failure).

Callbacks may be plain functions or coroutine functions; awaitable results
are awaited before use.

Example:
    ```python
    doubled = await of(1, 2, 3).map(lambda x: x * 2).values()
    assert doubled == [2, 4, 6]
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable
from typing import TYPE_CHECKING, Any

from csp_channel._tasks import spawn
from csp_channel.errors import EmptyReduce
from csp_channel.types import END, is_channel

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from csp_channel.channel import Channel
    from csp_channel.order import Order

__all__ = ['Receiving']


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return '<missing>'


_MISSING = _Missing()


def _new_channel() -> Channel[Any]:
    from csp_channel.channel import Channel

    return Channel()


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _forward(source: Any, output: Channel[Any]) -> None:
    """Push every value of a channel, async iterable or iterable to `output`."""
    if is_channel(source) or isinstance(source, AsyncIterable):
        async for value in source:
            await output.push(value)
    else:
        for value in source:
            await output.push(value)


def _pipe(name: str, body: Callable[[Channel[Any]], Awaitable[None]]) -> Channel[Any]:
    output = _new_channel()

    async def run() -> None:
        try:
            await body(output)
        finally:
            output.close()

    spawn(run(), name=f'channel.{name}')
    return output


class Receiving[T]:
    """Receive-side operations shared by channels and read-only views."""

    __slots__ = ()

    def shift(self) -> Order[T]:
        raise NotImplementedError

    async def __aiter__(self) -> AsyncIterator[T]:
        """Iterate over values until the channel is closed and drained.

        Example:
            ```python
            async for value in ch:
                print(value)
            ```
        """
        while (value := await self.shift()) is not END:
            yield value

    # --- Channel-producing ---

    def map[U](self, fn: Callable[[T], U | Awaitable[U]]) -> Channel[U]:
        """Return a channel of `fn(value)` for each value."""

        async def body(output: Channel[U]) -> None:
            async for value in self:
                await output.push(await _call(fn, value))

        return _pipe('map', body)

    def filter(self, predicate: Callable[[T], Any]) -> Channel[T]:
        """Return a channel of the values for which `predicate` is truthy."""

        async def body(output: Channel[T]) -> None:
            async for value in self:
                if await _call(predicate, value):
                    await output.push(value)

        return _pipe('filter', body)

    def flat_map[U](self, fn: Callable[[T], Any]) -> Channel[U]:
        """Return a channel of every value drained from `fn(value)`.

        Args:
            fn: Returns a channel, an async iterable or an iterable per value.

        Example:
            ```python
            await of(1, 2).flat_map(lambda x: of(x, x * 10)).values()
            # [1, 10, 2, 20]
            ```
        """

        async def body(output: Channel[U]) -> None:
            async for value in self:
                await _forward(await _call(fn, value), output)

        return _pipe('flat_map', body)

    def flat(self, depth: int = 1) -> Channel[Any]:
        """Flatten channel values up to `depth` levels.

        Non-channel values are forwarded unchanged.
        """

        async def body(output: Channel[Any]) -> None:
            async for value in self:
                if not is_channel(value):
                    await output.push(value)
                elif depth > 1:
                    await _forward(value.flat(depth - 1), output)
                else:
                    await _forward(value, output)

        return _pipe('flat', body)

    def slice(self, start: int = 0, end: int | None = None) -> Channel[T]:
        """Forward the values with index in [start, end).

        The first `start` values are shifted and discarded. Reading stops at
        `end`, leaving the rest of the input unconsumed.
        """

        async def body(output: Channel[T]) -> None:
            for _ in range(start):
                if await self.shift() is END:
                    return
            index = start
            while end is None or index < end:
                value = await self.shift()
                if value is END:
                    break
                await output.push(value)
                index += 1

        return _pipe('slice', body)

    def concat(self, *rest: Any) -> Channel[Any]:
        """Forward this channel, then each of `rest` in order.

        Channel items of `rest` are drained; any other item is pushed as is.
        """

        async def body(output: Channel[Any]) -> None:
            await _forward(self, output)
            for item in rest:
                if is_channel(item):
                    await _forward(item, output)
                else:
                    await output.push(item)

        return _pipe('concat', body)

    # --- Consuming ---

    async def for_each(self, fn: Callable[[T], Any]) -> None:
        """Call `fn(value)` for each value, awaiting awaitable results."""
        async for value in self:
            await _call(fn, value)

    async def values(self) -> list[T]:
        """Drain the channel into a list."""
        return [value async for value in self]

    async def join(self, separator: str = ',') -> str:
        """Drain the channel and join `str(value)` with `separator`."""
        return separator.join(str(value) for value in await self.values())

    async def reduce(self, fn: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
        """Fold the values with `fn(accumulator, value)`.

        Without `initial`, the first value seeds the accumulator.

        Raises:
            EmptyReduceError: The channel was empty and no initial value was given.

        Example:
            ```python
            await of(0, 1, 2).reduce(max)  # 2
            await of(0, 1, 2).reduce(max, 10)  # 10
            ```
        """
        accumulator = initial
        async for value in self:
            if accumulator is _MISSING:
                accumulator = value
            else:
                accumulator = await _call(fn, accumulator, value)

        if accumulator is _MISSING:
            raise EmptyReduce().to_exception()
        return accumulator

    async def every(self, predicate: Callable[[T], Any]) -> bool:
        """Return False at the first value failing `predicate`, else True.

        Values after the deciding one are left in the channel.
        """
        async for value in self:
            if not await _call(predicate, value):
                return False
        return True

    async def some(self, predicate: Callable[[T], Any]) -> bool:
        """Return True at the first value satisfying `predicate`, else False.

        Values after the deciding one are left in the channel.
        """
        async for value in self:
            if await _call(predicate, value):
                return True
        return False

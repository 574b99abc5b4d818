"""Channel sources: build channels from iterables, callables, streams and timers.

Each source returns a read-only view immediately and feeds the underlying
channel from a background task with push() and close(). Sources add no
concurrency semantics of their own.

Example:
    ```python
    assert await of(0, 1, 2).values() == [0, 1, 2]
    assert await from_(range(3), lambda x: x * 2).values() == [0, 2, 4]
    ```
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable
from typing import TYPE_CHECKING, Any

import anyio
from anyio.abc import ByteReceiveStream, ObjectReceiveStream

from csp_channel._tasks import spawn
from csp_channel.channel import Channel
from csp_channel.combinators import _MISSING
from csp_channel.types import END

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from csp_channel.channel import ReadOnlyChannel
    from csp_channel.combinators import Receiving

__all__ = [
    'after',
    'all_',
    'from_',
    'from_callable',
    'from_iterable',
    'from_stream',
    'of',
]


def _finish[T](channel: Channel[T], mapfn: Callable[[T], Any] | None) -> ReadOnlyChannel[Any]:
    return (channel.map(mapfn) if mapfn is not None else channel).read_only()


def from_iterable[T](
    values: Iterable[T] | AsyncIterable[T],
    mapfn: Callable[[T], Any] | None = None,
) -> ReadOnlyChannel[Any]:
    """Create a channel yielding each item of a sync or async iterable, then closing.

    Args:
        values: Items to push in order.
        mapfn: Optional transform applied to each item.

    Returns:
        Read-only view of the new channel.
    """
    channel: Channel[T] = Channel()

    async def feed() -> None:
        try:
            if isinstance(values, AsyncIterable):
                async for value in values:
                    await channel.push(value)
            else:
                for value in values:
                    await channel.push(value)
        finally:
            channel.close()

    spawn(feed(), name='channel.from_iterable')
    return _finish(channel, mapfn)


def from_callable[T](
    fn: Callable[[], T],
    mapfn: Callable[[T], Any] | None = None,
) -> ReadOnlyChannel[Any]:
    """Create a channel yielding `fn()` until it returns END.

    Example:
        ```python
        counter = iter(range(3))
        ch = from_callable(lambda: next(counter, END))
        await ch.values()  # [0, 1, 2]
        ```
    """
    channel: Channel[T] = Channel()

    async def feed() -> None:
        try:
            while (value := fn()) is not END:
                await channel.push(value)
        finally:
            channel.close()

    spawn(feed(), name='channel.from_callable')
    return _finish(channel, mapfn)


def from_stream(
    stream: ObjectReceiveStream[Any] | ByteReceiveStream,
    mapfn: Callable[[Any], Any] | None = None,
) -> ReadOnlyChannel[Any]:
    """Create a channel yielding each item received from an anyio stream.

    The channel closes when the stream signals `anyio.EndOfStream` or is
    closed underneath the reader.

    Example:
        ```python
        send, receive = anyio.create_memory_object_stream[int](3)
        ch = from_stream(receive)
        ```
    """
    channel: Channel[Any] = Channel()

    async def feed() -> None:
        try:
            while True:
                try:
                    item = await stream.receive()
                except (anyio.EndOfStream, anyio.ClosedResourceError):
                    break
                await channel.push(item)
        finally:
            channel.close()

    spawn(feed(), name='channel.from_stream')
    return _finish(channel, mapfn)


def from_(source: Any, mapfn: Callable[[Any], Any] | None = None) -> ReadOnlyChannel[Any]:
    """Create a channel from an anyio stream, a zero-argument callable or an iterable.

    Args:
        source: anyio receive stream, callable returning END when exhausted,
            or a sync/async iterable.
        mapfn: Optional transform applied to each item.

    Raises:
        TypeError: If `source` is none of the supported kinds.
    """
    if isinstance(source, ObjectReceiveStream | ByteReceiveStream):
        return from_stream(source, mapfn)
    if isinstance(source, Iterable | AsyncIterable):
        return from_iterable(source, mapfn)
    if callable(source):
        return from_callable(source, mapfn)
    msg = f'Cannot build a channel from {type(source).__name__}'
    raise TypeError(msg)


def of(*values: Any) -> ReadOnlyChannel[Any]:
    """Create a channel yielding `values` in order, then closing."""
    return from_iterable(values)


def all_(channels: Sequence[Receiving[Any]]) -> Channel[list[Any]]:
    """Zip channels round by round.

    Each round shifts every input concurrently and pushes the list of values;
    exhausted inputs contribute END. Stops once every input yields END in the
    same round.

    Example:
        ```python
        await all_([of(1, 2), of('a', 'b')]).values()
        # [[1, 'a'], [2, 'b']]
        ```
    """
    output: Channel[list[Any]] = Channel()
    inputs = list(channels)

    async def shift_round() -> list[Any]:
        row: list[Any] = [END] * len(inputs)

        async def shift_one(index: int, channel: Receiving[Any]) -> None:
            row[index] = await channel.shift()

        async with anyio.create_task_group() as tg:
            for index, channel in enumerate(inputs):
                tg.start_soon(shift_one, index, channel)
        return row

    async def feed() -> None:
        try:
            while True:
                row = await shift_round()
                if all(value is END for value in row):
                    break
                await output.push(row)
        finally:
            output.close()

    spawn(feed(), name='channel.all')
    return output


def after(delay: float, value: Any = _MISSING) -> ReadOnlyChannel[Any]:
    """Create a channel that receives one value after `delay` seconds, then closes.

    Racing `after(...).shift()` in a select group gives the group a timeout.

    Args:
        delay: Seconds to wait.
        value: Value to deliver, `None` included; defaults to the event loop
            time at delivery.

    Example:
        ```python
        timer = after(0.5)
        if await select([inbox.shift(), timer.shift()]) is timer:
            ...  # timed out
        ```
    """
    channel: Channel[Any] = Channel(1)

    async def fire() -> None:
        try:
            await anyio.sleep(delay)
            await channel.push(anyio.current_time() if value is _MISSING else value)
        finally:
            channel.close()

    spawn(fire(), name='channel.after')
    return channel.read_only()

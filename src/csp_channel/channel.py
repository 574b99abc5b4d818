"""Channel: FIFO rendezvous/buffer between independently scheduled tasks.

A channel owns two queues of pending Orders, pushes and shifts, and a matching
pass that pairs them like an order book:

1. Live heads are paired in arrival order; cancelled Orders are dropped
   wherever the scan meets them. The Nth live push meets the Nth live shift.
   Both Orders of a pair run their pre-commit hooks before either settles;
   if a hook cancelled one of them, the pair is not transferred.
2. Up to `capacity` further pushes are settled ahead of any receiver. They stay
   queued, "in the buffer", until a shift consumes them.
3. Once closed, every remaining live shift settles to END.
4. Processed and cancelled Orders are compacted out of both queues.

The pass is scheduled with `loop.call_soon` whenever push or shift is called
and runs synchronously inside close(). It never suspends, so the queues need
no locking.

Pushes still pending at close time are not rejected: like a Go send that no
receiver ever takes, they stay queued until cancelled, and a later shift may
still take them before the END drain applies.

Example:
    ```python
    ch = Channel(2)
    await ch.push(1)
    await ch.push(2)
    await ch.close()
    assert await ch.values() == [1, 2]
    ```
"""

from __future__ import annotations

import asyncio
from typing import Any

import msgspec

from csp_channel._logging import get_logger
from csp_channel.combinators import Receiving
from csp_channel.errors import (
    AlreadyClosed,
    ChannelClosed,
    EndOfStreamPush,
    InvalidCapacity,
    MultiplePush,
)
from csp_channel.order import Order, OrderKind
from csp_channel.stats import ChannelStats
from csp_channel.types import END, Capacity, ChannelBase

__all__ = ['Channel', 'ReadOnlyChannel', 'WriteOnlyChannel']

logger = get_logger(__name__)


def _resolve_close(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)


class Channel[T](Receiving[T], ChannelBase):
    """A CSP channel with optional bounded buffering.

    Args:
        capacity: Number of pushes that may settle before a receiver arrives.
            0 (the default) makes every push wait for a matching shift.

    Raises:
        InvalidCapacityError: If capacity is not a non-negative integer.
    """

    __slots__ = (
        '_buffered',
        '_capacity',
        '_closed',
        '_last_value',
        '_pass_scheduled',
        '_pushes',
        '_read_only',
        '_shifts',
        '_transferred',
        '_write_only',
    )

    def __init__(self, capacity: int = 0) -> None:
        try:
            self._capacity: int = msgspec.convert(capacity, Capacity)
        except msgspec.ValidationError:
            raise InvalidCapacity(repr(capacity)).to_exception() from None

        self._buffered = 0
        self._closed = False
        self._last_value: Any = END
        self._pass_scheduled = False
        self._pushes: list[Order[int]] = []
        self._shifts: list[Order[T]] = []
        self._transferred = 0
        self._read_only: ReadOnlyChannel[T] | None = None
        self._write_only: WriteOnlyChannel[T] | None = None

    def __str__(self) -> str:
        return f'Channel({self._capacity})'

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f'<Channel capacity={self._capacity} {state} pushes={len(self._pushes)} shifts={len(self._shifts)}>'

    # --- Properties ---

    @property
    def capacity(self) -> int:
        """Fixed buffer capacity."""
        return self._capacity

    @property
    def length(self) -> int:
        """Alias of `capacity`."""
        return self._capacity

    @property
    def closed(self) -> bool:
        """True once close() succeeded. Never reverts."""
        return self._closed

    # --- Operations ---

    def push(self, *values: T) -> Order[int]:
        """Send one value.

        The returned Order settles to the channel capacity once a shift takes
        the value or the buffer accepts it. Protocol violations settle the
        Order with an error instead of enqueuing it.

        Args:
            *values: Exactly one value; END is not allowed.

        Returns:
            Order[int]: awaitable push Order.

        Raises (via the Order):
            ChannelClosedError: The channel is closed.
            EndOfStreamPushError: The value is END or missing.
            MultiplePushError: More than one value was given.

        Example:
            ```python
            ch = Channel()
            asyncio.create_task(ch.shift())
            await ch.push(42)
            ```
        """
        return self._enqueue_push(self, values)

    def shift(self) -> Order[T]:
        """Receive one value.

        The returned Order settles to the next value, or to END once the
        channel is closed and no pushes remain.

        Example:
            ```python
            value = await ch.shift()
            if value is END:
                ...
            ```
        """
        return self._enqueue_shift(self)

    def close(self) -> asyncio.Future[None]:
        """Close the channel.

        Pending and future shifts settle to END once the remaining pushes are
        drained. New pushes are rejected.

        Returns:
            A future resolving on the next loop turn, or failed with
            AlreadyClosedError if the channel was already closed.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[None] = loop.create_future()

        if self._closed:
            logger.debug('channel.close_rejected', channel=str(self))
            future.set_exception(AlreadyClosed().to_exception())
            return future

        self._closed = True
        logger.debug('channel.closed', channel=str(self), pending_shifts=len(self._shifts))
        self._process_orders()
        loop.call_soon(_resolve_close, future)
        return future

    def value(self) -> Any:
        """Return the last value transferred out, or END."""
        return self._last_value

    def read_only(self) -> ReadOnlyChannel[T]:
        """Return the receive-only view of this channel."""
        if self._read_only is None:
            self._read_only = ReadOnlyChannel(self)
        return self._read_only

    def write_only(self) -> WriteOnlyChannel[T]:
        """Return the send-only view of this channel."""
        if self._write_only is None:
            self._write_only = WriteOnlyChannel(self)
        return self._write_only

    def stats(self) -> ChannelStats:
        """Return a snapshot of the channel's queues and counters."""
        return ChannelStats(
            capacity=self._capacity,
            closed=self._closed,
            buffered=self._buffered,
            pending_pushes=sum(1 for push in self._pushes if not push.done()),
            pending_shifts=sum(1 for shift in self._shifts if not shift.done()),
            total_transferred=self._transferred,
        )

    # --- Engine ---

    def _enqueue_push(self, owner: ChannelBase, values: tuple[Any, ...]) -> Order[int]:
        value = values[0] if values else END
        order: Order[int] = Order(owner, OrderKind.PUSH, value)

        reason: ChannelClosed | EndOfStreamPush | MultiplePush
        if self._closed:
            reason = ChannelClosed()
        elif value is END:
            reason = EndOfStreamPush()
        elif len(values) > 1:
            reason = MultiplePush(len(values))
        else:
            self._pushes.append(order)
            self._schedule()
            return order

        logger.debug('channel.push_rejected', channel=str(self), reason=type(reason).__name__)
        order._reject(reason.to_exception())
        return order

    def _enqueue_shift(self, owner: ChannelBase) -> Order[T]:
        order: Order[T] = Order(owner, OrderKind.SHIFT)
        self._shifts.append(order)
        self._schedule()
        return order

    def _schedule(self) -> None:
        if not self._pass_scheduled:
            self._pass_scheduled = True
            asyncio.get_running_loop().call_soon(self._run_scheduled_pass)

    def _run_scheduled_pass(self) -> None:
        self._pass_scheduled = False
        self._process_orders()

    def _process_orders(self) -> None:
        pushes, shifts = self._pushes, self._shifts
        push_index = shift_index = 0

        while push_index < len(pushes) and shift_index < len(shifts):
            push, shift = pushes[push_index], shifts[shift_index]
            if push.cancelled():
                push_index += 1
                continue
            if shift.cancelled():
                shift_index += 1
                continue

            # Announce both sides before settling either. A hook may cancel
            # the counterpart (two members of one select group on this
            # channel); the cancelled side is then skipped on the next scan.
            shift._announce()
            push._announce()
            if shift.cancelled() or push.cancelled():
                continue

            if push.done():
                self._buffered -= 1
            self._last_value = push.value
            self._transferred += 1
            shift._commit(push.value)
            push._commit(self._capacity)
            push_index += 1
            shift_index += 1

        # Buffer-accepted pushes are already settled and counted in _buffered.
        index = push_index
        while index < len(pushes) and self._buffered < self._capacity:
            push = pushes[index]
            if not push.done():
                push._commit(self._capacity)
                if not push.cancelled():
                    self._buffered += 1
            index += 1

        if self._closed:
            for shift in shifts[shift_index:]:
                if not shift.cancelled():
                    self._last_value = END
                    shift._commit(END)
            shift_index = len(shifts)

        self._pushes = [push for push in pushes[push_index:] if not push.cancelled()]
        self._shifts = [shift for shift in shifts[shift_index:] if not shift.cancelled()]


class ReadOnlyChannel[T](Receiving[T], ChannelBase):
    """Receive-only view sharing the queues of its Channel.

    Has shift, value, capacity, read_only and every combinator; push and
    close are absent.
    """

    __slots__ = ('_channel',)

    def __init__(self, channel: Channel[T]) -> None:
        self._channel = channel

    def __str__(self) -> str:
        return str(self._channel)

    def __repr__(self) -> str:
        return f'<ReadOnlyChannel of {self._channel!r}>'

    @property
    def capacity(self) -> int:
        """Fixed buffer capacity."""
        return self._channel.capacity

    def shift(self) -> Order[T]:
        """Receive one value; see Channel.shift()."""
        return self._channel._enqueue_shift(self)

    def value(self) -> Any:
        """Return the last value transferred out, or END."""
        return self._channel.value()

    def read_only(self) -> ReadOnlyChannel[T]:
        return self


class WriteOnlyChannel[T](ChannelBase):
    """Send-only view sharing the queues of its Channel.

    Has push, close, capacity, length and write_only; shift and the
    combinators are absent.
    """

    __slots__ = ('_channel',)

    def __init__(self, channel: Channel[T]) -> None:
        self._channel = channel

    def __str__(self) -> str:
        return str(self._channel)

    def __repr__(self) -> str:
        return f'<WriteOnlyChannel of {self._channel!r}>'

    @property
    def capacity(self) -> int:
        """Fixed buffer capacity."""
        return self._channel.capacity

    @property
    def length(self) -> int:
        """Alias of `capacity`."""
        return self._channel.capacity

    def push(self, *values: T) -> Order[int]:
        """Send one value; see Channel.push()."""
        return self._channel._enqueue_push(self, values)

    def close(self) -> asyncio.Future[None]:
        """Close the underlying channel; see Channel.close()."""
        return self._channel.close()

    def write_only(self) -> WriteOnlyChannel[T]:
        return self

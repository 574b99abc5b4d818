"""Order: a cancelable, single-resolution handle for one pending push or shift.

An Order wraps an asyncio future and adds two things the future lacks:

- the channel (or view) the operation was invoked on, so a select group can
  report which channel won;
- pre-commit hooks, run synchronously just before the Order settles
  successfully. Select uses them to cancel sibling Orders before the winner's
  result becomes observable.

Cancelling the task that awaits an Order (directly, or through an anyio cancel
scope such as `anyio.fail_after`) cancels the Order as well, and the channel
never matches a cancelled Order.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, Any

from csp_channel.types import END

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from csp_channel.types import ChannelBase

__all__ = ['Order', 'OrderKind']


class OrderKind(Enum):
    """Direction of the operation an Order stands for."""

    PUSH = 'push'
    SHIFT = 'shift'


def _retrieve_exception(future: asyncio.Future[Any]) -> None:
    """Mark a payload future's exception as retrieved.

    A failing payload must only surface when a shift receives it, not as an
    "exception was never retrieved" report while it waits in the queue.
    """
    if not future.cancelled():
        future.exception()


class Order[T]:
    """One pending push or shift.

    Orders are created by `push()` and `shift()`; they are not constructed
    directly. Awaiting an Order yields the shifted value (or `END`), or the
    channel capacity for a push.

    Attributes:
        channel: The channel or view that created this Order.
        kind: OrderKind.PUSH or OrderKind.SHIFT.
        value: The pushed value; END for shifts.
    """

    __slots__ = ('_future', '_pre_commit', 'channel', 'kind', 'value')

    def __init__(self, channel: ChannelBase, kind: OrderKind, value: Any = END) -> None:
        self._future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._pre_commit: list[Callable[[], None]] = []
        self.channel = channel
        self.kind = kind
        self.value = value
        if asyncio.isfuture(value):
            value.add_done_callback(_retrieve_exception)

    def __repr__(self) -> str:
        if self._future.cancelled():
            state = 'cancelled'
        elif self._future.done():
            state = 'settled'
        else:
            state = 'pending'
        return f'<Order {self.kind.value} {state} on {self.channel}>'

    def __await__(self) -> Generator[Any, None, T]:
        return self._future.__await__()

    # --- Future-like API ---

    def done(self) -> bool:
        """Return True if the Order settled or was cancelled."""
        return self._future.done()

    def cancelled(self) -> bool:
        """Return True if the Order was cancelled before it settled."""
        return self._future.cancelled()

    def cancel(self) -> bool:
        """Cancel the Order if it has not settled yet.

        Idempotent. A settled Order (including a push already accepted into a
        channel buffer) cannot be cancelled.

        Returns:
            True if the Order is now cancelled by this call.
        """
        return self._future.cancel()

    def result(self) -> T:
        """Return the settled value, like asyncio.Future.result()."""
        return self._future.result()

    def exception(self) -> BaseException | None:
        """Return the settled exception, like asyncio.Future.exception()."""
        return self._future.exception()

    def add_done_callback(self, fn: Callable[[Order[T]], object]) -> None:
        """Call `fn(order)` once the Order settles or is cancelled."""
        self._future.add_done_callback(lambda _: fn(self))

    def add_pre_commit(self, hook: Callable[[], None]) -> None:
        """Register a hook run synchronously right before successful settlement.

        Args:
            hook: Zero-argument callable.
        """
        self._pre_commit.append(hook)

    # --- Engine side ---

    def _announce(self) -> None:
        """Run the pre-commit hooks once, without settling.

        A hook may cancel this Order (or its counterpart in a transfer), so
        callers check `cancelled()` before settling.
        """
        if self._future.done():
            return

        hooks, self._pre_commit = self._pre_commit, []
        for hook in hooks:
            hook()

    def _commit(self, value: Any) -> None:
        """Settle successfully with `value`, running pre-commit hooks first.

        A value that is itself an asyncio future is adopted: the Order settles
        with that future's outcome once it completes.
        """
        self._announce()

        # A hook of another Order in the same select group may have cancelled us.
        if self._future.done():
            return

        if asyncio.isfuture(value):
            value.add_done_callback(self._adopt)
        else:
            self._future.set_result(value)

    def _adopt(self, source: asyncio.Future[Any]) -> None:
        if self._future.done():
            return
        if source.cancelled():
            self._future.cancel()
        elif (exc := source.exception()) is not None:
            self._future.set_exception(exc)
        else:
            self._future.set_result(source.result())

    def _reject(self, exc: BaseException) -> None:
        """Settle with an error. Pre-commit hooks are not run."""
        if not self._future.done():
            self._future.set_exception(exc)

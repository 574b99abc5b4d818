"""select: race several pending Orders so that exactly one takes effect.

Every Order in the group gets a pre-commit hook. The channel engine runs an
Order's hooks synchronously just before settling it, and the hook cancels all
sibling Orders. A sibling cancelled this way is skipped by its own channel's
matching pass even if that pass runs later in the same loop turn, so no two
members of a group can both complete. A member that had already settled when
the group was formed wins outright and the rest are cancelled.

A non-blocking select ("default case") includes a shift from a closed channel:
it settles to END as soon as its channel's pass runs unless another member has
already committed.

Example:
    ```python
    closed = Channel()
    await closed.close()

    winner = await select([inbox.shift(), outbox.push(item), closed.shift()])
    if winner is inbox:
        message = inbox.value()
    elif winner is outbox:
        ...
    else:
        ...  # nothing was ready
    ```
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from csp_channel._logging import get_logger
from csp_channel.errors import SELECT_NOT_ORDER, SELECT_NOT_SEQUENCE, InvalidSelect
from csp_channel.order import Order

if TYPE_CHECKING:
    from collections.abc import Generator

    from csp_channel.types import ChannelBase

__all__ = ['Select', 'select']

logger = get_logger(__name__)


class Select:
    """Outcome of a select group.

    Awaiting it yields the channel (or view) that owned the winning Order.
    Created by `select()`.
    """

    __slots__ = ('_future', '_orders', '_winner')

    def __init__(self, orders: Any) -> None:
        self._future: asyncio.Future[ChannelBase] = asyncio.get_running_loop().create_future()
        self._orders: tuple[Order[Any], ...] = ()
        self._winner: Order[Any] | None = None

        if isinstance(orders, str | bytes) or not isinstance(orders, Sequence):
            self._fail(InvalidSelect(SELECT_NOT_SEQUENCE).to_exception())
            return

        self._orders = tuple(order for order in orders if isinstance(order, Order))
        if len(self._orders) != len(orders):
            self.cancel_orders()
            self._fail(InvalidSelect(SELECT_NOT_ORDER).to_exception())
            return

        # A member that settled before the group was formed has already won.
        settled = next((order for order in self._orders if order.done() and not order.cancelled()), None)
        if settled is not None:
            self._commit(settled)

        for order in self._orders:
            order.add_pre_commit(lambda order=order: self._commit(order))
            order.add_done_callback(self._on_settled)
        self._future.add_done_callback(self._on_outcome)

    def __repr__(self) -> str:
        return f'<Select orders={len(self._orders)} done={self._future.done()}>'

    def __await__(self) -> Generator[Any, None, ChannelBase]:
        return self._future.__await__()

    @property
    def orders(self) -> tuple[Order[Any], ...]:
        """The Orders racing in this group."""
        return self._orders

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def result(self) -> ChannelBase:
        return self._future.result()

    def exception(self) -> BaseException | None:
        return self._future.exception()

    def cancel(self) -> bool:
        """Cancel every Order in the group and the outcome itself.

        Orders that already settled are unaffected.
        """
        self.cancel_orders()
        return self._future.cancel()

    def cancel_orders(self, *, keep: Order[Any] | None = None) -> None:
        """Cancel every Order in the group except `keep`."""
        for order in self._orders:
            if order is not keep:
                order.cancel()

    # --- Callbacks ---

    def _commit(self, order: Order[Any]) -> None:
        # Runs synchronously inside the winning channel's matching pass.
        if self._winner is None:
            self._winner = order
            self.cancel_orders(keep=order)

    def _on_settled(self, order: Order[Any]) -> None:
        if self._future.done():
            return

        if order.cancelled():
            if all(member.cancelled() for member in self._orders):
                self._future.cancel()
            return

        if self._winner is None:
            self._commit(order)
        elif self._winner is not order:
            return

        exc = order.exception()
        if exc is not None:
            self.cancel_orders(keep=order)
            self._fail(exc)
        else:
            self._future.set_result(order.channel)

    def _on_outcome(self, future: asyncio.Future[ChannelBase]) -> None:
        if future.cancelled():
            self.cancel_orders()

    def _fail(self, exc: BaseException) -> None:
        logger.debug('select.failed', error=type(exc).__name__, orders=len(self._orders))
        self._future.set_exception(exc)


def select(orders: Sequence[Order[Any]]) -> Select:
    """Race pending push/shift Orders; at most one of them takes effect.

    Args:
        orders: Orders returned by push() and shift(), possibly from
            different channels.

    Returns:
        An awaitable Select settling to the channel owning the winning Order.
        It fails with the winner's error if that Order failed, and with
        InvalidSelectError if `orders` is not a sequence of Orders. Losing
        Orders are cancelled in every case.

    Example:
        ```python
        winner = await select([a.shift(), b.shift()])
        value = winner.value()
        ```
    """
    return Select(orders)

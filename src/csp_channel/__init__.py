"""
csp_channel: CSP-style channels for asyncio.

Provides Go-style channels with a promise-shaped API:
- `Channel[T](capacity)`: FIFO channel, unbuffered by default
- `push()` / `shift()`: return cancelable awaitable Orders
- `close()`: pending and future shifts drain to `END`
- `select(orders)`: race Orders so exactly one takes effect
- Stream combinators: map, filter, flat_map, slice, reduce, ...
- Sources: `of`, `from_`, `all_`, `after`
- `functional`: curried free-function forms of every operation

## Cancellation & Timeouts

Orders integrate with asyncio and anyio cancellation: cancelling the awaiting
task cancels the Order, and the channel never matches a cancelled Order.

Example with timeout:
    ```python
    with anyio.fail_after(5):
        value = await ch.shift()  # Raises TimeoutError if takes >5s
    ```
"""

from csp_channel import functional
from csp_channel._config import ChannelConfig, get_config, init
from csp_channel._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)
from csp_channel.channel import Channel, ReadOnlyChannel, WriteOnlyChannel
from csp_channel.errors import (
    AlreadyClosed,
    AlreadyClosedError,
    ChannelClosed,
    ChannelClosedError,
    EmptyReduce,
    EmptyReduceError,
    EndOfStreamPush,
    EndOfStreamPushError,
    InvalidCapacity,
    InvalidCapacityError,
    InvalidSelect,
    InvalidSelectError,
    MultiplePush,
    MultiplePushError,
)
from csp_channel.order import Order, OrderKind
from csp_channel.protocols import Receiver, Sender
from csp_channel.select import Select, select
from csp_channel.sources import after, all_, from_, from_callable, from_iterable, from_stream, of
from csp_channel.stats import ChannelStats
from csp_channel.types import END, Capacity, ChannelBase, EndOfStream, is_channel

__all__ = [
    'END',
    # Errors - struct variants
    'AlreadyClosed',
    # Errors - exception variants
    'AlreadyClosedError',
    'Capacity',
    # Channels
    'Channel',
    'ChannelBase',
    'ChannelClosed',
    'ChannelClosedError',
    # Config
    'ChannelConfig',
    'ChannelStats',
    'EmptyReduce',
    'EmptyReduceError',
    'EndOfStream',
    'EndOfStreamPush',
    'EndOfStreamPushError',
    'InvalidCapacity',
    'InvalidCapacityError',
    'InvalidSelect',
    'InvalidSelectError',
    'MultiplePush',
    'MultiplePushError',
    'Order',
    'OrderKind',
    'ReadOnlyChannel',
    'Receiver',
    'Select',
    'Sender',
    'WriteOnlyChannel',
    # Logging
    'add_log_hook',
    # Sources
    'after',
    'all_',
    'clear_log_hooks',
    'configure_logging',
    'from_',
    'from_callable',
    'from_iterable',
    'from_stream',
    'functional',
    'get_config',
    'get_logger',
    'init',
    'is_channel',
    'of',
    'remove_log_hook',
    'select',
]

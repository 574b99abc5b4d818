"""Functional interface: every channel operation as a curried free function.

Each function takes the operation's positional arguments followed by the
channel. Given fewer arguments it returns a partial awaiting the rest:

    ```python
    from csp_channel import functional as F

    F.slice(1, 4, ch)
    F.slice(1, 4)(ch)
    F.slice(1)(4)(ch)
    await F.shift(ch)
    ```

Arities are fixed per operation; optional arguments of the method form
(e.g. `reduce`'s initial value, `slice`'s end) are required here.
"""

from __future__ import annotations

import functools
from typing import Any

from csp_channel.select import select
from csp_channel.sources import all_, from_, of
from csp_channel.types import is_channel

__all__ = [
    'all_',
    'close',
    'concat',
    'every',
    'filter',
    'flat',
    'flat_map',
    'for_each',
    'from_',
    'is_channel',
    'join',
    'map',
    'of',
    'push',
    'read_only',
    'reduce',
    'select',
    'shift',
    'slice',
    'some',
    'value',
    'values',
    'write_only',
]

ARITIES: dict[str, int] = {
    'close': 0,
    'read_only': 0,
    'shift': 0,
    'value': 0,
    'values': 0,
    'write_only': 0,
    'concat': 1,
    'every': 1,
    'filter': 1,
    'flat': 1,
    'flat_map': 1,
    'for_each': 1,
    'join': 1,
    'map': 1,
    'push': 1,
    'some': 1,
    'reduce': 2,
    'slice': 2,
}


def curried(name: str, arity: int) -> Any:
    """Build the curried free function for channel method `name`.

    Args:
        name: Method name on Channel or one of its views.
        arity: Number of arguments preceding the channel.
    """

    def apply(*args: Any) -> Any:
        if len(args) <= arity:
            return functools.partial(apply, *args)

        target = args[arity]
        if not is_channel(target):
            msg = f'{name}: expected a channel, got {type(target).__name__}'
            raise TypeError(msg)
        return getattr(target, name)(*args[:arity])

    apply.__name__ = apply.__qualname__ = name
    apply.__doc__ = f'Curried form of channel.{name}(); takes {arity} argument(s), then the channel.'
    return apply


close = curried('close', ARITIES['close'])
concat = curried('concat', ARITIES['concat'])
every = curried('every', ARITIES['every'])
filter = curried('filter', ARITIES['filter'])  # noqa: A001
flat = curried('flat', ARITIES['flat'])
flat_map = curried('flat_map', ARITIES['flat_map'])
for_each = curried('for_each', ARITIES['for_each'])
join = curried('join', ARITIES['join'])
map = curried('map', ARITIES['map'])  # noqa: A001
push = curried('push', ARITIES['push'])
read_only = curried('read_only', ARITIES['read_only'])
reduce = curried('reduce', ARITIES['reduce'])
shift = curried('shift', ARITIES['shift'])
slice = curried('slice', ARITIES['slice'])  # noqa: A001
some = curried('some', ARITIES['some'])
value = curried('value', ARITIES['value'])
values = curried('values', ARITIES['values'])
write_only = curried('write_only', ARITIES['write_only'])

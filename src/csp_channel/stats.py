"""Channel statistics snapshot."""

from __future__ import annotations

import msgspec

from csp_channel.types import Capacity

__all__ = ['ChannelStats']


class ChannelStats(msgspec.Struct, frozen=True, gc=False):
    """Statistics snapshot for a channel.

    Attributes:
        capacity: Fixed buffer capacity.
        closed: Whether close() has been called.
        buffered: Buffer-accepted pushes not yet consumed by a shift.
        pending_pushes: Live pushes still waiting for a receiver or buffer slot.
        pending_shifts: Live shifts still waiting for a value.
        total_transferred: Values handed from a push to a shift so far.
    """

    capacity: Capacity
    closed: bool
    buffered: int
    pending_pushes: int
    pending_shifts: int
    total_transferred: int

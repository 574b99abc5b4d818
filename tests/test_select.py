"""Tests for select(): exclusivity, default case, cancellation and errors."""

from __future__ import annotations

import asyncio

import anyio
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from csp_channel import (
    END,
    Channel,
    ChannelClosedError,
    EndOfStreamPushError,
    InvalidSelectError,
    Select,
    after,
    of,
    select,
)


class TestSelectBasic:
    """Tests for basic select() functionality."""

    async def test_select_returns_winning_channel(self) -> None:
        a, b = Channel(), Channel()

        async def producer() -> None:
            await b.push(0)
            await a.push(1)
            await a.shift()

        task = asyncio.create_task(producer())

        assert await select([a.shift(), b.shift()]) is b
        assert b.value() == 0
        assert await a.shift() == 1
        assert await select([a.push(0), b.shift()]) is a
        await task

    async def test_select_returns_select_object(self) -> None:
        ch = Channel(1)
        outcome = select([ch.push(1)])

        assert isinstance(outcome, Select)
        assert await outcome is ch
        assert outcome.done()
        assert outcome.result() is ch

    async def test_select_single_buffered_value(self) -> None:
        ch = Channel(1)
        await ch.push(42)

        winner = await select([ch.shift()])
        assert winner is ch
        assert ch.value() == 42

    async def test_select_reports_view(self) -> None:
        """The winner is whatever object the Order was created on."""
        ch = Channel(1)
        view = ch.read_only()
        await ch.push('x')

        assert await select([view.shift()]) is view

    async def test_losers_are_cancelled(self) -> None:
        a, b = Channel(1), Channel()
        await a.push('ready')
        group = [a.shift(), b.shift()]

        assert await select(group) is a
        assert not group[0].cancelled()
        assert group[1].cancelled()

    async def test_loser_does_not_consume_value(self) -> None:
        a, b = Channel(1), Channel(1)
        await a.push('a')
        assert await select([a.shift(), b.shift()]) is a

        await b.push('b')
        assert await b.shift() == 'b'

    async def test_empty_select_stays_pending(self) -> None:
        outcome = select([])
        await asyncio.sleep(0)
        assert not outcome.done()
        outcome.cancel()


class TestSelectDefaultCase:
    """Tests for the non-blocking select idiom."""

    async def test_non_blocking_select(self) -> None:
        """A shift on a closed channel acts as the default case."""
        a, b = Channel(), Channel()
        closed = Channel()
        await closed.close()

        winner = await select([a.shift(), b.push(0), closed.shift()])

        assert winner is closed
        assert a.stats().pending_shifts == 0
        assert b.stats().pending_pushes == 0

    async def test_non_blocking_select_with_of(self) -> None:
        a, b = Channel(), Channel()
        empty = of()

        assert await select([a.shift(), b.push(0), empty.shift()]) is empty

    async def test_ready_case_beats_default(self) -> None:
        ready = Channel(1)
        await ready.push('value')
        closed = Channel()
        await closed.close()

        assert await select([ready.shift(), closed.shift()]) is ready
        assert ready.value() == 'value'

    async def test_cancel_then_default(self) -> None:
        """A cancelled select leaves no push behind."""
        ch = Channel()
        select([ch.push('cancelled')]).cancel()
        closed = of()

        assert await select([ch.shift(), closed.shift()]) is closed
        assert closed.value() is END


class TestSelectExclusivity:
    """Tests that at most one member of a group takes effect."""

    async def test_two_ready_members_one_winner(self) -> None:
        """Both channels have values in the same turn; only one is taken."""
        a, b = Channel(1), Channel(1)
        await a.push('a')
        await b.push('b')

        winner = await select([a.shift(), b.shift()])
        loser = b if winner is a else a

        assert winner is a
        assert loser.stats().buffered == 1
        assert await loser.shift() == ('b' if loser is b else 'a')

    async def test_push_and_shift_ready_in_same_turn(self) -> None:
        """A waiting receiver and a buffered value race in one turn."""
        inbox, outbox = Channel(1), Channel()
        await inbox.push('in')
        receiver = outbox.shift()

        winner = await select([inbox.shift(), outbox.push('out')])
        await asyncio.sleep(0)

        if winner is inbox:
            assert not receiver.done()
            receiver.cancel()
        else:
            assert await receiver == 'out'
            assert inbox.stats().buffered == 1

    async def test_already_settled_member_wins(self) -> None:
        """A member settled before the group was formed beats a ready sibling."""
        closed = Channel()
        closed.close()
        ready = closed.shift()
        await asyncio.sleep(0)
        assert ready.done()

        buffered = Channel(1)
        sibling = buffered.push('x')

        assert await select([ready, sibling]) is closed
        assert sibling.cancelled()
        assert buffered.stats().buffered == 0

    async def test_failed_member_before_group_wins(self) -> None:
        """A member rejected before the group was formed fails the outcome."""
        closed = Channel()
        closed.close()
        rejected = closed.push(1)
        buffered = Channel(1)
        sibling = buffered.push('x')

        with pytest.raises(ChannelClosedError):
            await select([sibling, rejected])
        assert sibling.cancelled()
        assert buffered.stats().buffered == 0

    async def test_same_channel_push_and_shift(self) -> None:
        """Two members on one channel never pair with each other."""
        ch = Channel()
        push, shift = ch.push('own'), ch.shift()
        outcome = select([push, shift])
        await asyncio.sleep(0)

        assert push.cancelled()
        assert not shift.done()
        assert not outcome.done()
        assert ch.stats().total_transferred == 0
        assert ch.value() is END

        assert await ch.push('other') == 0
        assert await outcome is ch
        assert await shift == 'other'

    async def test_same_channel_pair_with_buffer(self) -> None:
        ch = Channel(1)
        push, shift = ch.push('own'), ch.shift()
        outcome = select([shift, push])
        await asyncio.sleep(0)

        assert push.cancelled()
        assert ch.stats().buffered == 0
        outcome.cancel()

    async def test_push_winner_does_not_leak_to_buffer(self) -> None:
        """A losing push is never buffer-accepted."""
        a, b = Channel(1), Channel(1)
        await a.push('full')

        assert await select([a.push('extra'), b.push('taken')]) is b
        await a.close()
        assert await a.values() == ['full']


class TestSelectCancellation:
    """Tests for cancellation of select groups."""

    async def test_cancel_cancels_every_order(self) -> None:
        a, b = Channel(), Channel()
        group = [a.shift(), b.push(1)]
        outcome = select(group)

        assert outcome.cancel()
        assert outcome.cancelled()
        assert all(order.cancelled() for order in group)

    async def test_timeout_cancels_group(self) -> None:
        """anyio cancel scopes cancel the outcome and every Order."""
        a, b = Channel(), Channel()
        group = [a.shift(), b.shift()]

        with anyio.move_on_after(0.01) as scope:
            await select(group)

        assert scope.cancelled_caught
        assert all(order.cancelled() for order in group)

    async def test_fail_after_raises_timeout(self) -> None:
        ch = Channel()
        with pytest.raises(TimeoutError):
            with anyio.fail_after(0.01):
                await select([ch.shift()])
        assert ch.stats().pending_shifts == 0

    async def test_all_members_cancelled_cancels_outcome(self) -> None:
        ch = Channel()
        order = ch.shift()
        outcome = select([order])

        order.cancel()
        await asyncio.sleep(0)
        assert outcome.cancelled()

    async def test_timer_as_timeout_case(self) -> None:
        inbox = Channel()
        timer = after(0.01)

        assert await select([inbox.shift(), timer.shift()]) is timer
        assert isinstance(timer.value(), float)


class TestSelectErrors:
    """Tests for select() error cases."""

    async def test_not_a_sequence(self) -> None:
        with pytest.raises(InvalidSelectError, match='select: Argument must be an array.'):
            await select(of(0).shift())  # type: ignore[arg-type]

    async def test_string_is_not_a_sequence_of_orders(self) -> None:
        with pytest.raises(InvalidSelectError, match='Argument must be an array'):
            await select('ab')  # type: ignore[arg-type]

    async def test_non_order_member(self) -> None:
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        future.set_result(None)

        with pytest.raises(InvalidSelectError, match='select accepts only promises returned by push & shift.'):
            await select([future])  # type: ignore[list-item]

    async def test_non_order_member_cancels_valid_orders(self) -> None:
        ch = Channel()
        order = ch.shift()

        with pytest.raises(InvalidSelectError):
            await select([order, 'not an order'])  # type: ignore[list-item]
        assert order.cancelled()

    async def test_invalid_select_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            await select(None)  # type: ignore[arg-type]

    async def test_member_error_propagates(self) -> None:
        ch = Channel()
        with pytest.raises(EndOfStreamPushError):
            await select([ch.push(END)])

    async def test_member_error_cancels_siblings(self) -> None:
        closed, other = Channel(), Channel()
        closed.close()
        sibling = other.shift()

        with pytest.raises(ChannelClosedError):
            await select([sibling, closed.push(1)])
        assert sibling.cancelled()


@pytest.mark.hypothesis_property
@given(size=st.integers(min_value=2, max_value=8))
@settings(max_examples=25)
async def test_property_exactly_one_winner(size: int) -> None:
    """Property: with every member ready, exactly one value is consumed."""
    channels = [Channel(1) for _ in range(size)]
    for index, ch in enumerate(channels):
        await ch.push(index)

    group = [ch.shift() for ch in channels]
    winner = await select(group)
    await asyncio.sleep(0)

    assert sum(not order.cancelled() for order in group) == 1
    assert sum(ch.stats().buffered for ch in channels) == size - 1
    assert winner is channels[[not order.cancelled() for order in group].index(True)]

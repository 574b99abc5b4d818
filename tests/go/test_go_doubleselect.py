"""Two cases of a select must never both run.

Adapted from the Go distribution's test/chan/doubleselect.go (BSD-style
license). The sender offers each counter value to four channels at once; if
two cases ever ran in the same iteration the receiver would see a duplicate.
"""

from __future__ import annotations

import anyio

from csp_channel import Channel, select

ITERATIONS = 2000


async def sender(n: int, *channels: Channel[int]) -> None:
    for i in range(n):
        await select([ch.push(i) for ch in channels])
    for ch in channels:
        ch.close()


async def mux(output: Channel[int], input_: Channel[int], done: Channel[bool]) -> None:
    """Forward values from one of the sender's channels onto a shared one."""
    await input_.for_each(output.push)
    await done.push(True)


async def test_doubleselect() -> None:
    c1, c2, c3, c4 = Channel(), Channel(), Channel(), Channel()
    done: Channel[bool] = Channel()
    cmux: Channel[int] = Channel()
    seen: set[int] = set()

    async def recver() -> None:
        async for value in cmux:
            assert value not in seen, f'got duplicate value: {value}'
            seen.add(value)

    with anyio.fail_after(30):
        async with anyio.create_task_group() as tg:
            tg.start_soon(sender, ITERATIONS, c1, c2, c3, c4)
            for ch in (c1, c2, c3, c4):
                tg.start_soon(mux, cmux, ch, done)
            tg.start_soon(recver)

            for _ in range(4):
                await done.shift()
            await cmux.close()

    assert seen == set(range(ITERATIONS))

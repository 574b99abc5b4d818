"""Torture test: make a lot of tasks, threaded together, and tear them down cleanly.

Adapted from the Go distribution's test/chan/goroutines.go (BSD-style license).
"""

from __future__ import annotations

import asyncio

from csp_channel import Channel


async def relay(left: Channel[int], right: Channel[int]) -> None:
    await left.push(await right.shift())


async def test_goroutines() -> None:
    n = 2000
    leftmost: Channel[int] = Channel()
    left = right = leftmost
    tasks = []

    for _ in range(n):
        right = Channel()
        tasks.append(asyncio.create_task(relay(left, right)))
        left = right

    first = right.push(1)

    assert await leftmost.shift() == 1
    assert await first == 0
    await asyncio.gather(*tasks)

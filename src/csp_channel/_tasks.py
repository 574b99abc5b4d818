"""Background tasks feeding derived channels.

Combinators and sources return their output channel immediately and fill it
from a task running on the current event loop. The event loop only keeps weak
references to tasks, so running tasks are held here until they finish.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from csp_channel._logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Coroutine

__all__ = ['spawn']

logger = get_logger(__name__)

_running: set[asyncio.Task[Any]] = set()


def _on_done(task: asyncio.Task[Any]) -> None:
    _running.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error('channel.task_failed', task=task.get_name(), exc_info=exc)


def spawn(coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
    """Schedule `coro` on the running loop and keep it alive until it finishes.

    Exceptions escaping the coroutine are logged as `channel.task_failed`.

    Args:
        coro: Coroutine to run.
        name: Task name used in log events.

    Returns:
        The scheduled task.
    """
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _running.add(task)
    task.add_done_callback(_on_done)
    return task

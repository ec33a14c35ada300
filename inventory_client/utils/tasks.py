# inventory_client/utils/tasks.py
import asyncio
import logging
from typing import Awaitable, Callable, Optional

_log = logging.getLogger(__name__)

# strong refs so fire-and-forget tasks are not garbage collected mid-flight
_running: set = set()


def spawn(
    coro: Awaitable,
    *,
    on_error: Optional[Callable[[BaseException], None]] = None,
    on_done: Optional[Callable[[object], None]] = None,
) -> asyncio.Task:
    """
    Schedule `coro` on the running loop from a Qt slot.

    Exceptions go to `on_error` when given, otherwise they are logged.
    Cancellation is silent.
    """
    task = asyncio.ensure_future(coro)
    _running.add(task)

    def _finished(t: asyncio.Task):
        _running.discard(t)
        if t.cancelled():
            return
        exc = t.exception()
        if exc is not None:
            if on_error is not None:
                on_error(exc)
            else:
                _log.error("Background task failed", exc_info=exc)
            return
        if on_done is not None:
            on_done(t.result())

    task.add_done_callback(_finished)
    return task

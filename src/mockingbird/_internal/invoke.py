"""Invoke helpers — call sync or async handlers uniformly.

Response handlers can be ``def`` or ``async def``. Sync handlers run in
a worker thread so a slow callback never stalls unrelated connections;
async handlers are awaited on the event loop.

Usage::

    from mockingbird._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine.

    Works with both sync and async callables::

        # sync: runs in a worker thread
        def users(request):
            return '[{"id": 1}]'

        # async: awaited directly
        async def users(request):
            await anyio.sleep(0.2)
            return '[{"id": 1}]'
    """
    if inspect.iscoroutinefunction(handler):
        return await handler(*args, **kwargs)
    result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result

from __future__ import annotations

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol


class Notifier(Protocol):
    """Serial context on which delegate callbacks run.

    Callbacks delivered through one notifier never run concurrently with
    each other, so delegates can update their own state without locking.
    """

    async def call(self, fn: Callable[..., Any], *args, **kwargs) -> Any: ...


class LoopNotifier:
    """Runs callbacks directly on the event loop thread.

    The loop is already a single serial context, so nothing is dispatched.
    """

    async def call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        return fn(*args, **kwargs)


class SerialExecutorNotifier:
    """Runs callbacks on one dedicated worker thread.

    Useful when delegate state belongs to a thread other than the event
    loop (e.g. a UI thread bridged through a single-worker executor).
    """

    def __init__(self, executor: Optional[ThreadPoolExecutor] = None, *, thread_name_prefix: str = "pagekit-notify"):
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix=thread_name_prefix)

    async def call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(fn, *args, **kwargs))

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

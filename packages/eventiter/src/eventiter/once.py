"""
Await a single occurrence of a named event.
"""
from __future__ import annotations

import asyncio
from typing import Any

from .adapter import get_source_adapter
from .errors import as_exception
from .types import ListenerOptions, OnOptions


async def once(
    source: Any,
    event: str,
    *,
    error_event: str | None = None,
    options: OnOptions | None = None,
) -> tuple[Any, ...]:
    """
    Wait for the next ``event`` on ``source`` and return its arguments.

    For sources with on/once/remove_listener, raises the payload of
    ``error_event`` (default ``"error"``) if that fires first. Listeners are
    removed once the wait settles or is cancelled.
    """
    opts = options or OnOptions()
    if error_event is not None:
        opts = opts.model_copy(update={"error_event": error_event})
    adapter = get_source_adapter(source)
    loop = opts.loop or asyncio.get_running_loop()
    future: asyncio.Future[tuple[Any, ...]] = loop.create_future()
    watch_errors = adapter.supports_failure_events and event != opts.error_event
    listener_options = ListenerOptions(once=True)

    def on_event(*args: Any) -> None:
        if not future.done():
            future.set_result(args)

    def on_error(err: Any = None) -> None:
        if not future.done():
            future.set_exception(as_exception(err))

    adapter.add_listener(event, on_event, listener_options)
    if watch_errors:
        adapter.add_listener(opts.error_event, on_error, listener_options)
    try:
        return await future
    finally:
        adapter.remove_listener(event, on_event, listener_options)
        if watch_errors:
            adapter.remove_listener(opts.error_event, on_error, listener_options)

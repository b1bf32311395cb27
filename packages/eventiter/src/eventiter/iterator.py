"""
Async iterator over the future occurrences of one named event.

Turns a push-based source into a pull-based, single-consumer sequence:

- events that arrive while nobody is waiting are buffered in arrival order
- next() calls made while nothing is buffered wait in call order
- the source's failure event ends the subscription and is delivered to
  exactly one consumer, after any buffered events
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any

from .adapter import SourceAdapter, get_source_adapter
from .errors import ValidationError, as_exception
from .types import DEFAULT_ERROR_EVENT, DONE, IterResult, OnOptions

logger = logging.getLogger(__name__)


class EventIterator:
    """
    Pull-based view of a named event on a source.

    Listeners are registered on construction and removed the first time the
    iterator finishes (return_(), throw() or a failure event). Events buffered
    before that point are still delivered before the iterator reports done.

    Use it as ``async for args in it`` inside ``async with on(...) as it`` so
    the subscription is released when the loop body breaks or raises.
    """

    def __init__(
        self,
        adapter: SourceAdapter,
        event: str,
        *,
        error_event: str = DEFAULT_ERROR_EVENT,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._adapter = adapter
        self._event = event
        self._error_event = error_event
        self._loop = loop

        # Never both non-empty: arrivals and requests are matched as they come.
        self._events: deque[tuple[Any, ...]] = deque()
        self._requests: deque[asyncio.Future[IterResult]] = deque()
        self._error: BaseException | None = None
        self._finished = False

        self._watch_errors = adapter.supports_failure_events and event != error_event
        self._subscribed = False
        self._subscribe()

    # ─── Introspection ────────────────────────────────────────────────────────

    @property
    def event(self) -> str:
        return self._event

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def buffered(self) -> int:
        """Number of events waiting to be pulled."""
        return len(self._events)

    @property
    def pending(self) -> int:
        """Number of next() calls waiting for an event."""
        return sum(1 for request in self._requests if not request.done())

    # ─── Iterator protocol ────────────────────────────────────────────────────

    def next(self) -> asyncio.Future[IterResult]:
        """
        Request the next event.

        Returns a future that resolves to ``IterResult(value=args, done=False)``,
        fails with the stored error (once), or resolves to ``DONE`` after the
        iterator finished and the buffer is drained. Otherwise the future stays
        pending until an event, a failure or return_() settles it.
        """
        future = self._create_future()
        if self._events:
            future.set_result(IterResult(value=self._events.popleft(), done=False))
        elif self._error is not None:
            error, self._error = self._error, None
            future.set_exception(error)
        elif self._finished:
            future.set_result(DONE)
        else:
            self._requests.append(future)
        return future

    def return_(self, value: Any = None) -> asyncio.Future[IterResult]:
        """
        Stop listening and resolve every waiting next() with ``DONE``.

        Safe to call any number of times and in any state. Buffered events
        are kept and can still be pulled.
        """
        self._teardown()
        future = self._create_future()
        future.set_result(DONE)
        return future

    async def aclose(self) -> None:
        await self.return_()

    def throw(self, err: BaseException | None = None) -> None:
        """
        Finish the iterator with ``err``, as if the source had failed with it.

        The oldest waiting next() fails with ``err``; if none is waiting the
        error is delivered to the first next() after the buffer is drained.
        A StopIteration is delivered wrapped in a RuntimeError.

        Ignored once the iterator has finished, so at most one error is ever
        delivered. Raises ValidationError, leaving the iterator untouched, if
        ``err`` is not an exception instance.
        """
        if not isinstance(err, BaseException):
            raise ValidationError(
                f'The "err" argument must be an instance of BaseException. Received {err!r}'
            )
        if self._finished:
            logger.debug("throw() on finished iterator for %r ignored", self._event)
            return
        self._fail(as_exception(err))

    def __aiter__(self) -> "EventIterator":
        return self

    async def __anext__(self) -> tuple[Any, ...]:
        result = await self.next()
        if result.done:
            raise StopAsyncIteration
        return result.value

    async def __aenter__(self) -> "EventIterator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.return_()

    # ─── Source callbacks ─────────────────────────────────────────────────────

    def _on_event(self, *args: Any) -> None:
        if not self._subscribed:
            return
        request = self._take_request()
        if request is not None:
            request.set_result(IterResult(value=args, done=False))
        else:
            self._events.append(args)

    def _on_error(self, err: Any = None) -> None:
        if not self._subscribed:
            return
        logger.debug("Failure event %r while iterating %r", self._error_event, self._event)
        self._fail(as_exception(err))

    # ─── Internals ────────────────────────────────────────────────────────────

    def _create_future(self) -> asyncio.Future[IterResult]:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop.create_future()

    def _take_request(self) -> asyncio.Future[IterResult] | None:
        # Consumers may cancel a waiting next(); those futures are skipped.
        while self._requests:
            request = self._requests.popleft()
            if not request.done():
                return request
        return None

    def _fail(self, error: BaseException) -> None:
        self._finished = True
        try:
            request = self._take_request()
            if request is not None:
                request.set_exception(error)
            else:
                self._error = error
        finally:
            self._teardown()

    def _teardown(self) -> None:
        self._finished = True
        self._unsubscribe()
        while self._requests:
            request = self._requests.popleft()
            if not request.done():
                request.set_result(DONE)

    def _subscribe(self) -> None:
        self._adapter.add_listener(self._event, self._on_event)
        if self._watch_errors:
            self._adapter.add_listener(self._error_event, self._on_error)
        self._subscribed = True
        logger.debug("Listening for %r (failure event watched: %s)", self._event, self._watch_errors)

    def _unsubscribe(self) -> None:
        if not self._subscribed:
            return
        self._subscribed = False
        self._adapter.remove_listener(self._event, self._on_event)
        if self._watch_errors:
            self._adapter.remove_listener(self._error_event, self._on_error)
        logger.debug("Stopped listening for %r", self._event)


def on(
    source: Any,
    event: str,
    *,
    error_event: str | None = None,
    options: OnOptions | None = None,
) -> EventIterator:
    """
    Iterate over future occurrences of ``event`` on ``source``.

    Each element is the tuple of arguments the event was emitted with (a
    one-element tuple holding the event object for add_event_listener
    sources). For sources with on/once/remove_listener, the ``error_event``
    (default ``"error"``) ends the iteration with that error.

    Raises ValidationError if ``source`` exposes neither listener API.
    """
    opts = options or OnOptions()
    if error_event is not None:
        opts = opts.model_copy(update={"error_event": error_event})
    adapter = get_source_adapter(source)
    return EventIterator(adapter, event, error_event=opts.error_event, loop=opts.loop)

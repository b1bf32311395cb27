"""
In-process event sources.

EventEmitter calls listeners with positional arguments and gives the
``"error"`` event special meaning; EventTarget dispatches a single event
object to listeners registered per event type.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .errors import as_exception
from .types import DEFAULT_ERROR_EVENT

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class _Registration:
    handler: Callable[..., Any]
    once: bool = False


def _invoke(name: str, handler: Callable[..., Any], args: tuple[Any, ...]) -> None:
    if inspect.iscoroutinefunction(handler):
        asyncio.ensure_future(_safe_call(name, handler, args))
        return
    try:
        handler(*args)
    except Exception:
        logger.exception("Event handler error (%s)", name)


async def _safe_call(name: str, handler: Callable[..., Any], args: tuple[Any, ...]) -> None:
    try:
        await handler(*args)
    except Exception:
        logger.exception("Event handler error (%s)", name)


class EventEmitter:
    """Named-event emitter with on/once/remove_listener."""

    def __init__(self, error_event: str = DEFAULT_ERROR_EVENT) -> None:
        self.error_event = error_event
        self._handlers: dict[str, list[_Registration]] = {}

    def on(self, name: str, handler: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe to ``name``. Returns an unsubscribe function."""
        self._handlers.setdefault(name, []).append(_Registration(handler))
        return lambda: self.remove_listener(name, handler)

    def once(self, name: str, handler: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe to the next ``name`` only. Returns an unsubscribe function."""
        self._handlers.setdefault(name, []).append(_Registration(handler, once=True))
        return lambda: self.remove_listener(name, handler)

    def remove_listener(self, name: str, handler: Callable[..., Any]) -> None:
        """Remove the most recently added registration of ``handler``; no-op if absent."""
        registrations = self._handlers.get(name)
        if not registrations:
            return
        for index in range(len(registrations) - 1, -1, -1):
            if registrations[index].handler == handler:
                del registrations[index]
                break
        if not registrations:
            del self._handlers[name]

    def remove_all_listeners(self, name: str | None = None) -> None:
        if name is None:
            self._handlers.clear()
        else:
            self._handlers.pop(name, None)

    def listeners(self, name: str) -> list[Callable[..., Any]]:
        return [registration.handler for registration in self._handlers.get(name, [])]

    def listener_count(self, name: str) -> int:
        return len(self._handlers.get(name, []))

    def emit(self, name: str, *args: Any) -> bool:
        """
        Call every listener of ``name`` with ``args``.

        Returns whether any listener was registered. Emitting the error event
        with no listener raises its payload instead. Listener exceptions are
        logged and do not stop delivery to the remaining listeners.
        """
        registrations = list(self._handlers.get(name, []))
        if not registrations:
            if name == self.error_event:
                raise as_exception(args[0] if args else None)
            return False
        for registration in registrations:
            if registration.once:
                self._discard(name, registration)
            _invoke(name, registration.handler, args)
        return True

    def _discard(self, name: str, registration: _Registration) -> None:
        registrations = self._handlers.get(name)
        if registrations and registration in registrations:
            registrations.remove(registration)
            if not registrations:
                del self._handlers[name]


@dataclass
class Event:
    type: str
    detail: Any = None


class EventTarget:
    """Event-object dispatcher with add_event_listener/remove_event_listener."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[_Registration]] = {}

    def add_event_listener(
        self,
        name: str,
        listener: Callable[[Any], Any],
        once: bool = False,
    ) -> None:
        registrations = self._listeners.setdefault(name, [])
        # Adding the same listener twice is ignored.
        if any(registration.handler == listener for registration in registrations):
            return
        registrations.append(_Registration(listener, once=once))

    def remove_event_listener(self, name: str, listener: Callable[[Any], Any]) -> None:
        registrations = self._listeners.get(name)
        if not registrations:
            return
        self._listeners[name] = [r for r in registrations if r.handler != listener]
        if not self._listeners[name]:
            del self._listeners[name]

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, []))

    def dispatch_event(self, event: Any) -> bool:
        """Deliver ``event`` to the listeners of ``event.type``. Returns whether any ran."""
        registrations = list(self._listeners.get(event.type, []))
        for registration in registrations:
            if registration.once:
                self.remove_event_listener(event.type, registration.handler)
            _invoke(event.type, registration.handler, (event,))
        return bool(registrations)

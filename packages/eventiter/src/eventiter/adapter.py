"""
Source adapters — one add/remove listener contract over two source shapes.

Emitter-shaped sources expose ``on`` / ``once`` / ``remove_listener`` and call
listeners with the full positional argument list. Target-shaped sources expose
``add_event_listener`` / ``remove_event_listener`` and call listeners with a
single event object. The shape is probed once, emitter first.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from .errors import ValidationError
from .types import ListenerOptions

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

_EMITTER_METHODS = ("on", "once", "remove_listener")
_TARGET_METHODS = ("add_event_listener", "remove_event_listener")


def _has_methods(source: Any, names: tuple[str, ...]) -> bool:
    return all(callable(getattr(source, name, None)) for name in names)


class SourceAdapter(ABC):
    """Registers and deregisters handlers for named events on one source."""

    # Only emitter-shaped sources give the failure event special meaning.
    supports_failure_events: bool = False

    def __init__(self, source: Any) -> None:
        self.source = source

    @classmethod
    @abstractmethod
    def matches(cls, source: Any) -> bool:
        """Return True if ``source`` exposes this adapter's capability shape."""

    @abstractmethod
    def add_listener(
        self,
        name: str,
        handler: Handler,
        options: ListenerOptions | None = None,
    ) -> None:
        ...

    @abstractmethod
    def remove_listener(
        self,
        name: str,
        handler: Handler,
        options: ListenerOptions | None = None,
    ) -> None:
        ...


class EmitterAdapter(SourceAdapter):
    supports_failure_events = True

    @classmethod
    def matches(cls, source: Any) -> bool:
        return _has_methods(source, _EMITTER_METHODS)

    def add_listener(
        self,
        name: str,
        handler: Handler,
        options: ListenerOptions | None = None,
    ) -> None:
        if options is not None and options.once:
            self.source.once(name, handler)
        else:
            self.source.on(name, handler)

    def remove_listener(
        self,
        name: str,
        handler: Handler,
        options: ListenerOptions | None = None,
    ) -> None:
        self.source.remove_listener(name, handler)


class TargetAdapter(SourceAdapter):
    """
    Adapter for ``add_event_listener`` sources.

    Each handler is registered through a one-argument wrapper so it always
    receives exactly the event object. The wrapper is remembered per
    ``(name, handler)`` so that remove_listener() detaches what was attached.
    """

    def __init__(self, source: Any) -> None:
        super().__init__(source)
        self._wrappers: dict[tuple[str, Handler], Callable[[Any], None]] = {}

    @classmethod
    def matches(cls, source: Any) -> bool:
        return _has_methods(source, _TARGET_METHODS)

    def add_listener(
        self,
        name: str,
        handler: Handler,
        options: ListenerOptions | None = None,
    ) -> None:
        # A handler is attached at most once per event name.
        if (name, handler) in self._wrappers:
            return

        def wrapper(event: Any) -> None:
            handler(event)

        self._wrappers[(name, handler)] = wrapper
        if options is not None and options.once:
            self.source.add_event_listener(name, wrapper, once=True)
        else:
            self.source.add_event_listener(name, wrapper)

    def remove_listener(
        self,
        name: str,
        handler: Handler,
        options: ListenerOptions | None = None,
    ) -> None:
        wrapper = self._wrappers.pop((name, handler), None)
        if wrapper is None:
            return
        self.source.remove_event_listener(name, wrapper)


_ADAPTERS: tuple[type[SourceAdapter], ...] = (EmitterAdapter, TargetAdapter)


def get_source_adapter(source: Any) -> SourceAdapter:
    """
    Probe ``source`` and return the adapter for its capability shape.

    Raises ValidationError if the source exposes neither shape.
    """
    for adapter_cls in _ADAPTERS:
        if adapter_cls.matches(source):
            logger.debug("Using %s for %s", adapter_cls.__name__, type(source).__name__)
            return adapter_cls(source)
    raise ValidationError(
        'The "source" argument must expose on/once/remove_listener or '
        f"add_event_listener/remove_event_listener. Received {type(source).__name__}"
    )

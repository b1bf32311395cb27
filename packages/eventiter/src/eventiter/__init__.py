"""
eventiter — async iteration over events from push-based sources
"""

from .adapter import EmitterAdapter, SourceAdapter, TargetAdapter, get_source_adapter
from .emitter import Event, EventEmitter, EventTarget
from .errors import SourceFailure, ValidationError
from .iterator import EventIterator, on
from .once import once
from .types import DEFAULT_ERROR_EVENT, DONE, IterResult, ListenerOptions, OnOptions

__all__ = [
    # Iteration
    "on",
    "once",
    "EventIterator",
    # Types
    "IterResult",
    "DONE",
    "ListenerOptions",
    "OnOptions",
    "DEFAULT_ERROR_EVENT",
    # Source adapters
    "SourceAdapter",
    "EmitterAdapter",
    "TargetAdapter",
    "get_source_adapter",
    # Sources
    "EventEmitter",
    "EventTarget",
    "Event",
    # Errors
    "ValidationError",
    "SourceFailure",
]

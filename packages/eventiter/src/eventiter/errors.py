"""
Exception types raised by eventiter.
"""
from __future__ import annotations

from typing import Any


class ValidationError(TypeError):
    """Raised when an argument or a source does not have the expected shape."""


class SourceFailure(Exception):
    """
    A failure notification whose payload is not an exception.

    The raw payload is kept on ``value`` so consumers can inspect what the
    source actually emitted.
    """

    def __init__(self, value: Any) -> None:
        super().__init__(f"Source emitted a failure notification: {value!r}")
        self.value = value


def as_exception(value: Any) -> BaseException:
    """
    Return an exception that an asyncio future can fail with.

    Non-exception payloads are wrapped in SourceFailure. StopIteration cannot
    be set on a future, so it is wrapped in a RuntimeError chained to it.
    """
    if isinstance(value, StopIteration):
        error = RuntimeError(f"Failure value was StopIteration: {value!r}")
        error.__cause__ = value
        return error
    if isinstance(value, BaseException):
        return value
    return SourceFailure(value)

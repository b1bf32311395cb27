"""
Root conftest.py — shared fixtures for source objects.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from eventiter import EventEmitter, EventTarget


@pytest.fixture
def emitter() -> EventEmitter:
    return EventEmitter()


@pytest.fixture
def target() -> EventTarget:
    return EventTarget()


@pytest.fixture
def soon() -> Callable[..., None]:
    """Schedule a callback for the next loop iteration."""

    def schedule(fn: Callable[..., Any], *args: Any) -> None:
        asyncio.get_running_loop().call_soon(fn, *args)

    return schedule

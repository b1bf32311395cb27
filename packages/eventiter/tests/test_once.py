"""
Tests for once().
"""
from __future__ import annotations

import asyncio

import pytest

from eventiter import Event, SourceFailure, once


@pytest.mark.asyncio
async def test_resolves_with_event_arguments(emitter, soon):
    soon(emitter.emit, "foo", "bar", 42)

    assert await once(emitter, "foo") == ("bar", 42)
    assert emitter.listener_count("foo") == 0
    assert emitter.listener_count("error") == 0


@pytest.mark.asyncio
async def test_only_first_occurrence(emitter, soon):
    def fire():
        emitter.emit("foo", 1)
        emitter.emit("foo", 2)

    soon(fire)
    assert await once(emitter, "foo") == (1,)


@pytest.mark.asyncio
async def test_raises_failure(emitter, soon):
    err = RuntimeError("kaboom")
    soon(emitter.emit, "error", err)

    with pytest.raises(RuntimeError) as excinfo:
        await once(emitter, "foo")
    assert excinfo.value is err
    assert emitter.listener_count("foo") == 0
    assert emitter.listener_count("error") == 0


@pytest.mark.asyncio
async def test_wraps_non_exception_failure(emitter, soon):
    soon(emitter.emit, "error", "bad")

    with pytest.raises(SourceFailure) as excinfo:
        await once(emitter, "foo")
    assert excinfo.value.value == "bad"


@pytest.mark.asyncio
async def test_waiting_for_failure_event_returns_it(emitter, soon):
    err = RuntimeError("kaboom")
    soon(emitter.emit, "error", err)

    assert await once(emitter, "error") == (err,)
    assert emitter.listener_count("error") == 0


@pytest.mark.asyncio
async def test_cancel_removes_listeners(emitter):
    task = asyncio.create_task(once(emitter, "foo"))
    await asyncio.sleep(0)
    assert emitter.listener_count("foo") == 1
    assert emitter.listener_count("error") == 1

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert emitter.listener_count("foo") == 0
    assert emitter.listener_count("error") == 0


@pytest.mark.asyncio
async def test_event_target(target, soon):
    event = Event("tick", "payload")
    soon(target.dispatch_event, event)

    assert await once(target, "tick") == (event,)
    assert target.listener_count("tick") == 0

"""
Tests for the in-process EventEmitter / EventTarget sources.
"""
from __future__ import annotations

import asyncio
import logging

import pytest

from eventiter import Event, EventEmitter, EventTarget, SourceFailure


class TestEventEmitter:
    def test_on_returns_unsubscribe(self, emitter):
        received = []
        unsubscribe = emitter.on("foo", received.append)
        emitter.emit("foo", 1)
        unsubscribe()
        emitter.emit("foo", 2)
        assert received == [1]
        assert emitter.listener_count("foo") == 0

    def test_once_fires_once(self, emitter):
        received = []
        emitter.once("foo", received.append)
        assert emitter.emit("foo", 1) is True
        assert emitter.emit("foo", 2) is False
        assert received == [1]

    def test_remove_listener_drops_latest_registration(self, emitter):
        received = []
        emitter.on("foo", received.append)
        emitter.once("foo", received.append)
        emitter.remove_listener("foo", received.append)

        emitter.emit("foo", "a")
        emitter.emit("foo", "b")
        assert received == ["a", "b"]

    def test_remove_unknown_listener_is_noop(self, emitter):
        emitter.remove_listener("foo", print)
        assert emitter.listeners("foo") == []

    def test_remove_all_listeners(self, emitter):
        emitter.on("foo", print)
        emitter.on("bar", print)
        emitter.remove_all_listeners("foo")
        assert emitter.listener_count("foo") == 0
        assert emitter.listener_count("bar") == 1
        emitter.remove_all_listeners()
        assert emitter.listener_count("bar") == 0

    def test_unhandled_error_raises(self, emitter):
        err = RuntimeError("kaboom")
        with pytest.raises(RuntimeError) as excinfo:
            emitter.emit("error", err)
        assert excinfo.value is err

        with pytest.raises(SourceFailure):
            emitter.emit("error")

    def test_handled_error_does_not_raise(self, emitter):
        received = []
        emitter.on("error", received.append)
        assert emitter.emit("error", "bad") is True
        assert received == ["bad"]

    def test_listener_exception_is_logged(self, emitter, caplog):
        received = []

        def broken(value):
            raise ValueError("handler failed")

        emitter.on("foo", broken)
        emitter.on("foo", received.append)

        with caplog.at_level(logging.ERROR, logger="eventiter.emitter"):
            emitter.emit("foo", 1)

        assert received == [1]
        assert "Event handler error (foo)" in caplog.text

    @pytest.mark.asyncio
    async def test_coroutine_listener_is_scheduled(self, emitter):
        received = []

        async def handler(value):
            received.append(value)

        emitter.on("foo", handler)
        emitter.emit("foo", 1)
        assert received == []
        await asyncio.sleep(0)
        assert received == [1]


class TestEventTarget:
    def test_dispatch_to_type_listeners(self, target):
        received = []
        target.add_event_listener("tick", received.append)
        target.add_event_listener("tock", received.append)

        event = Event("tick")
        assert target.dispatch_event(event) is True
        assert received == [event]
        assert target.dispatch_event(Event("other")) is False

    def test_duplicate_listener_ignored(self, target):
        received = []
        target.add_event_listener("tick", received.append)
        target.add_event_listener("tick", received.append)
        assert target.listener_count("tick") == 1

        target.dispatch_event(Event("tick"))
        assert len(received) == 1

    def test_once_listener(self):
        target = EventTarget()
        received = []
        target.add_event_listener("tick", received.append, once=True)
        target.dispatch_event(Event("tick"))
        target.dispatch_event(Event("tick"))
        assert len(received) == 1
        assert target.listener_count("tick") == 0

    def test_remove_event_listener(self, target):
        received = []
        target.add_event_listener("tick", received.append)
        target.remove_event_listener("tick", received.append)
        target.remove_event_listener("tick", received.append)
        target.dispatch_event(Event("tick"))
        assert received == []


def test_error_event_name_is_configurable():
    emitter = EventEmitter(error_event="failure")
    assert emitter.emit("error", "not special") is False
    with pytest.raises(SourceFailure):
        emitter.emit("failure", "special")

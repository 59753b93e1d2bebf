"""
Unit tests for notify.dispatcher.NotificationDispatcher.
"""

from __future__ import annotations

import asyncio
import logging

from mcping import Status
from notify.dispatcher import NotificationDispatcher

STATUS = Status.from_dict(
    {
        "version": {"name": "1.20.4", "protocol": 765},
        "players": {"max": 20, "online": 1},
        "description": "test",
    }
)


class RecordingService:
    def __init__(self, name="recording", delay=0.0, error=None):
        self.name = name
        self.delay = delay
        self.error = error
        self.initialized = False
        self.closed = False
        self.received = []

    async def init(self):
        self.initialized = True

    async def notify(self, status):
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.received.append(status)

    async def close(self):
        self.closed = True


def test_init_initializes_every_service():
    services = [RecordingService("a"), RecordingService("b")]
    asyncio.run(NotificationDispatcher(services).init())

    assert all(service.initialized for service in services)


def test_notify_returns_before_delivery():
    service = RecordingService(delay=0.05)

    async def scenario():
        dispatcher = NotificationDispatcher([service])
        dispatcher.notify(STATUS)
        assert service.received == []
        await dispatcher.drain()

    asyncio.run(scenario())
    assert service.received == [STATUS]


def test_failing_service_does_not_affect_others(caplog):
    broken = RecordingService("broken", error=RuntimeError("boom"))
    slow = RecordingService("slow", delay=0.05)
    fast = RecordingService("fast")

    async def scenario():
        dispatcher = NotificationDispatcher([broken, slow, fast])
        dispatcher.notify(STATUS)
        await dispatcher.drain()

    with caplog.at_level(logging.ERROR, logger="notify.dispatcher"):
        asyncio.run(scenario())

    assert slow.received == [STATUS]
    assert fast.received == [STATUS]
    assert "failed to notify using broken service: boom" in caplog.text


def test_stop_cancels_pending_and_closes_services():
    hanging = RecordingService("hanging", delay=60)

    async def scenario():
        dispatcher = NotificationDispatcher([hanging])
        dispatcher.notify(STATUS)
        await asyncio.sleep(0)
        await dispatcher.stop()
        return dispatcher

    dispatcher = asyncio.run(scenario())
    assert hanging.received == []
    assert hanging.closed
    assert not dispatcher._pending_tasks


def test_no_services_is_a_no_op():
    async def scenario():
        dispatcher = NotificationDispatcher()
        dispatcher.notify(STATUS)
        await dispatcher.drain()
        await dispatcher.stop()

    asyncio.run(scenario())

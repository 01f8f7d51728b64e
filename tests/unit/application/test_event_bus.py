"""Tests for EventBus"""

import asyncio

import pytest

from deadlock_gc.application.events import EventBus
from deadlock_gc.domain.models import ChallengeUpdated, SessionState, SessionStateChanged


def state_changed() -> SessionStateChanged:
    return SessionStateChanged(
        previous=SessionState.DISCONNECTED, current=SessionState.CONNECTING
    )


@pytest.mark.unit
class TestEventBus:
    def test_publish_delivers_by_event_class(self):
        bus = EventBus()
        states, challenges = [], []
        bus.subscribe(SessionStateChanged, states.append)
        bus.subscribe(ChallengeUpdated, challenges.append)

        event = state_changed()
        bus.publish(event)

        assert states == [event]
        assert challenges == []

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(SessionStateChanged, received.append)
        bus.unsubscribe(SessionStateChanged, received.append)

        bus.publish(state_changed())

        assert received == []
        assert bus.subscriber_count(SessionStateChanged) == 0

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(SessionStateChanged, broken)
        bus.subscribe(SessionStateChanged, received.append)

        bus.publish(state_changed())

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_coroutine_handler_runs_as_task(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(SessionStateChanged, handler)
        bus.publish(state_changed())
        assert received == []

        await asyncio.sleep(0)
        assert len(received) == 1

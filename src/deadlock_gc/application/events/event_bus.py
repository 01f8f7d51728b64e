"""Event bus for unsolicited coordinator pushes and lifecycle changes"""

import asyncio
from collections.abc import Callable

from loguru import logger

from deadlock_gc.domain.models import Event


class EventBus:
    """Synchronous observer registry keyed by event class

    publish() delivers to every subscriber of the event's class before
    returning, from whatever task calls it (the session dispatch loop).
    Coroutine handlers are handed off as tasks so they never block the loop.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[Event], list[Callable]] = {}
        self._tasks: set[asyncio.Task] = set()

    def subscribe(self, event_type: type[Event], handler: Callable) -> None:
        """Subscribe handler to event type

        Args:
            event_type: Event class to subscribe to
            handler: Callable (or coroutine function) taking the event
        """
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to event: {event_type.__name__}")

    def unsubscribe(self, event_type: type[Event], handler: Callable) -> None:
        """Remove handler from event type subscription"""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(
                f"Unsubscribed handler from event: {event_type.__name__}"
            )

    def subscriber_count(self, event_type: type[Event]) -> int:
        return len(self._subscribers.get(event_type, []))

    def publish(self, event: Event) -> None:
        """Deliver event to all subscribers of its class

        Args:
            event: Event to publish
        """
        logger.debug(f"Publishing event: {event!r}")

        for handler in list(self._subscribers.get(type(event), [])):
            try:
                if asyncio.iscoroutinefunction(handler):
                    task = asyncio.get_running_loop().create_task(handler(event))
                    self._tasks.add(task)
                    task.add_done_callback(self._task_done)
                else:
                    handler(event)
            except Exception as e:
                logger.opt(exception=e).error(
                    f"Handler failed for {type(event).__name__}: {e}"
                )

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error(f"Async handler failed: {error}")

"""MessageDispatcher - Routes unsolicited messages to type handlers"""

from collections.abc import Callable
from typing import Any

from loguru import logger
from pydantic import BaseModel

from deadlock_gc.domain.models import Envelope
from deadlock_gc.shared.exceptions import ReplyDecodeError

from ..codec import PayloadCodec

MessageHandler = Callable[[Any], None]


class MessageDispatcher:
    """Maps inbound message type tags to handlers

    Handlers receive the decoded payload and run synchronously on the
    dispatch loop; anything long-running must be handed off to a task.
    Unknown type tags are dropped so newer server messages do not break
    older clients.
    """

    def __init__(
        self,
        handlers: dict[int, tuple[type[BaseModel], MessageHandler]] | None = None,
        codec: PayloadCodec | None = None,
    ) -> None:
        self._codec = codec or PayloadCodec()
        self._handlers: dict[int, tuple[type[BaseModel], MessageHandler]] = dict(
            handlers or {}
        )

    def register(
        self, msg_type: int, model: type[BaseModel], handler: MessageHandler
    ) -> None:
        """Register (or replace) the handler for a message type"""
        self._handlers[int(msg_type)] = (model, handler)
        logger.debug(f"Registered handler for message type {int(msg_type)}")

    def unregister(self, msg_type: int) -> None:
        self._handlers.pop(int(msg_type), None)

    def handles(self, msg_type: int) -> bool:
        return int(msg_type) in self._handlers

    def dispatch(self, envelope: Envelope) -> bool:
        """Decode and hand an inbound message to its handler

        Args:
            envelope: Inbound message not consumed by a pending job

        Returns:
            True if a handler ran
        """
        registration = self._handlers.get(envelope.msg_type)
        if registration is None:
            logger.debug(f"No handler for message type {envelope.msg_type}, dropped")
            return False

        model, handler = registration
        try:
            body = self._codec.decode(envelope.payload, model)
        except ReplyDecodeError as e:
            logger.warning(f"Dropping malformed message {envelope.msg_type}: {e}")
            return False

        try:
            handler(body)
        except Exception as e:
            logger.opt(exception=e).error(
                f"Handler for message type {envelope.msg_type} failed: {e}"
            )
            return False
        return True

"""Event handling for the coordinator client"""

from .event_bus import EventBus

__all__ = ["EventBus"]

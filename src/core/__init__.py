"""Anvil Core Engine"""
__version__ = "0.1.0-alpha"

from src.core.event_bus import AnvilEvent, EventBus
from src.core.event_types import EventTypes

__all__ = [
    "AnvilEvent",
    "EventBus",
    "EventTypes",
]

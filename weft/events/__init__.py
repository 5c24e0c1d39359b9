"""Event bus."""

from .bus import EventBus, Handler

__all__ = ["EventBus", "Handler"]

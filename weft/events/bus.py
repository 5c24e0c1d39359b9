"""Typed event bus — publish/subscribe with pattern matching.

The bus is the observability handle threaded through a run. A sub-agent
receives the very same bus as its parent, so handlers see one linear stream.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Awaitable, Callable

from ..infra.logging import get_logger
from ..types import AgentEvent

logger = get_logger(__name__)

Handler = Callable[[AgentEvent], Awaitable[None]]


class EventBus:
    """Event bus with pattern matching (e.g. 'tool:*').

    Handler failures are logged and swallowed: observability never changes
    the control flow of the emitter.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._wildcard: list[Handler] = []

    def on(self, event_type: str, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def on_all(self, handler: Handler) -> None:
        self._wildcard.append(handler)

    def off(self, event_type: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def off_all(self, handler: Handler) -> None:
        if handler in self._wildcard:
            self._wildcard.remove(handler)

    async def emit(self, event: AgentEvent) -> None:
        event_type = getattr(event, "type", "")
        # Exact match + wildcard
        for h in list(self._handlers.get(event_type, [])) + list(self._wildcard):
            await self._call(h, event, event_type)
        # Pattern match: 'tool:*' matches 'tool:call', etc.
        for pat, handlers in list(self._handlers.items()):
            if not pat.endswith(":*"):
                continue
            prefix = pat[:-1]
            if event_type.startswith(prefix):
                for h in list(handlers):
                    await self._call(h, event, pat)

    async def _call(self, handler: Handler, event: AgentEvent, key: str) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception("event_handler_failed", event_type=key)

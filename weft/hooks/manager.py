"""Hook manager — priority-ordered allow/deny chain."""

from __future__ import annotations

import inspect
import threading
from collections import defaultdict

from ..errors import HookError
from ..infra.logging import get_logger
from .hook import Feedback, HookData, HookHandler, HookPoint

logger = get_logger(__name__)


class HookManager:
    """Runs the handlers registered for a point, highest priority first.

    The first deny ends the chain. A handler may instead hand a rewritten
    payload to the handlers after it through ``Feedback.modified``.
    """

    def __init__(self) -> None:
        self._handlers: dict[HookPoint, list[HookHandler]] = defaultdict(list)
        self._lock = threading.RLock()

    def register(self, handler: HookHandler) -> None:
        with self._lock:
            for point in handler.points():
                handlers = self._handlers[HookPoint(point)]
                handlers.append(handler)
                # sort is stable: equal priorities keep registration order
                handlers.sort(key=lambda h: h.priority(), reverse=True)

    def unregister(self, name: str) -> None:
        with self._lock:
            for point, handlers in self._handlers.items():
                self._handlers[point] = [h for h in handlers if h.name() != name]

    def has_handlers(self, point: HookPoint) -> bool:
        with self._lock:
            return bool(self._handlers.get(point))

    def list_handlers(self, point: HookPoint) -> list[str]:
        with self._lock:
            return [h.name() for h in self._handlers.get(point, [])]

    async def trigger(self, data: HookData) -> Feedback:
        with self._lock:
            handlers = list(self._handlers.get(data.point, []))

        if not handlers:
            return Feedback.allowed()

        for handler in handlers:
            try:
                feedback = handler.handle(data)
                if inspect.isawaitable(feedback):
                    feedback = await feedback
                if feedback is not None and not isinstance(feedback, Feedback):
                    raise TypeError(
                        f"handler returned {type(feedback).__name__}, expected Feedback"
                    )
            except Exception as e:
                raise HookError(handler.name(), data.point.value, e) from e

            if feedback is None:
                continue
            if not feedback.allow:
                logger.info(
                    "hook_denied",
                    point=data.point.value,
                    handler=handler.name(),
                    tool=data.tool_name,
                    reason=feedback.message,
                )
                return feedback
            if feedback.modified is not None:
                data.modified = feedback.modified

        return Feedback.allowed(modified=data.modified)

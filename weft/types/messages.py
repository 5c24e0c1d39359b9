"""Message types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    id: str
    name: str
    arguments: str = ""
    type: str = "function"


@dataclass(frozen=True)
class Message:
    """One entry of the conversation log.

    Messages are immutable; the assistant message being streamed is held by
    ``StreamAccumulator`` until the stream completes.
    """

    role: Role
    content: str = ""
    reasoning: str = ""
    tool_calls: tuple[ToolCall, ...] = ()
    tool_call_id: str = ""
    name: str = ""
    timestamp: datetime | None = None

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.USER, content=content, timestamp=_now())

    @classmethod
    def assistant(
        cls,
        content: str = "",
        tool_calls: list[ToolCall] | tuple[ToolCall, ...] = (),
        reasoning: str = "",
    ) -> Message:
        return cls(
            role=Role.ASSISTANT,
            content=content,
            reasoning=reasoning,
            tool_calls=tuple(tool_calls),
        )

    @classmethod
    def tool(
        cls, content: str, tool_call_id: str, name: str = "", timestamp: datetime | None = None
    ) -> Message:
        return cls(
            role=Role.TOOL,
            content=content,
            tool_call_id=tool_call_id,
            name=name,
            timestamp=timestamp or _now(),
        )

    def stamped(self) -> Message:
        """Return this message with a timestamp, keeping an existing one."""
        if self.timestamp is not None:
            return self
        return replace(self, timestamp=_now())


def _now() -> datetime:
    return datetime.now(timezone.utc)

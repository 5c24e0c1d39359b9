"""Hook points, payloads and handler interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Protocol, runtime_checkable


class HookPoint(str, Enum):
    BEFORE_TOOL_EXECUTION = "before_tool_execution"
    AFTER_TOOL_EXECUTION = "after_tool_execution"
    BEFORE_BASH_COMMAND = "before_bash_command"
    AFTER_BASH_COMMAND = "after_bash_command"
    ON_AGENT_START = "on_agent_start"
    ON_AGENT_END = "on_agent_end"


@dataclass
class HookData:
    point: HookPoint
    tool_name: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    # Latest payload rewritten by a handler earlier in the chain.
    modified: Any = None

    def set(self, key: str, value: Any) -> HookData:
        self.data[key] = value
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def get_str(self, key: str) -> str:
        value = self.data.get(key)
        return value if isinstance(value, str) else ""


@dataclass
class Feedback:
    allow: bool = True
    message: str = ""
    modified: Any = None

    @classmethod
    def allowed(cls, modified: Any = None) -> Feedback:
        return cls(allow=True, modified=modified)

    @classmethod
    def denied(cls, message: str) -> Feedback:
        return cls(allow=False, message=message)


@runtime_checkable
class HookHandler(Protocol):
    """Policy handler; ``handle`` may be sync or async."""

    def name(self) -> str: ...

    def points(self) -> list[HookPoint]: ...

    def priority(self) -> int: ...

    def handle(self, data: HookData) -> Feedback | Awaitable[Feedback]: ...

"""Tool types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..agent.context import RunScope


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    parameters: dict[str, Any]

    def to_openai(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass
class ToolResult:
    success: bool
    output: str = ""
    error: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, output: str, **data: Any) -> ToolResult:
        return cls(success=True, output=output, data=data)

    @classmethod
    def fail(cls, error: str, output: str = "") -> ToolResult:
        return cls(success=False, output=output, error=error)


@dataclass
class CallResult:
    tool_name: str
    call_id: str
    params: str
    result: ToolResult
    start_time: datetime
    end_time: datetime

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def content(self) -> str:
        """Text handed back to the model as the tool-role message."""
        if self.result.output:
            return self.result.output
        if self.result.error:
            return f"Error: {self.result.error}"
        return ""


@runtime_checkable
class Tool(Protocol):
    """Capability interface shared by built-in and bridged tools.

    ``execute`` must report ordinary failures as ``ToolResult(success=False)``.
    """

    name: str
    description: str

    def parameters(self) -> dict[str, Any]: ...

    def best_practices(self) -> str: ...

    async def execute(self, scope: RunScope, raw_args: str) -> ToolResult: ...

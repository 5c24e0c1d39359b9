"""LLM provider types."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable

from .messages import Message
from .tools import ToolDefinition

StopReason = Literal["stop", "tool_calls", "length"]

STOP: StopReason = "stop"
TOOL_CALLS: StopReason = "tool_calls"
LENGTH: StopReason = "length"


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def add(self, other: TokenUsage) -> None:
        self.prompt_tokens += other.prompt_tokens
        self.completion_tokens += other.completion_tokens
        self.total_tokens += other.total_tokens


@dataclass
class CompletionParams:
    messages: list[Message]
    tools: list[ToolDefinition] = field(default_factory=list)
    temperature: float = 0.7
    max_tokens: int = 4096


@dataclass
class CompletionResult:
    message: Message
    stop_reason: str = STOP
    usage: TokenUsage = field(default_factory=TokenUsage)


@dataclass
class ToolCallFragment:
    """One streamed piece of a tool call, keyed by the backend's positional index."""

    index: int
    id: str = ""
    type: str = ""
    name: str = ""
    arguments: str = ""


@dataclass
class Delta:
    reasoning: str = ""
    content: str = ""
    tool_calls: list[ToolCallFragment] = field(default_factory=list)
    done: bool = False
    finish_reason: str | None = None


@runtime_checkable
class LLMProvider(Protocol):
    async def complete(self, params: CompletionParams) -> CompletionResult: ...

    def stream(self, params: CompletionParams) -> AsyncIterator[Delta]: ...

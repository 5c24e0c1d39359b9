"""Core type definitions — re-exported from sub-modules."""

from .events import (
    AgentEvent,
    DelegationEndEvent,
    DelegationStartEvent,
    DispatchEvent,
    ErrorEvent,
    ReasoningEvent,
    ResponseEvent,
    SessionEndEvent,
    SessionStartEvent,
    TextDeltaEvent,
    ToolCallEvent,
    ToolResultEvent,
    TurnStartEvent,
)
from .llm import (
    LENGTH,
    STOP,
    TOOL_CALLS,
    CompletionParams,
    CompletionResult,
    Delta,
    LLMProvider,
    StopReason,
    TokenUsage,
    ToolCallFragment,
)
from .messages import Message, Role, ToolCall
from .tools import CallResult, Tool, ToolDefinition, ToolResult

__all__ = [
    "Message", "Role", "ToolCall",
    "Tool", "ToolDefinition", "ToolResult", "CallResult",
    "CompletionParams", "CompletionResult", "Delta", "ToolCallFragment",
    "LLMProvider", "StopReason", "TokenUsage", "STOP", "TOOL_CALLS", "LENGTH",
    "AgentEvent", "SessionStartEvent", "SessionEndEvent", "TurnStartEvent",
    "DispatchEvent", "ReasoningEvent", "ResponseEvent", "TextDeltaEvent",
    "ToolCallEvent", "ToolResultEvent", "DelegationStartEvent", "DelegationEndEvent",
    "ErrorEvent",
]

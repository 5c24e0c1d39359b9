"""Event types.

Every event carries the emitting agent's name and nesting depth so that one
shared bus can render parent and sub-agent activity as a single stream.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionStartEvent:
    task: str
    agent: str = ""
    depth: int = 0
    type: str = "session:start"


@dataclass
class SessionEndEvent:
    duration_ms: int
    tool_calls: int = 0
    turns: int = 0
    agent: str = ""
    depth: int = 0
    type: str = "session:end"


@dataclass
class TurnStartEvent:
    turn: int
    max_turns: int
    agent: str = ""
    depth: int = 0
    type: str = "turn:start"


@dataclass
class DispatchEvent:
    count: int
    mode: str = ""
    agent: str = ""
    depth: int = 0
    type: str = "tool:dispatch"


@dataclass
class ReasoningEvent:
    text: str
    agent: str = ""
    depth: int = 0
    type: str = "agent:reasoning"


@dataclass
class ResponseEvent:
    text: str
    agent: str = ""
    depth: int = 0
    type: str = "agent:response"


@dataclass
class TextDeltaEvent:
    text: str
    agent: str = ""
    depth: int = 0
    type: str = "agent:text_delta"


@dataclass
class ToolCallEvent:
    tool_call_id: str
    name: str
    arguments: str = ""
    agent: str = ""
    depth: int = 0
    type: str = "tool:call"


@dataclass
class ToolResultEvent:
    tool_call_id: str
    name: str
    success: bool
    output: str = ""
    duration_ms: int = 0
    agent: str = ""
    depth: int = 0
    type: str = "tool:result"


@dataclass
class DelegationStartEvent:
    agent_type: str
    description: str
    agent: str = ""
    depth: int = 0
    type: str = "delegation:start"


@dataclass
class DelegationEndEvent:
    agent_type: str
    description: str
    success: bool
    error: str = ""
    agent: str = ""
    depth: int = 0
    type: str = "delegation:end"


@dataclass
class ErrorEvent:
    error: str
    recoverable: bool = False
    agent: str = ""
    depth: int = 0
    type: str = "agent:error"


AgentEvent = (
    SessionStartEvent
    | SessionEndEvent
    | TurnStartEvent
    | DispatchEvent
    | ReasoningEvent
    | ResponseEvent
    | TextDeltaEvent
    | ToolCallEvent
    | ToolResultEvent
    | DelegationStartEvent
    | DelegationEndEvent
    | ErrorEvent
)

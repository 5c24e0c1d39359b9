"""Run-scoped state: propagation scope, per-run counters and outputs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from ..events import EventBus
from ..hooks import HookManager
from ..types import CallResult, Message, TokenUsage

MAX_NESTING_DEPTH = 3


@dataclass(frozen=True)
class RunScope:
    """Explicit context threaded through the loop, the executor and tools.

    ``descend`` is how a sub-agent inherits it: depth goes up by one and the
    event bus is the very same object.
    """

    events: EventBus = field(default_factory=EventBus)
    depth: int = 0
    hooks: HookManager | None = None
    agent_name: str = ""

    def descend(self, agent_name: str | None = None) -> RunScope:
        return replace(
            self,
            depth=self.depth + 1,
            agent_name=self.agent_name if agent_name is None else agent_name,
        )


class LoopState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    TERMINATED = "terminated"
    FAILED = "failed"


class TerminationReason(str, Enum):
    STOP = "stop"
    LENGTH = "length"
    MAX_TURNS_EXCEEDED = "max_turns_exceeded"


@dataclass
class ExecutionContext:
    """Counters owned by exactly one run."""

    max_turns: int
    current_turn: int = 0
    tool_call_count: int = 0
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    state: LoopState = LoopState.AWAITING_MODEL
    termination: TerminationReason | None = None

    def next_turn(self) -> bool:
        """Advance the turn counter; False once the budget is spent."""
        if self.current_turn >= self.max_turns:
            return False
        self.current_turn += 1
        self.state = LoopState.AWAITING_MODEL
        return True

    def terminate(self, reason: TerminationReason) -> None:
        self.state = LoopState.TERMINATED
        self.termination = reason

    def fail(self) -> None:
        self.state = LoopState.FAILED

    @property
    def elapsed_ms(self) -> int:
        return int((datetime.now(timezone.utc) - self.start_time).total_seconds() * 1000)


@dataclass
class RunOutput:
    messages: list[Message]
    result: str
    tool_calls: list[CallResult] = field(default_factory=list)
    turns: int = 0
    usage: TokenUsage = field(default_factory=TokenUsage)

"""Agent configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..tools.executor import ExecutionMode


class AgentConfig(BaseModel):
    """Per-agent settings; run-time overrides take precedence over these."""

    model: str = Field("gpt-4o-mini", description="Backend model name")
    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Default sampling temperature")
    max_tokens: int = Field(4096, gt=0, description="Completion token limit per request")
    max_turns: int = Field(20, gt=0, description="Default turn budget")
    execution_mode: ExecutionMode = Field(
        ExecutionMode.MIXED, description="Tool dispatch mode"
    )
    tool_timeout_ms: int | None = Field(None, gt=0, description="Per-call tool timeout")
    stream: bool = Field(False, description="Use the streaming backend interface")

"""Task tool — delegate a sub-task to a nested sub-agent."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, Field

from ...agent.context import MAX_NESTING_DEPTH
from ...errors import WeftError
from ...infra.logging import get_logger
from ...types import DelegationEndEvent, DelegationStartEvent, ToolResult
from ..base import BaseTool

if TYPE_CHECKING:
    from ...agent.context import RunScope
    from ...agent.core import Agent

logger = get_logger(__name__)


class AgentCatalog(Protocol):
    def create_agent(self, agent_type: str) -> Agent: ...


class TaskParams(BaseModel):
    agent_type: str = Field(description="Type of agent to spawn (general, explore, plan, execute)")
    task: str = Field(description="Task description for the sub-agent")
    description: str = Field(
        description="Short description of what this sub-agent will do (3-5 words)"
    )
    max_turns: int | None = Field(
        default=None, ge=1,
        description="Maximum turns for sub-agent (optional, defaults to agent type default)",
    )
    temperature: float | None = Field(
        default=None, ge=0.0, le=2.0,
        description="Sampling temperature override (optional, 0.0 is a valid value)",
    )


class TaskTool(BaseTool):
    """Runs a child agent from the catalog to completion inside one tool call.

    The child shares the parent's event bus and runs one level deeper. A
    child failure is reported as this call's failed result.
    """

    name = "task"
    description = "Launch a specialized sub-agent to handle a specific task"
    args_schema = TaskParams

    def __init__(self, catalog: AgentCatalog, agent_types: list[str] | None = None) -> None:
        self.catalog = catalog
        self.agent_types = agent_types or ["general", "explore", "plan", "execute"]

    def parameters(self) -> dict:
        schema = super().parameters()
        schema["properties"]["agent_type"]["enum"] = list(self.agent_types)
        return schema

    def best_practices(self) -> str:
        return (
            "**Task Tool Best Practices**:\n\n"
            "1. **Use specialized agents for focused tasks** - explore for finding code, "
            "plan for breaking down work, execute for making changes\n"
            "2. **Provide clear, specific task descriptions** - say exactly what the "
            "sub-agent should do\n"
            f"3. **Avoid deep nesting** - at most {MAX_NESTING_DEPTH} levels of sub-agents\n"
            "4. **Include short descriptions** - 3-5 words describing the sub-task\n"
            "5. **Don't spawn sub-agents for simple tasks** - use the tool directly"
        )

    async def run(self, scope: RunScope, params: TaskParams) -> ToolResult:
        for field_name in ("task", "description", "agent_type"):
            if not getattr(params, field_name):
                return ToolResult.fail(f"{field_name} parameter cannot be empty")

        if scope.depth >= MAX_NESTING_DEPTH:
            return ToolResult.fail(f"maximum nesting depth ({MAX_NESTING_DEPTH}) exceeded")

        try:
            child = self.catalog.create_agent(params.agent_type)
        except WeftError as e:
            return ToolResult.fail(f"failed to create agent: {e}")

        await scope.events.emit(
            DelegationStartEvent(
                agent_type=params.agent_type, description=params.description,
                agent=scope.agent_name, depth=scope.depth,
            )
        )
        logger.info(
            "subagent_launch", agent_type=params.agent_type,
            description=params.description, depth=scope.depth + 1,
        )

        try:
            output = await child.run(
                params.task,
                max_turns=params.max_turns,
                temperature=params.temperature,
                scope=scope.descend(agent_name=child.name),
            )
        except WeftError as e:
            await scope.events.emit(
                DelegationEndEvent(
                    agent_type=params.agent_type, description=params.description,
                    success=False, error=str(e), agent=scope.agent_name, depth=scope.depth,
                )
            )
            return ToolResult.fail(f"sub-agent failed: {e}")

        await scope.events.emit(
            DelegationEndEvent(
                agent_type=params.agent_type, description=params.description,
                success=True, agent=scope.agent_name, depth=scope.depth,
            )
        )
        logger.info("subagent_complete", agent_type=params.agent_type, turns=output.turns)

        return ToolResult.ok(
            f"[{params.agent_type} agent: {params.description}]\n\n{output.result}",
            agent_type=params.agent_type,
            tool_calls=len(output.tool_calls),
            turns=output.turns,
        )

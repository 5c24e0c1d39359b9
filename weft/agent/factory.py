"""Agent catalog — builds the specialised sub-agents the task tool spawns."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import AgentConfig
from ..errors import MissingToolError, UnknownAgentTypeError
from ..tools import ExecutionMode, ToolRegistry
from ..types import LLMProvider
from .core import Agent

GENERAL_PROMPT = """You are a helpful AI assistant with access to tools.
You can read files, execute bash commands, write files, find files with glob
patterns, and search files with grep.

When solving tasks, follow the ReAct pattern:
1. **Think**: Explain your reasoning before taking action
2. **Act**: Use tools to gather information or make changes
3. **Observe**: Analyze the results and plan next steps

Always provide clear, concise responses."""

EXPLORE_PROMPT = """You are an expert codebase exploration agent.

Your goal is to efficiently explore and understand codebases using the ReAct pattern:
- **Think**: Before each action, explain what you're looking for and why
- **Act**: Use read-only tools (read, glob, grep, bash)
- **Observe**: Summarize findings and decide next exploration steps

You have access to read-only tools:
- read: Read file contents
- glob: Find files matching patterns
- grep: Search for content in files
- bash: Execute read-only commands (ls, find, cat, etc.)

Always provide clear summaries of your findings."""

PLAN_PROMPT = """You are an expert software architect and planning agent.

Your goal is to create detailed, actionable implementation plans using the ReAct pattern:
- **Think**: Analyze the requirements and existing codebase
- **Act**: Read files to understand current state
- **Observe**: Synthesize findings into comprehensive plans

When creating plans:
1. Break down tasks into clear steps
2. Identify critical files to be modified
3. Consider architectural trade-offs
4. Anticipate potential issues

Output your plan in a structured markdown format with:
- **Overview**: High-level summary
- **Implementation Steps**: Numbered, actionable steps
- **Files to Modify**: List with descriptions
- **Testing Strategy**: How to verify the implementation
- **Potential Risks**: Issues to watch out for"""

EXECUTE_PROMPT = """You are an expert implementation agent focused on careful,
precise code execution.

Your goal is to implement changes accurately and safely using the ReAct pattern:
- **Think**: Plan changes carefully before executing
- **Act**: Use tools to read, modify, and verify code
- **Observe**: Check results and ensure correctness

You have access to all tools:
- read: Read file contents
- write: Create or overwrite files
- bash: Execute bash commands
- glob: Find files matching patterns
- grep: Search for content in files

Focus on correctness and safety over speed."""


@dataclass(frozen=True)
class AgentProfile:
    name: str
    prompt: str
    temperature: float
    max_turns: int
    # None means every registered tool
    tools: tuple[str, ...] | None = None
    execution_mode: ExecutionMode = ExecutionMode.MIXED


DEFAULT_PROFILES: dict[str, AgentProfile] = {
    "general": AgentProfile("general", GENERAL_PROMPT, temperature=0.7, max_turns=20),
    "explore": AgentProfile(
        "explore", EXPLORE_PROMPT, temperature=0.3, max_turns=15,
        tools=("read", "glob", "grep", "bash"),
    ),
    "plan": AgentProfile(
        "plan", PLAN_PROMPT, temperature=0.5, max_turns=10, tools=("read", "glob"),
    ),
    "execute": AgentProfile("execute", EXECUTE_PROMPT, temperature=0.5, max_turns=20),
}


class DefaultAgentCatalog:
    """Creates agents from named profiles over a shared tool registry.

    Restricted profiles get a sub-registry holding only their tools; a
    missing tool is a ``MissingToolError``. The registry's best practices
    are appended to each system prompt unless disabled.
    """

    def __init__(
        self,
        provider: LLMProvider,
        registry: ToolRegistry,
        *,
        base_config: AgentConfig | None = None,
        include_best_practices: bool = True,
        profiles: dict[str, AgentProfile] | None = None,
    ) -> None:
        self.provider = provider
        self.registry = registry
        self.base_config = base_config or AgentConfig()
        self.include_best_practices = include_best_practices
        self.profiles = dict(profiles or DEFAULT_PROFILES)

    def agent_types(self) -> list[str]:
        return list(self.profiles)

    def create_agent(self, agent_type: str) -> Agent:
        profile = self.profiles.get(agent_type)
        if profile is None:
            raise UnknownAgentTypeError(agent_type)

        tools = self.registry
        if profile.tools is not None:
            for tool_name in profile.tools:
                if self.registry.get(tool_name) is None:
                    raise MissingToolError(agent_type, tool_name)
            tools = self.registry.subset(profile.tools)

        config = self.base_config.model_copy(
            update={
                "temperature": profile.temperature,
                "max_turns": profile.max_turns,
                "execution_mode": profile.execution_mode,
            }
        )
        return Agent(
            self.provider,
            tools,
            config,
            name=profile.name,
            system_prompt=self._system_prompt(profile.prompt, tools),
        )

    def _system_prompt(self, base: str, tools: ToolRegistry) -> str:
        if not self.include_best_practices:
            return base
        practices = tools.best_practices()
        if not practices:
            return base
        return base + "\n\n" + practices

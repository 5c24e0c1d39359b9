"""
weft — agent-execution core.

Drives a multi-turn conversation with an LLM backend, dispatches the tool
calls it requests, rebuilds streamed responses into messages and lets an
agent delegate sub-tasks to nested sub-agents.

    from weft import Agent, ToolRegistry
    from weft.tools.builtin import system_tools

    agent = Agent(provider, ToolRegistry(system_tools()))
    output = await agent.run("List the Python files here")
"""

from .agent import (
    MAX_NESTING_DEPTH,
    Agent,
    AgentProfile,
    DefaultAgentCatalog,
    RunOutput,
    RunScope,
)
from .config import AgentConfig, WeftConfig, load_config, load_config_with_defaults
from .errors import WeftError
from .events import EventBus
from .hooks import Feedback, HookData, HookManager, HookPoint
from .infra import configure_logging, get_logger
from .tools import BaseTool, ExecutionMode, ToolExecutor, ToolRegistry
from .types import (
    CompletionParams,
    CompletionResult,
    Delta,
    LLMProvider,
    Message,
    Role,
    Tool,
    ToolCall,
    ToolResult,
)
from .utils import StreamAccumulator, StreamChannel

__version__ = "0.1.0"

__all__ = [
    "Agent", "AgentConfig", "RunOutput", "RunScope", "MAX_NESTING_DEPTH",
    "DefaultAgentCatalog", "AgentProfile",
    "WeftConfig", "load_config", "load_config_with_defaults",
    "WeftError",
    "EventBus",
    "HookManager", "HookPoint", "HookData", "Feedback",
    "configure_logging", "get_logger",
    "Tool", "BaseTool", "ToolRegistry", "ToolExecutor", "ExecutionMode", "ToolResult",
    "LLMProvider", "CompletionParams", "CompletionResult", "Delta",
    "Message", "Role", "ToolCall",
    "StreamAccumulator", "StreamChannel",
]

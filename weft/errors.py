"""Structured error hierarchy.

Fatal errors end a run; tool-level errors are converted into failed
``ToolResult`` values by the executor and never escape a single call.
"""

from __future__ import annotations


class WeftError(Exception):
    def __init__(self, code: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.cause = cause


class ConfigError(WeftError):
    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__("CONFIG_ERROR", message, cause)


# -- Backend --


class LLMError(WeftError):
    def __init__(
        self,
        code: str,
        provider: str,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(code, message, cause)
        self.provider = provider
        self.status_code = status_code


class LLMStreamInterruptedError(LLMError):
    def __init__(
        self, provider: str, partial_content: str = "", cause: Exception | None = None
    ) -> None:
        detail = f": {cause}" if cause else ""
        super().__init__(
            "LLM_STREAM_INTERRUPTED",
            provider,
            f"Stream interrupted from {provider}{detail}",
            cause=cause,
        )
        self.partial_content = partial_content


# -- Agent loop --


class AgentMaxTurnsError(WeftError):
    def __init__(self, max_turns: int) -> None:
        super().__init__("AGENT_MAX_TURNS", f"max turns ({max_turns}) exceeded")
        self.max_turns = max_turns


class AgentTimeoutError(WeftError):
    def __init__(self, timeout: float) -> None:
        super().__init__("AGENT_TIMEOUT", f"agent run timed out after {timeout}s")
        self.timeout = timeout


class UnknownAgentTypeError(WeftError):
    def __init__(self, agent_type: str) -> None:
        super().__init__("UNKNOWN_AGENT_TYPE", f"unknown agent type: {agent_type}")
        self.agent_type = agent_type


class MissingToolError(WeftError):
    def __init__(self, agent_type: str, tool_name: str) -> None:
        super().__init__(
            "MISSING_TOOL",
            f"{agent_type} agent requires tool '{tool_name}' but it's not registered",
        )
        self.agent_type = agent_type
        self.tool_name = tool_name


# -- Tools --


class ToolError(WeftError):
    def __init__(
        self, code: str, tool_name: str, message: str, cause: Exception | None = None
    ) -> None:
        super().__init__(code, message, cause)
        self.tool_name = tool_name


class ToolNotFoundError(ToolError):
    def __init__(self, tool_name: str) -> None:
        super().__init__("TOOL_NOT_FOUND", tool_name, f"tool {tool_name} not found")


class ToolAlreadyRegisteredError(ToolError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(
            "TOOL_ALREADY_REGISTERED", tool_name, f"tool {tool_name} already registered"
        )


class ToolTimeoutError(ToolError):
    def __init__(self, tool_name: str, timeout_ms: int) -> None:
        super().__init__(
            "TOOL_TIMEOUT", tool_name, f'Tool "{tool_name}" timed out after {timeout_ms}ms'
        )
        self.timeout_ms = timeout_ms


# -- Hooks --


class HookError(WeftError):
    def __init__(self, handler: str, point: str, cause: Exception | None = None) -> None:
        super().__init__("HOOK_ERROR", f"handler {handler} failed at {point}: {cause}", cause)
        self.handler = handler
        self.point = point

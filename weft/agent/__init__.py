from .context import (
    MAX_NESTING_DEPTH,
    ExecutionContext,
    LoopState,
    RunOutput,
    RunScope,
    TerminationReason,
)
from .core import TRUNCATION_MARKER, Agent
from .factory import DEFAULT_PROFILES, AgentProfile, DefaultAgentCatalog

__all__ = [
    "Agent", "TRUNCATION_MARKER",
    "RunScope", "RunOutput", "ExecutionContext", "LoopState", "TerminationReason",
    "MAX_NESTING_DEPTH",
    "DefaultAgentCatalog", "AgentProfile", "DEFAULT_PROFILES",
]

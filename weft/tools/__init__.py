"""Tool registry, dispatcher and dependency policies.

Built-in tools live in ``weft.tools.builtin`` and are registered explicitly.
"""

from .base import BaseTool
from .executor import EMPTY_OUTPUT_PLACEHOLDER, ExecutionMode, ToolExecutor
from .policy import DependencyPolicy, ResourceBarrierPolicy, SameToolPolicy, plan_batches
from .registry import ToolRegistry, ToolSnapshot

__all__ = [
    "BaseTool",
    "ToolRegistry", "ToolSnapshot",
    "ToolExecutor", "ExecutionMode", "EMPTY_OUTPUT_PLACEHOLDER",
    "DependencyPolicy", "ResourceBarrierPolicy", "SameToolPolicy", "plan_batches",
]

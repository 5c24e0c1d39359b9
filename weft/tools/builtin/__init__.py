"""Built-in tools."""

from .system import BashTool, GlobTool, GrepTool, ReadTool, WriteTool
from .task import AgentCatalog, TaskTool
from .todo import TodoItem, TodoStatus, TodoStore, TodoWriteTool

__all__ = [
    "ReadTool", "WriteTool", "BashTool", "GlobTool", "GrepTool",
    "TaskTool", "AgentCatalog",
    "TodoWriteTool", "TodoStore", "TodoItem", "TodoStatus",
]


def system_tools() -> list:
    """Fresh instances of the filesystem and shell tools."""
    return [ReadTool(), WriteTool(), BashTool(), GlobTool(), GrepTool()]

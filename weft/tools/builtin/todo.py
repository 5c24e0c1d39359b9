"""TodoWrite — task-progress list kept in an injected store."""

from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ...types import ToolResult
from ..base import BaseTool

if TYPE_CHECKING:
    from ...agent.context import RunScope


class TodoStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TodoItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    status: str
    active_form: str = Field(alias="activeForm")


class TodoStore:
    """Lock-protected todo list; concurrent writers are last-write-wins."""

    def __init__(self) -> None:
        self._todos: list[TodoItem] = []
        self._lock = threading.Lock()

    def get(self) -> list[TodoItem]:
        with self._lock:
            return list(self._todos)

    def set(self, todos: list[TodoItem]) -> None:
        with self._lock:
            self._todos = list(todos)

    def clear(self) -> None:
        with self._lock:
            self._todos = []


class TodoWriteParams(BaseModel):
    todos: list[TodoItem] = Field(
        description="Array of todo items. Pass empty array [] to clear all todos."
    )


_ICONS = {
    TodoStatus.COMPLETED.value: "✅",
    TodoStatus.IN_PROGRESS.value: "🔧",
    TodoStatus.PENDING.value: "⏳",
}


class TodoWriteTool(BaseTool):
    name = "TodoWrite"
    description = (
        "Manage and display a todo list for tracking task progress.\n\n"
        "Use this tool to:\n"
        "- Create a todo list when starting complex multi-step tasks (3+ steps)\n"
        "- Update task status as work progresses (pending -> in_progress -> completed)\n"
        "- Keep exactly ONE task in_progress at a time\n"
        "- Remove the entire todo list when all tasks are done\n\n"
        "Each todo requires:\n"
        '- content: Imperative form ("Run tests", "Fix bug")\n'
        '- status: "pending" | "in_progress" | "completed"\n'
        '- activeForm: Present continuous form ("Running tests", "Fixing bug")'
    )
    args_schema = TodoWriteParams

    def __init__(self, store: TodoStore) -> None:
        self.store = store

    def parameters(self) -> dict:
        schema = TodoWriteParams.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema

    async def run(self, scope: RunScope, params: TodoWriteParams) -> ToolResult:
        todos = params.todos
        valid = {s.value for s in TodoStatus}
        in_progress = 0
        for i, todo in enumerate(todos, 1):
            if not todo.content.strip():
                return ToolResult.fail(f"todo #{i}: content cannot be empty")
            if not todo.active_form.strip():
                return ToolResult.fail(f"todo #{i}: activeForm cannot be empty")
            if todo.status not in valid:
                return ToolResult.fail(
                    f"todo #{i}: invalid status '{todo.status}' "
                    "(must be 'pending', 'in_progress', or 'completed')"
                )
            if todo.status == TodoStatus.IN_PROGRESS.value:
                in_progress += 1
        if in_progress > 1:
            return ToolResult.fail(
                f"only ONE task can be 'in_progress' at a time, found {in_progress}"
            )

        if not todos:
            self.store.clear()
            return ToolResult.ok("✨ Todo list cleared - all tasks complete!")

        self.store.set(todos)
        counts = {s.value: sum(1 for t in todos if t.status == s.value) for s in TodoStatus}
        return ToolResult.ok(format_todos(todos), total=len(todos), **counts)


def format_todos(todos: list[TodoItem]) -> str:
    if not todos:
        return "No todos"
    completed = sum(1 for t in todos if t.status == TodoStatus.COMPLETED.value)
    lines = [f"📋 Todo List: {completed}/{len(todos)} completed", "─" * 50]
    for i, todo in enumerate(todos, 1):
        text = todo.active_form if todo.status == TodoStatus.IN_PROGRESS.value else todo.content
        lines.append(f"{i}. {_ICONS.get(todo.status, '')} {text}")
    return "\n".join(lines) + "\n"

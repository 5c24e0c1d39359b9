"""BaseTool — ``Tool`` implementation driven by a pydantic argument model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from ..types import ToolResult

if TYPE_CHECKING:
    from ..agent.context import RunScope


class BaseTool:
    """Subclasses set ``name``, ``description``, ``args_schema`` and implement ``run``.

    Argument validation errors become failed results; ``run`` receives the
    parsed model.
    """

    name: str = ""
    description: str = ""
    args_schema: type[BaseModel]

    def parameters(self) -> dict[str, Any]:
        schema = self.args_schema.model_json_schema()
        schema.pop("title", None)
        return schema

    def best_practices(self) -> str:
        return ""

    async def execute(self, scope: RunScope, raw_args: str) -> ToolResult:
        try:
            params = self.args_schema.model_validate_json(raw_args or "{}")
        except ValidationError as e:
            return ToolResult.fail(f"invalid parameters: {e}")
        return await self.run(scope, params)

    async def run(self, scope: RunScope, params: Any) -> ToolResult:
        raise NotImplementedError

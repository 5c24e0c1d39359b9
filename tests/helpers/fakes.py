"""Fake tools shared by the unit tests."""

import asyncio

from pydantic import BaseModel

from weft.tools.base import BaseTool
from weft.types import ToolResult


class EchoParams(BaseModel):
    text: str = ""


class EchoTool(BaseTool):
    """Returns its ``text`` argument (or a fixed output); records every call."""

    description = "Echo the given text"
    args_schema = EchoParams

    def __init__(self, name: str = "echo", output: str | None = None, delay: float = 0.0) -> None:
        self.name = name
        self.output = output
        self.delay = delay
        self.calls: list[str] = []

    async def run(self, scope, params: EchoParams) -> ToolResult:
        self.calls.append(params.text)
        if self.delay:
            await asyncio.sleep(self.delay)
        return ToolResult.ok(self.output if self.output is not None else params.text)


class BoomTool(BaseTool):
    """Raises from ``run``."""

    description = "Always raises"
    args_schema = EchoParams

    def __init__(self, name: str = "boom") -> None:
        self.name = name

    async def run(self, scope, params: EchoParams) -> ToolResult:
        raise RuntimeError("kaboom")


class TraceTool(BaseTool):
    """Appends (name, phase) to a shared trace around an awaited sleep."""

    description = "Trace start and end"
    args_schema = EchoParams

    def __init__(self, name: str, trace: list, delay: float = 0.01) -> None:
        self.name = name
        self.trace = trace
        self.delay = delay

    async def run(self, scope, params: EchoParams) -> ToolResult:
        self.trace.append((self.name, "start"))
        await asyncio.sleep(self.delay)
        self.trace.append((self.name, "end"))
        return ToolResult.ok(self.name)


class NoneTool(BaseTool):
    """Returns None instead of a ToolResult."""

    description = "Returns nothing"
    args_schema = EchoParams

    def __init__(self, name: str = "none") -> None:
        self.name = name

    async def execute(self, scope, raw_args: str):
        return None


class SelfTimeoutTool(BaseTool):
    """Raises its own TimeoutError from ``run``."""

    description = "Times out on its own"
    args_schema = EchoParams

    def __init__(self, name: str = "flaky") -> None:
        self.name = name

    async def run(self, scope, params: EchoParams) -> ToolResult:
        raise TimeoutError("upstream deadline")

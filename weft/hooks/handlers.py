"""Interactive confirmation handlers."""

from __future__ import annotations

import asyncio
import sys
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from .hook import Feedback, HookData, HookPoint


class _ConfirmHandler:
    _priority = 100

    def __init__(self, console: Console | None = None, reader: TextIO | None = None) -> None:
        self._console = console or Console()
        self._reader = reader or sys.stdin

    def priority(self) -> int:
        return self._priority

    async def _ask(self) -> str | None:
        self._console.print("Allow? [y/N]: ", end="", markup=False)
        line = await asyncio.to_thread(self._reader.readline)
        if not line:
            return None
        return line.strip().lower()

    def _verdict(self, answer: str | None, denial: str) -> Feedback:
        if answer is None:
            return Feedback.denied("No input received")
        if answer in ("y", "yes"):
            self._console.print("[green]✓ Allowed[/green]\n")
            return Feedback.allowed()
        self._console.print("[red]✗ Denied[/red]\n")
        return Feedback.denied(denial)


class BashConfirmHandler(_ConfirmHandler):
    """Asks before every shell command the bash tool is about to run."""

    def name(self) -> str:
        return "bash_confirm"

    def points(self) -> list[HookPoint]:
        return [HookPoint.BEFORE_BASH_COMMAND]

    async def handle(self, data: HookData) -> Feedback:
        command = data.get_str("command")
        if not command:
            return Feedback.allowed()

        self._console.print("\n[yellow]⚠️  Bash command requires confirmation:[/yellow]")
        self._console.print(f"    [bold]{escape(command)}[/bold]\n")
        return self._verdict(await self._ask(), "User denied command execution")


class ToolConfirmHandler(_ConfirmHandler):
    """Asks before tool execution; limited to ``tool_names`` when given."""

    def __init__(
        self,
        tool_names: list[str] | None = None,
        console: Console | None = None,
        reader: TextIO | None = None,
    ) -> None:
        super().__init__(console, reader)
        self._tool_names = set(tool_names or [])

    def name(self) -> str:
        return "tool_confirm"

    def points(self) -> list[HookPoint]:
        return [HookPoint.BEFORE_TOOL_EXECUTION]

    async def handle(self, data: HookData) -> Feedback:
        if self._tool_names and data.tool_name not in self._tool_names:
            return Feedback.allowed()

        self._console.print(
            f"\n[yellow]⚠️  Tool '{escape(data.tool_name)}' requires confirmation:[/yellow]"
        )
        params = data.get_str("params")
        if params:
            self._console.print(f"    Parameters: {escape(params)}")
        return self._verdict(await self._ask(), "User denied tool execution")

"""Rich console sink — renders agent events in the terminal.

Sub-agent output is indented by nesting depth so one shared bus still reads
as a tree.
"""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from ..events import EventBus
from ..types import (
    AgentEvent,
    DelegationEndEvent,
    DelegationStartEvent,
    ErrorEvent,
    ReasoningEvent,
    ResponseEvent,
    SessionEndEvent,
    SessionStartEvent,
    ToolCallEvent,
    ToolResultEvent,
    TurnStartEvent,
)

RESULT_MAX_LINES = 2
RESULT_MAX_LENGTH = 500
COMPACT_JSON_WIDTH = 80
INDENT = 4


class RichConsoleSink:
    def __init__(self, console: Console | None = None, show_reasoning: bool = True) -> None:
        self.console = console or Console()
        self.show_reasoning = show_reasoning

    def attach(self, bus: EventBus) -> None:
        bus.on_all(self.handle)

    def detach(self, bus: EventBus) -> None:
        bus.off_all(self.handle)

    async def handle(self, event: AgentEvent) -> None:
        if isinstance(event, SessionStartEvent):
            self._panel("🚀 Session Started", event.task, "cyan", event.depth)
        elif isinstance(event, SessionEndEvent):
            summary = f"Duration: {event.duration_ms}ms | Tool Calls: {event.tool_calls}"
            self._panel("✨ Session Completed", summary, "green", event.depth)
        elif isinstance(event, TurnStartEvent):
            self._print(
                f"[blue]Turn {event.turn}/{event.max_turns}[/blue] calling LLM...", event.depth
            )
        elif isinstance(event, ReasoningEvent):
            if self.show_reasoning:
                self._section("💭 Reasoning", event.text, "magenta", event.depth)
        elif isinstance(event, ResponseEvent):
            self._section("💬 Agent Response", event.text, "green", event.depth)
        elif isinstance(event, ToolCallEvent):
            self._section(
                f"🔧 Tool Call: {event.name}", format_arguments(event.arguments),
                "cyan", event.depth,
            )
        elif isinstance(event, ToolResultEvent):
            status = "✅ Success" if event.success else "❌ Failed"
            color = "green" if event.success else "red"
            header = f"📊 Tool Result: {event.name} [{status}] ({event.duration_ms}ms)"
            self._section(header, truncate_output(event.output), color, event.depth)
        elif isinstance(event, DelegationStartEvent):
            self._print(
                f"[yellow]↳ Launching {escape(event.agent_type)} sub-agent:[/yellow] "
                f"{escape(event.description)}",
                event.depth,
            )
        elif isinstance(event, DelegationEndEvent):
            if event.success:
                line = f"[green]↲ Sub-agent completed:[/green] {escape(event.description)}"
            else:
                line = f"[red]↲ Sub-agent failed:[/red] {escape(event.error)}"
            self._print(line, event.depth)
        elif isinstance(event, ErrorEvent):
            self._print(f"[bold red]ERROR[/bold red] {escape(event.error)}", event.depth)

    def _print(self, markup: str, depth: int) -> None:
        self.console.print(Padding(markup, (0, 0, 0, depth * INDENT)))

    def _section(self, header: str, body: str, color: str, depth: int) -> None:
        pad = (0, 0, 0, depth * INDENT)
        self.console.print(Padding(f"[bold {color}]{escape(header)}[/bold {color}]", pad))
        self.console.print(Padding(Rule(style=color), pad))
        self.console.print(Padding(Text(body), pad))
        self.console.print(Padding(Rule(style=color), pad))

    def _panel(self, title: str, body: str, color: str, depth: int) -> None:
        panel = Panel(escape(body), title=title, title_align="left", border_style=color)
        self.console.print(Padding(panel, (0, 0, 0, depth * INDENT)))


def format_arguments(raw: str) -> str:
    """Compact JSON when short, pretty-printed otherwise; raw text if not JSON."""
    try:
        parsed = json.loads(raw) if raw else {}
    except json.JSONDecodeError:
        return raw
    compact = json.dumps(parsed, ensure_ascii=False)
    if len(compact) < COMPACT_JSON_WIDTH:
        return compact
    return json.dumps(parsed, ensure_ascii=False, indent=2)


def truncate_output(output: str) -> str:
    lines = output.rstrip("\n").split("\n")
    shown = output
    cut_lines = len(lines) > RESULT_MAX_LINES
    if cut_lines:
        shown = "\n".join(lines[:RESULT_MAX_LINES])
    if len(shown) > RESULT_MAX_LENGTH:
        return shown[:RESULT_MAX_LENGTH] + "..."
    if cut_lines:
        return shown + "\n..."
    return shown

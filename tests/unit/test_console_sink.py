"""Tests for the rich console sink."""

import io
import json

import pytest
from rich.console import Console

from weft.events import EventBus
from weft.observability import RichConsoleSink, format_arguments, truncate_output
from weft.observability.console import RESULT_MAX_LENGTH
from weft.types import (
    DelegationStartEvent,
    ReasoningEvent,
    SessionStartEvent,
    ToolCallEvent,
    ToolResultEvent,
)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def sink(output):
    return RichConsoleSink(Console(file=output, width=120, force_terminal=False))


class TestRichConsoleSink:
    async def test_renders_through_bus(self, sink, output):
        bus = EventBus()
        sink.attach(bus)

        await bus.emit(SessionStartEvent(task="List files"))
        await bus.emit(ToolCallEvent(tool_call_id="1", name="glob", arguments='{"pattern": "*.go"}'))
        await bus.emit(
            ToolResultEvent(tool_call_id="1", name="glob", success=True, output="a.go", duration_ms=3)
        )

        text = output.getvalue()
        assert "Session Started" in text
        assert "List files" in text
        assert "Tool Call: glob" in text
        assert '{"pattern": "*.go"}' in text
        assert "Tool Result: glob" in text
        assert "(3ms)" in text

    async def test_markup_in_output_printed_literally(self, sink, output):
        await sink.handle(
            ToolResultEvent(tool_call_id="1", name="read", success=True, output="[red]x[/red]")
        )
        assert "[red]x[/red]" in output.getvalue()

    async def test_sub_agent_output_indented(self, sink, output):
        await sink.handle(DelegationStartEvent(agent_type="explore", description="Scan", depth=2))
        line = output.getvalue().splitlines()[0]
        assert line.startswith(" " * 8)
        assert "Launching explore sub-agent" in line

    async def test_reasoning_can_be_hidden(self, output):
        sink = RichConsoleSink(Console(file=output), show_reasoning=False)
        await sink.handle(ReasoningEvent(text="secret thoughts"))
        assert output.getvalue() == ""

    async def test_detach(self, sink, output):
        bus = EventBus()
        sink.attach(bus)
        sink.detach(bus)
        await bus.emit(SessionStartEvent(task="ignored"))
        assert output.getvalue() == ""


class TestFormatting:
    def test_short_arguments_compact(self):
        assert format_arguments('{"a":1}') == '{"a": 1}'

    def test_long_arguments_pretty(self):
        raw = json.dumps({"content": "x" * 100})
        assert format_arguments(raw) == json.dumps({"content": "x" * 100}, indent=2)

    def test_invalid_json_raw(self):
        assert format_arguments("{oops") == "{oops"

    def test_truncate_lines(self):
        assert truncate_output("a\nb\nc") == "a\nb\n..."

    def test_truncate_length(self):
        assert truncate_output("x" * 600) == "x" * RESULT_MAX_LENGTH + "..."

    def test_short_output_unchanged(self):
        assert truncate_output("one\ntwo") == "one\ntwo"

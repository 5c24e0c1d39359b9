"""
Scripted LLM provider for tests and demos.

Replays a fixed list of responses, one per backend request, and records the
requests it saw so callers can assert on them. No API key needed.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Sequence
from typing import Any

from ..errors import LLMError
from ..types import (
    STOP,
    TOOL_CALLS,
    CompletionParams,
    CompletionResult,
    Delta,
    Message,
    ToolCall,
    ToolCallFragment,
)


def text_result(content: str, stop_reason: str = STOP) -> CompletionResult:
    return CompletionResult(message=Message.assistant(content), stop_reason=stop_reason)


def tool_result(*calls: tuple[str, str, dict[str, Any]], content: str = "") -> CompletionResult:
    """Result asking for ``(call_id, tool_name, arguments)`` calls."""
    tool_calls = [ToolCall(id=cid, name=name, arguments=json.dumps(args)) for cid, name, args in calls]
    return CompletionResult(
        message=Message.assistant(content, tool_calls=tool_calls), stop_reason=TOOL_CALLS
    )


def result_to_deltas(result: CompletionResult) -> list[Delta]:
    """Split a result into the deltas a streaming backend would send."""
    msg = result.message
    deltas: list[Delta] = []
    if msg.reasoning:
        deltas.append(Delta(reasoning=msg.reasoning))
    if msg.content:
        deltas.append(Delta(content=msg.content))
    for i, tc in enumerate(msg.tool_calls):
        deltas.append(Delta(tool_calls=[ToolCallFragment(i, tc.id, tc.type, tc.name, "")]))
        if tc.arguments:
            deltas.append(Delta(tool_calls=[ToolCallFragment(i, arguments=tc.arguments)]))
    deltas.append(Delta(done=True, finish_reason=result.stop_reason))
    return deltas


class ScriptedProvider:
    """Replays ``script`` in order.

    Entries are ``CompletionResult`` values, explicit delta lists (streaming
    only) or exceptions to raise. With ``repeat_last`` the final entry is
    replayed forever instead of running out.
    """

    name = "scripted"

    def __init__(
        self,
        script: Sequence[CompletionResult | Sequence[Delta] | Exception],
        repeat_last: bool = False,
    ) -> None:
        self.script = list(script)
        self.repeat_last = repeat_last
        self.calls: list[CompletionParams] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def _next(self, params: CompletionParams) -> CompletionResult | Sequence[Delta]:
        index = len(self.calls)
        self.calls.append(params)
        if index >= len(self.script):
            if not (self.repeat_last and self.script):
                raise LLMError("SCRIPT_EXHAUSTED", self.name, f"no scripted response #{index + 1}")
            index = len(self.script) - 1
        entry = self.script[index]
        if isinstance(entry, Exception):
            raise entry
        return entry

    async def complete(self, params: CompletionParams) -> CompletionResult:
        entry = self._next(params)
        if not isinstance(entry, CompletionResult):
            raise LLMError("SCRIPT_MISMATCH", self.name, "delta script used with complete()")
        return entry

    async def stream(self, params: CompletionParams) -> AsyncIterator[Delta]:
        entry = self._next(params)
        deltas = result_to_deltas(entry) if isinstance(entry, CompletionResult) else entry
        for delta in deltas:
            yield delta

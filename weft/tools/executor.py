"""Tool Executor — dispatches one turn's tool calls.

Results always come back in the order of the incoming calls, whatever order
they actually finished in. A failing call is contained at its own boundary
and turned into a failed ``ToolResult``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from ..errors import HookError, ToolNotFoundError, ToolTimeoutError
from ..hooks import HookData, HookPoint
from ..infra.logging import get_logger
from ..types import CallResult, DispatchEvent, ToolCall, ToolCallEvent, ToolResult, ToolResultEvent
from .policy import DependencyPolicy, ResourceBarrierPolicy, plan_batches
from .registry import ToolSnapshot

if TYPE_CHECKING:
    from ..agent.context import RunScope

logger = get_logger(__name__)

EMPTY_OUTPUT_PLACEHOLDER = "(Tool executed successfully with no output)"
DENIED_TEMPLATE = (
    "Tool execution was DENIED by user. Reason: {reason}. "
    "Please ask the user for guidance on how to proceed."
)


class ExecutionMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    MIXED = "mixed"


class ToolExecutor:
    def __init__(
        self,
        mode: ExecutionMode | str = ExecutionMode.MIXED,
        policy: DependencyPolicy | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        self.mode = ExecutionMode(mode)
        self.policy = policy or ResourceBarrierPolicy()
        self.timeout_ms = timeout_ms

    def plan(self, calls: Sequence[ToolCall]) -> list[list[int]]:
        if self.mode is ExecutionMode.SEQUENTIAL:
            return [[i] for i in range(len(calls))]
        if self.mode is ExecutionMode.PARALLEL:
            return [list(range(len(calls)))] if calls else []
        return plan_batches(self.policy.dependencies(calls), len(calls))

    def describe_plan(self, calls: Sequence[ToolCall]) -> str:
        deps = self.policy.dependencies(calls) if self.mode is ExecutionMode.MIXED else {}
        batches = self.plan(calls)

        lines = [
            "Tool Call Dependency Analysis:",
            f"Mode: {self.mode.value}",
            f"Total tools: {len(calls)}",
            f"Dependencies found: {len(deps)}",
            "",
        ]
        for i, call in enumerate(calls):
            line = f"[{i}] {call.name}"
            if i in deps:
                line += f" (depends on: {deps[i]})"
            lines.append(line)
        lines.append("")
        lines.append(f"Execution plan: {len(batches)} batch(es)")
        for n, batch in enumerate(batches, 1):
            lines.append(f"Batch {n}: {batch}")
        return "\n".join(lines)

    async def execute(
        self, calls: Sequence[ToolCall], snapshot: ToolSnapshot, scope: RunScope
    ) -> list[CallResult]:
        if not calls:
            return []

        await scope.events.emit(
            DispatchEvent(
                count=len(calls), mode=self.mode.value,
                agent=scope.agent_name, depth=scope.depth,
            )
        )

        results: list[CallResult | None] = [None] * len(calls)
        for batch in self.plan(calls):
            if len(batch) == 1:
                i = batch[0]
                results[i] = await self._execute_one(calls[i], snapshot, scope)
                continue
            done = await asyncio.gather(
                *(self._execute_one(calls[i], snapshot, scope) for i in batch)
            )
            for i, r in zip(batch, done):
                results[i] = r

        return [r for r in results if r is not None]

    async def _execute_one(
        self, call: ToolCall, snapshot: ToolSnapshot, scope: RunScope
    ) -> CallResult:
        start = _now()
        await scope.events.emit(
            ToolCallEvent(
                tool_call_id=call.id, name=call.name, arguments=call.arguments,
                agent=scope.agent_name, depth=scope.depth,
            )
        )

        try:
            result, raw_args = await self._run(call, snapshot, scope, call.arguments)
        except Exception as e:
            logger.error("tool_call_failed", tool=call.name, call_id=call.id, error=str(e))
            result, raw_args = ToolResult.fail(f"internal error: {e}"), call.arguments

        if result.success and not result.output:
            result.output = EMPTY_OUTPUT_PLACEHOLDER

        end = _now()
        call_result = CallResult(
            tool_name=call.name,
            call_id=call.id,
            params=raw_args,
            result=result,
            start_time=start,
            end_time=end,
        )
        await scope.events.emit(
            ToolResultEvent(
                tool_call_id=call.id,
                name=call.name,
                success=result.success,
                output=call_result.content(),
                duration_ms=int(call_result.duration.total_seconds() * 1000),
                agent=scope.agent_name,
                depth=scope.depth,
            )
        )
        return call_result

    async def _run(
        self, call: ToolCall, snapshot: ToolSnapshot, scope: RunScope, raw_args: str
    ) -> tuple[ToolResult, str]:
        """Run one call through lookup, hooks and execution; also return the args used."""
        tool = snapshot.get(call.name)
        if tool is None:
            return ToolResult.fail(str(ToolNotFoundError(call.name))), raw_args

        hooks = scope.hooks
        if hooks is not None:
            data = HookData(
                HookPoint.BEFORE_TOOL_EXECUTION, call.name,
                {"params": raw_args, "call_id": call.id},
            )
            try:
                feedback = await hooks.trigger(data)
            except HookError as e:
                return ToolResult.fail(f"hook error: {e}"), raw_args
            if not feedback.allow:
                denied = DENIED_TEMPLATE.format(reason=feedback.message)
                return ToolResult(success=False, output=denied, error=denied), raw_args
            if isinstance(feedback.modified, str):
                raw_args = feedback.modified

        try:
            if self.timeout_ms:
                result = await asyncio.wait_for(
                    tool.execute(scope, raw_args), self.timeout_ms / 1000
                )
            else:
                result = await tool.execute(scope, raw_args)
            if not isinstance(result, ToolResult):
                raise TypeError(f"tool returned {type(result).__name__}, expected ToolResult")
        except Exception as e:
            # only the executor's own deadline counts as a timeout
            if self.timeout_ms and isinstance(e, asyncio.TimeoutError):
                result = ToolResult.fail(str(ToolTimeoutError(call.name, self.timeout_ms)))
            else:
                logger.warning(
                    "tool_execution_failed", tool=call.name, call_id=call.id, error=str(e)
                )
                result = ToolResult.fail(f"execution error: {e}")

        if hooks is not None:
            data = HookData(
                HookPoint.AFTER_TOOL_EXECUTION, call.name,
                {"params": raw_args, "call_id": call.id, "result": result},
            )
            try:
                await hooks.trigger(data)
            except HookError as e:
                logger.warning("after_hook_failed", tool=call.name, error=str(e))

        return result, raw_args


def _now() -> datetime:
    return datetime.now(timezone.utc)

"""Agent — the conversation loop.

One run alternates between asking the backend for the next assistant message
and dispatching the tool calls it requested, until the backend stops, the
answer is cut off by the length limit, or the turn budget runs out.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Sequence
from typing import Any

from ..config import AgentConfig
from ..errors import AgentMaxTurnsError, AgentTimeoutError, HookError, LLMError, WeftError
from ..events import EventBus
from ..hooks import HookData, HookManager, HookPoint
from ..infra.logging import get_logger
from ..tools import ToolExecutor, ToolRegistry
from ..types import (
    LENGTH,
    STOP,
    TOOL_CALLS,
    CallResult,
    CompletionParams,
    ErrorEvent,
    LLMProvider,
    Message,
    ReasoningEvent,
    ResponseEvent,
    SessionEndEvent,
    SessionStartEvent,
    TextDeltaEvent,
    TokenUsage,
    TurnStartEvent,
)
from ..utils import StreamAccumulator, StreamChannel
from .context import ExecutionContext, LoopState, RunOutput, RunScope, TerminationReason

logger = get_logger(__name__)

TRUNCATION_MARKER = "\n[Response truncated due to length limit]"


class Agent:
    """Provider + tools + config → one conversation loop per ``run``."""

    def __init__(
        self,
        provider: LLMProvider,
        tools: ToolRegistry | None = None,
        config: AgentConfig | None = None,
        *,
        name: str = "agent",
        system_prompt: str = "",
        hooks: HookManager | None = None,
        executor: ToolExecutor | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.provider = provider
        self.tools = tools or ToolRegistry()
        self.config = config or AgentConfig()
        self.name = name
        self.system_prompt = system_prompt
        self.hooks = hooks
        self.executor = executor or ToolExecutor(
            self.config.execution_mode, timeout_ms=self.config.tool_timeout_ms
        )
        self.events = events or EventBus()

    async def run(
        self,
        task: str,
        *,
        history: Sequence[Message] | None = None,
        max_turns: int | None = None,
        temperature: float | None = None,
        scope: RunScope | None = None,
        timeout: float | None = None,
    ) -> RunOutput:
        """Run the loop to completion.

        ``max_turns`` and ``temperature`` override the config when not None;
        ``temperature=0.0`` is a real override. ``scope`` is passed by a
        parent when this agent runs as a sub-agent.
        """
        run = self._run(task, history, max_turns, temperature, self._scope(scope), None)
        return await _bounded(run, timeout)

    async def run_streaming(
        self,
        task: str,
        channel: StreamChannel,
        *,
        history: Sequence[Message] | None = None,
        max_turns: int | None = None,
        temperature: float | None = None,
        scope: RunScope | None = None,
        timeout: float | None = None,
    ) -> RunOutput:
        """Like ``run`` but streams assistant text into ``channel``.

        The channel is closed when the run ends, whatever the outcome.
        """
        try:
            run = self._run(task, history, max_turns, temperature, self._scope(scope), channel)
            return await _bounded(run, timeout)
        finally:
            await channel.close()

    def _scope(self, scope: RunScope | None) -> RunScope:
        if scope is None:
            return RunScope(events=self.events, hooks=self.hooks, agent_name=self.name)
        hooks = self.hooks if self.hooks is not None else scope.hooks
        return RunScope(
            events=scope.events, depth=scope.depth, hooks=hooks, agent_name=self.name
        )

    def _initial_messages(self, task: str, history: Sequence[Message] | None) -> list[Message]:
        messages: list[Message] = []
        if self.system_prompt:
            messages.append(Message.system(self.system_prompt))
        messages.extend(history or ())
        if task:
            messages.append(Message.user(task))
        return messages

    async def _run(
        self,
        task: str,
        history: Sequence[Message] | None,
        max_turns: int | None,
        temperature: float | None,
        scope: RunScope,
        channel: StreamChannel | None,
    ) -> RunOutput:
        budget = self.config.max_turns if max_turns is None else max_turns
        temp = self.config.temperature if temperature is None else temperature
        ctx = ExecutionContext(max_turns=budget)
        messages = self._initial_messages(task, history)
        usage = TokenUsage()
        calls: list[CallResult] = []
        log = logger.bind(agent=self.name, depth=scope.depth)

        await scope.events.emit(SessionStartEvent(task=task, **_origin(scope)))
        await self._advise(scope, HookPoint.ON_AGENT_START, {"task": task, "agent": self.name})

        try:
            while ctx.next_turn():
                await scope.events.emit(
                    TurnStartEvent(turn=ctx.current_turn, max_turns=budget, **_origin(scope))
                )
                snapshot = self.tools.snapshot()
                params = CompletionParams(
                    messages=list(messages),
                    tools=snapshot.definitions(),
                    temperature=temp,
                    max_tokens=self.config.max_tokens,
                )
                message, stop_reason = await self._call_model(params, scope, channel, usage)
                messages.append(message.stamped())

                if message.reasoning:
                    await scope.events.emit(ReasoningEvent(text=message.reasoning, **_origin(scope)))
                if message.content:
                    await scope.events.emit(ResponseEvent(text=message.content, **_origin(scope)))

                if stop_reason == TOOL_CALLS and message.tool_calls:
                    ctx.state = LoopState.EXECUTING_TOOLS
                    results = await self.executor.execute(message.tool_calls, snapshot, scope)
                    ctx.tool_call_count += len(results)
                    calls.extend(results)
                    for r in results:
                        messages.append(
                            Message.tool(r.content(), r.call_id, r.tool_name, timestamp=r.end_time)
                        )
                    continue

                if stop_reason == LENGTH:
                    ctx.terminate(TerminationReason.LENGTH)
                    result = message.content + TRUNCATION_MARKER
                else:
                    if stop_reason not in (STOP, TOOL_CALLS):
                        log.warning("unknown_stop_reason", stop_reason=stop_reason)
                    ctx.terminate(TerminationReason.STOP)
                    result = message.content

                return RunOutput(
                    messages=messages,
                    result=result,
                    tool_calls=calls,
                    turns=ctx.current_turn,
                    usage=usage,
                )

            ctx.terminate(TerminationReason.MAX_TURNS_EXCEEDED)
            log.error("max_turns_exceeded", max_turns=budget)
            raise AgentMaxTurnsError(budget)
        except WeftError as e:
            ctx.fail()
            await scope.events.emit(ErrorEvent(error=str(e), **_origin(scope)))
            raise
        finally:
            await scope.events.emit(
                SessionEndEvent(
                    duration_ms=ctx.elapsed_ms,
                    tool_calls=ctx.tool_call_count,
                    turns=ctx.current_turn,
                    **_origin(scope),
                )
            )
            await self._advise(
                scope, HookPoint.ON_AGENT_END,
                {"agent": self.name, "state": ctx.state.value, "turns": ctx.current_turn},
            )

    async def _call_model(
        self,
        params: CompletionParams,
        scope: RunScope,
        channel: StreamChannel | None,
        usage: TokenUsage,
    ) -> tuple[Message, str]:
        provider = getattr(self.provider, "name", "llm")

        if not (self.config.stream or channel is not None):
            try:
                result = await self.provider.complete(params)
            except WeftError:
                raise
            except Exception as e:
                raise LLMError("LLM_ERROR", provider, f"LLM call failed: {e}", cause=e) from e
            usage.add(result.usage)
            return result.message, result.stop_reason

        async def forward(text: str) -> None:
            await scope.events.emit(TextDeltaEvent(text=text, **_origin(scope)))

        try:
            stream = self.provider.stream(params)
        except Exception as e:
            raise LLMError("LLM_ERROR", provider, f"LLM call failed: {e}", cause=e) from e
        acc = StreamAccumulator()
        message = await acc.consume(stream, channel, provider=provider, on_content=forward)
        return message, acc.stop_reason

    async def _advise(self, scope: RunScope, point: HookPoint, data: dict[str, Any]) -> None:
        if scope.hooks is None:
            return
        try:
            await scope.hooks.trigger(HookData(point, data=data))
        except HookError as e:
            logger.warning("advisory_hook_failed", point=point.value, error=str(e))


def _origin(scope: RunScope) -> dict[str, Any]:
    return {"agent": scope.agent_name, "depth": scope.depth}


async def _bounded(run: Coroutine[Any, Any, RunOutput], timeout: float | None) -> RunOutput:
    if timeout is None:
        return await run
    try:
        return await asyncio.wait_for(run, timeout)
    except asyncio.TimeoutError:
        raise AgentTimeoutError(timeout) from None

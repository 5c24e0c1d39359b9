"""OpenAI-compatible LLM provider."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from ..errors import LLMError
from ..types import (
    CompletionParams,
    CompletionResult,
    Delta,
    Message,
    Role,
    TokenUsage,
    ToolCall,
    ToolCallFragment,
)


def _msg_to_dict(m: Message) -> dict:
    d: dict = {"role": m.role.value, "content": m.content}
    if m.tool_calls:
        d["tool_calls"] = [
            {
                "id": tc.id,
                "type": tc.type,
                "function": {"name": tc.name, "arguments": tc.arguments},
            }
            for tc in m.tool_calls
        ]
    if m.role is Role.TOOL:
        d["tool_call_id"] = m.tool_call_id
        if m.name:
            d["name"] = m.name
    return d


class OpenAIProvider:
    """Chat-completions backend; needs the ``openai`` extra installed."""

    name = "openai"

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        **client_kwargs: Any,
    ) -> None:
        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ImportError("pip install openai") from None
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)
        self._model = model

    def _request(self, params: CompletionParams, stream: bool = False) -> dict:
        kwargs: dict = {
            "model": self._model,
            "messages": [_msg_to_dict(m) for m in params.messages],
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
        }
        if params.tools:
            kwargs["tools"] = [t.to_openai() for t in params.tools]
        if stream:
            kwargs["stream"] = True
        return kwargs

    def _error(self, e: Exception) -> LLMError:
        return LLMError(
            "LLM_ERROR", self.name, f"LLM call failed: {e}",
            status_code=getattr(e, "status_code", None), cause=e,
        )

    async def complete(self, params: CompletionParams) -> CompletionResult:
        try:
            resp = await self._client.chat.completions.create(**self._request(params))
        except Exception as e:
            raise self._error(e) from e

        choice = resp.choices[0]
        tool_calls = [
            ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments or "")
            for tc in choice.message.tool_calls or []
        ]
        usage = TokenUsage()
        if resp.usage:
            usage = TokenUsage(
                prompt_tokens=resp.usage.prompt_tokens,
                completion_tokens=resp.usage.completion_tokens,
                total_tokens=resp.usage.total_tokens,
            )
        message = Message.assistant(
            content=choice.message.content or "",
            tool_calls=tool_calls,
            reasoning=getattr(choice.message, "reasoning_content", None) or "",
        )
        return CompletionResult(
            message=message, stop_reason=choice.finish_reason or "stop", usage=usage
        )

    async def stream(self, params: CompletionParams) -> AsyncIterator[Delta]:
        try:
            resp = await self._client.chat.completions.create(**self._request(params, stream=True))
        except Exception as e:
            raise self._error(e) from e

        finish: str | None = None
        async for chunk in resp:
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            delta = choice.delta
            out = Delta(finish_reason=choice.finish_reason)
            if choice.finish_reason:
                finish = choice.finish_reason
            if delta is not None:
                out.reasoning = getattr(delta, "reasoning_content", None) or ""
                out.content = delta.content or ""
                for tc in delta.tool_calls or []:
                    fn = tc.function
                    out.tool_calls.append(
                        ToolCallFragment(
                            index=tc.index,
                            id=tc.id or "",
                            type=tc.type or "",
                            name=(fn.name if fn else None) or "",
                            arguments=(fn.arguments if fn else None) or "",
                        )
                    )
            yield out
        yield Delta(done=True, finish_reason=finish)

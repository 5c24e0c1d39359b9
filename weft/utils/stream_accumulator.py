"""Stream Accumulator — rebuilds one assistant message from streamed deltas.

Backends stream tool calls as fragments tagged with a positional index. The
first fragment for an index carries the id and type; later fragments only
carry more of the name and arguments. Entries are keyed by that index so
interleaved fragments of several calls land in the right place.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import LLMStreamInterruptedError
from ..types import STOP, TOOL_CALLS, Delta, Message, ToolCall

if TYPE_CHECKING:
    from .stream_channel import StreamChannel


@dataclass
class _PartialCall:
    id: str = ""
    type: str = ""
    name: str = ""
    arguments: str = ""


class StreamAccumulator:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._reasoning: list[str] = []
        self._content: list[str] = []
        self._calls: dict[int, _PartialCall] = {}
        self._finish_reason: str | None = None
        self.done = False

    @property
    def reasoning(self) -> str:
        return "".join(self._reasoning)

    @property
    def content(self) -> str:
        return "".join(self._content)

    def update(self, delta: Delta) -> None:
        if delta.reasoning:
            self._reasoning.append(delta.reasoning)
        if delta.content:
            self._content.append(delta.content)

        for frag in delta.tool_calls:
            entry = self._calls.get(frag.index)
            if entry is None:
                self._calls[frag.index] = _PartialCall(
                    id=frag.id, type=frag.type, name=frag.name, arguments=frag.arguments,
                )
                continue
            if frag.id and not entry.id:
                entry.id = frag.id
            if frag.type and not entry.type:
                entry.type = frag.type
            entry.name += frag.name
            entry.arguments += frag.arguments

        if delta.finish_reason:
            self._finish_reason = delta.finish_reason
        if delta.done:
            self.done = True

    def tool_calls(self) -> list[ToolCall]:
        return [
            ToolCall(
                id=entry.id,
                name=entry.name,
                arguments=entry.arguments,
                type=entry.type or "function",
            )
            for _, entry in sorted(self._calls.items())
        ]

    @property
    def stop_reason(self) -> str:
        # Provider-specific reasons pass through; the loop decides.
        if self._finish_reason:
            return self._finish_reason
        return TOOL_CALLS if self._calls else STOP

    def finish(self) -> Message:
        return Message.assistant(
            content=self.content,
            tool_calls=self.tool_calls(),
            reasoning=self.reasoning,
        )

    async def consume(
        self,
        stream: AsyncIterator[Delta],
        channel: StreamChannel | None = None,
        provider: str = "llm",
        on_content: Callable[[str], Awaitable[None]] | None = None,
    ) -> Message:
        """Drive ``stream`` until a ``done`` delta and return the message.

        Content fragments go to ``channel`` and ``on_content`` as they arrive.
        The stream is always closed on exit. A transport error, or a stream
        that ends before ``done``, raises ``LLMStreamInterruptedError``.
        """
        try:
            async with _closing(stream):
                async for delta in stream:
                    self.update(delta)
                    if delta.content:
                        if channel is not None:
                            await channel.send(delta.content)
                        if on_content is not None:
                            await on_content(delta.content)
                    if self.done:
                        break
        except Exception as e:
            partial = self.content
            self.reset()
            raise LLMStreamInterruptedError(provider, partial, e) from e

        if not self.done:
            partial = self.content
            self.reset()
            raise LLMStreamInterruptedError(provider, partial)
        return self.finish()


def _closing(stream: AsyncIterator[Delta]) -> contextlib.AbstractAsyncContextManager:
    if hasattr(stream, "aclose"):
        return contextlib.aclosing(stream)
    return contextlib.nullcontext(stream)

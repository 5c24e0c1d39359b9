"""Dependency policies for MIXED dispatch.

A policy turns an ordered list of calls into ordered batches of call indices.
Calls inside a batch run concurrently; batches run one after another.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..types import ToolCall

OBSERVING_TOOLS = frozenset({"read", "bash", "grep", "glob"})
MUTATING_TOOLS = frozenset({"write"})


class DependencyPolicy(Protocol):
    def dependencies(self, calls: Sequence[ToolCall]) -> dict[int, list[int]]: ...


def plan_batches(deps: dict[int, list[int]], count: int) -> list[list[int]]:
    """Layer calls so each runs one batch after the latest call it depends on."""
    layer: list[int] = []
    for i in range(count):
        earlier = [layer[d] for d in deps.get(i, []) if d < i]
        layer.append(max(earlier) + 1 if earlier else 0)

    batches: list[list[int]] = [[] for _ in range(max(layer, default=-1) + 1)]
    for i, n in enumerate(layer):
        batches[n].append(i)
    return batches


class ResourceBarrierPolicy:
    """Orders observations after earlier mutations of the workspace.

    An observing call waits for every earlier mutating call; a mutating call
    waits for every earlier mutating or observing call. Tools in neither set
    are treated as independent.
    """

    def __init__(
        self,
        observing: frozenset[str] = OBSERVING_TOOLS,
        mutating: frozenset[str] = MUTATING_TOOLS,
    ) -> None:
        self.observing = observing
        self.mutating = mutating

    def dependencies(self, calls: Sequence[ToolCall]) -> dict[int, list[int]]:
        deps: dict[int, list[int]] = {}
        for i, call in enumerate(calls):
            if call.name in self.observing:
                blockers = self.mutating
            elif call.name in self.mutating:
                blockers = self.mutating | self.observing
            else:
                continue
            found = [j for j in range(i) if calls[j].name in blockers]
            if found:
                deps[i] = found
        return deps


class SameToolPolicy:
    """Serializes repeated calls of the same tool; different tools overlap."""

    def dependencies(self, calls: Sequence[ToolCall]) -> dict[int, list[int]]:
        deps: dict[int, list[int]] = {}
        last: dict[str, int] = {}
        for i, call in enumerate(calls):
            if call.name in last:
                deps[i] = [last[call.name]]
            last[call.name] = i
        return deps

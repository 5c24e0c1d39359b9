"""Tool registry and per-request snapshots."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ..errors import ToolAlreadyRegisteredError
from ..types import Tool, ToolDefinition

BEST_PRACTICES_HEADER = "# Tool Usage Best Practices"


class ToolSnapshot:
    """Immutable view of the registry taken for a single backend request."""

    def __init__(self, tools: Mapping[str, Tool]) -> None:
        self._tools = MappingProxyType(dict(tools))

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(name=t.name, description=t.description, parameters=t.parameters())
            for t in self._tools.values()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


class ToolRegistry:
    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        self._lock = threading.RLock()
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        with self._lock:
            if tool.name in self._tools:
                raise ToolAlreadyRegisteredError(tool.name)
            self._tools[tool.name] = tool

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._tools.pop(name, None) is not None

    def get(self, name: str) -> Tool | None:
        with self._lock:
            return self._tools.get(name)

    def list(self) -> list[Tool]:
        with self._lock:
            return list(self._tools.values())

    def names(self) -> list[str]:
        with self._lock:
            return list(self._tools)

    def snapshot(self) -> ToolSnapshot:
        with self._lock:
            return ToolSnapshot(self._tools)

    def subset(self, names: Iterable[str]) -> ToolRegistry:
        """New registry holding only ``names``; unknown names raise KeyError."""
        with self._lock:
            picked = [self._tools[n] for n in names]
        return ToolRegistry(picked)

    def best_practices(self) -> str:
        """Join the non-empty best-practice guides, or "" when there are none."""
        guides = [g for g in (t.best_practices() for t in self.list()) if g]
        if not guides:
            return ""
        return BEST_PRACTICES_HEADER + "\n\n" + "\n\n".join(guides)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

"""
Pytest Configuration and Fixtures
"""

import pytest

from tests.helpers.fakes import EchoTool
from weft.agent import RunScope
from weft.events import EventBus
from weft.tools import ToolRegistry


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def scope(bus: EventBus) -> RunScope:
    return RunScope(events=bus, agent_name="test")


@pytest.fixture
def recorded(bus: EventBus) -> list:
    """Every event emitted on ``bus``."""
    events: list = []

    async def record(event):
        events.append(event)

    bus.on_all(record)
    return events


@pytest.fixture
def echo_tool() -> EchoTool:
    return EchoTool()


@pytest.fixture
def registry(echo_tool: EchoTool) -> ToolRegistry:
    return ToolRegistry([echo_tool])

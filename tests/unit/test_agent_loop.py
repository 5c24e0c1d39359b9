"""Tests for the Agent conversation loop."""

import asyncio

import pytest

from tests.helpers.fakes import BoomTool, EchoTool
from weft.agent import TRUNCATION_MARKER, Agent, RunScope
from weft.config import AgentConfig
from weft.errors import AgentMaxTurnsError, AgentTimeoutError, LLMError, LLMStreamInterruptedError
from weft.hooks import Feedback, HookManager, HookPoint
from weft.providers import ScriptedProvider, text_result, tool_result
from weft.tools import ToolRegistry
from weft.types import LENGTH, Delta, Message, Role
from weft.utils import StreamChannel


class SlowProvider:
    name = "slow"

    async def complete(self, params):
        await asyncio.sleep(5)
        return text_result("too late")

    async def stream(self, params):
        await asyncio.sleep(5)
        yield Delta(done=True)


class PointRecorder:
    def __init__(self, log):
        self.log = log

    def name(self):
        return "recorder"

    def points(self):
        return [HookPoint.ON_AGENT_START, HookPoint.ON_AGENT_END]

    def priority(self):
        return 0

    def handle(self, data):
        self.log.append(data.point)
        return Feedback.allowed()


class TestTermination:
    async def test_plain_answer(self):
        provider = ScriptedProvider([text_result("Hello!")])
        output = await Agent(provider).run("Say hello")

        assert output.result == "Hello!"
        assert output.tool_calls == []
        assert output.turns == 1
        assert provider.call_count == 1

    async def test_tool_turns_then_stop(self, registry):
        provider = ScriptedProvider(
            [
                tool_result(("c1", "echo", {"text": "one"})),
                tool_result(("c2", "echo", {"text": "two"})),
                tool_result(("c3", "echo", {"text": "three"})),
                text_result("all done"),
            ]
        )
        output = await Agent(provider, registry).run("go")

        assert provider.call_count == 4
        assert output.result == "all done"
        assert output.turns == 4
        assert [c.call_id for c in output.tool_calls] == ["c1", "c2", "c3"]

    async def test_max_turns_exceeded(self, registry):
        provider = ScriptedProvider([tool_result(("c", "echo", {}))], repeat_last=True)

        with pytest.raises(AgentMaxTurnsError) as exc:
            await Agent(provider, registry).run("loop forever", max_turns=2)

        assert str(exc.value) == "max turns (2) exceeded"
        assert provider.call_count == 2

    async def test_config_budget_used_by_default(self, registry):
        provider = ScriptedProvider([tool_result(("c", "echo", {}))], repeat_last=True)
        agent = Agent(provider, registry, AgentConfig(max_turns=3))

        with pytest.raises(AgentMaxTurnsError):
            await agent.run("loop")
        assert provider.call_count == 3

    async def test_length_truncation_marker(self):
        provider = ScriptedProvider([text_result("The answer is", stop_reason=LENGTH)])
        output = await Agent(provider).run("explain")

        assert output.result == "The answer is" + TRUNCATION_MARKER
        assert output.messages[-1].content == "The answer is"

    async def test_tool_calls_stop_without_calls_is_final(self):
        provider = ScriptedProvider([text_result("nothing to run", stop_reason="tool_calls")])
        output = await Agent(provider).run("task")
        assert output.result == "nothing to run"

    async def test_unknown_stop_reason_is_final(self):
        provider = ScriptedProvider([text_result("filtered", stop_reason="content_filter")])
        output = await Agent(provider).run("task")
        assert output.result == "filtered"


class TestConversation:
    async def test_glob_scenario_transcript(self):
        glob = EchoTool("glob", output="a.go\nb.go")
        provider = ScriptedProvider(
            [
                tool_result(("call_1", "glob", {"pattern": "*.go"})),
                text_result("Found 2 files: a.go and b.go"),
            ]
        )
        output = await Agent(provider, ToolRegistry([glob])).run("List go files")

        assert [m.role for m in output.messages] == [
            Role.USER, Role.ASSISTANT, Role.TOOL, Role.ASSISTANT,
        ]
        tool_msg = output.messages[2]
        assert tool_msg.tool_call_id == "call_1"
        assert tool_msg.name == "glob"
        assert tool_msg.content == "a.go\nb.go"
        assert len(output.tool_calls) == 1
        assert all(m.timestamp is not None for m in output.messages)

    async def test_failed_tool_reported_to_model(self):
        provider = ScriptedProvider(
            [tool_result(("c1", "boom", {})), text_result("recovered")]
        )
        output = await Agent(provider, ToolRegistry([BoomTool()])).run("try")

        assert output.result == "recovered"
        assert output.messages[2].content == "Error: execution error: kaboom"

    async def test_system_prompt_and_history(self):
        provider = ScriptedProvider([text_result("ok")])
        agent = Agent(provider, system_prompt="You are terse.")
        history = [Message.user("earlier"), Message.assistant("noted")]

        await agent.run("now", history=history)

        sent = provider.calls[0].messages
        assert [m.role for m in sent] == [Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.USER]
        assert sent[0].content == "You are terse."
        assert sent[-1].content == "now"

    async def test_request_carries_tool_definitions(self, registry):
        provider = ScriptedProvider([text_result("ok")])
        await Agent(provider, registry, AgentConfig(max_tokens=128)).run("task")

        params = provider.calls[0]
        assert [t.name for t in params.tools] == ["echo"]
        assert params.max_tokens == 128

    async def test_zero_temperature_override(self):
        provider = ScriptedProvider([text_result("ok")])
        await Agent(provider, config=AgentConfig(temperature=0.9)).run("t", temperature=0.0)
        assert provider.calls[0].temperature == 0.0

    async def test_config_temperature_default(self):
        provider = ScriptedProvider([text_result("ok")])
        await Agent(provider, config=AgentConfig(temperature=0.9)).run("t")
        assert provider.calls[0].temperature == 0.9


class TestFailures:
    async def test_backend_error_wrapped(self):
        provider = ScriptedProvider([RuntimeError("connection refused")])

        with pytest.raises(LLMError) as exc:
            await Agent(provider).run("task")
        assert "connection refused" in str(exc.value)

    async def test_backend_weft_error_passes_through(self):
        error = LLMError("RATE_LIMIT", "scripted", "slow down", status_code=429)
        provider = ScriptedProvider([error])

        with pytest.raises(LLMError) as exc:
            await Agent(provider).run("task")
        assert exc.value is error

    async def test_timeout(self):
        with pytest.raises(AgentTimeoutError):
            await Agent(SlowProvider()).run("task", timeout=0.05)

    async def test_error_event_emitted(self, bus, recorded):
        provider = ScriptedProvider([RuntimeError("down")])
        with pytest.raises(LLMError):
            await Agent(provider, events=bus).run("task")

        types = [e.type for e in recorded]
        assert "agent:error" in types
        assert types[-1] == "session:end"


class TestStreaming:
    async def test_stream_config_uses_stream_path(self, registry):
        provider = ScriptedProvider(
            [tool_result(("c1", "echo", {"text": "hi"})), text_result("streamed answer")]
        )
        agent = Agent(provider, registry, AgentConfig(stream=True))

        output = await agent.run("task")

        assert output.result == "streamed answer"
        assert output.tool_calls[0].result.output == "hi"

    async def test_run_streaming_forwards_text_and_closes(self):
        provider = ScriptedProvider(
            [[Delta(content="Hel"), Delta(content="lo"), Delta(done=True, finish_reason="stop")]]
        )
        channel = StreamChannel(maxsize=16)

        output = await Agent(provider).run_streaming("hi", channel)

        assert output.result == "Hello"
        assert channel.closed
        assert [t async for t in channel] == ["Hel", "lo"]

    async def test_run_streaming_closes_channel_on_failure(self):
        provider = ScriptedProvider([[Delta(content="part")]])
        channel = StreamChannel(maxsize=16)

        with pytest.raises(LLMStreamInterruptedError):
            await Agent(provider).run_streaming("hi", channel)
        assert channel.closed

    async def test_text_delta_events(self, bus, recorded):
        provider = ScriptedProvider([[Delta(content="a"), Delta(content="b"), Delta(done=True)]])
        await Agent(provider, config=AgentConfig(stream=True), events=bus).run("task")

        deltas = [e.text for e in recorded if e.type == "agent:text_delta"]
        assert deltas == ["a", "b"]


class TestObservability:
    async def test_event_sequence(self, bus, recorded, registry):
        provider = ScriptedProvider(
            [tool_result(("c1", "echo", {"text": "x"}), content="checking"), text_result("done")]
        )
        await Agent(provider, registry, name="main", events=bus).run("task")

        assert [e.type for e in recorded] == [
            "session:start",
            "turn:start",
            "agent:response",
            "tool:dispatch",
            "tool:call",
            "tool:result",
            "turn:start",
            "agent:response",
            "session:end",
        ]
        assert all(e.agent == "main" and e.depth == 0 for e in recorded)
        assert recorded[-1].tool_calls == 1
        assert recorded[-1].turns == 2

    async def test_parent_scope_bus_and_depth_inherited(self, bus, recorded):
        provider = ScriptedProvider([text_result("child answer")])
        child = Agent(provider, name="child")

        await child.run("sub task", scope=RunScope(events=bus, depth=1, agent_name="parent"))

        assert recorded
        assert all(e.agent == "child" and e.depth == 1 for e in recorded)

    async def test_agent_lifecycle_hooks(self):
        log = []
        hooks = HookManager()
        hooks.register(PointRecorder(log))
        provider = ScriptedProvider([text_result("ok")])

        await Agent(provider, hooks=hooks).run("task")

        assert log == [HookPoint.ON_AGENT_START, HookPoint.ON_AGENT_END]

    async def test_usage_accumulated(self):
        first = text_result("ok")
        first.usage.prompt_tokens = 10
        first.usage.completion_tokens = 2
        first.usage.total_tokens = 12
        provider = ScriptedProvider([first])

        output = await Agent(provider).run("task")
        assert output.usage.total_tokens == 12

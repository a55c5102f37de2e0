"""
Unit tests for Agent runs and turn monitor propagation.
"""

from types import MappingProxyType

import pytest
from langfuse import get_client
from conftest import ScriptedSession

from agent_tree import (
    Agent,
    AgentTool,
    EntryKind,
    ModelInvocationFailed,
    TurnBudgetExceeded,
    TurnMonitor,
)
from agent_tree.tools.calculator import calculator_tool


class LateBoundAgent(Agent):
    """Agent whose tools are resolved on access, so two agents can list each other."""

    def __init__(self, name, resolve_tools):
        super().__init__(name, session=ScriptedSession(name=name))
        self.resolve_tools = resolve_tools

    @property
    def tools(self):
        return MappingProxyType({tool.name: tool for tool in self.resolve_tools()})


class TestAgentRun:
    """Single agent behavior"""

    @pytest.mark.asyncio
    async def test_single_prompt_uses_one_turn(self, make_agent):
        agent = make_agent("Solo", script=["hello"])

        assert await agent.run("hi", max_turn=2) == "hello"
        assert agent.current_monitor.current_turn == 1

    @pytest.mark.asyncio
    async def test_unbounded_run_has_no_monitor(self, make_agent):
        agent = make_agent("Solo")
        agent.current_monitor = TurnMonitor(1)

        await agent.run("hi")

        assert agent.current_monitor is None
        assert agent.session.seen_monitors == [None]

    @pytest.mark.asyncio
    async def test_prompt_transformer_applied_once(self, make_agent):
        agent = make_agent("Upper", prompt_transformer=lambda p: f"Q: {p}")

        await agent.run("what?")

        assert agent.session.prompts == ["Q: what?"]
        assert agent.transcript[-2].content == "Q: what?"

    @pytest.mark.asyncio
    async def test_each_run_gets_a_fresh_monitor(self, make_agent):
        agent = make_agent("Solo")

        await agent.run("one", max_turn=1)
        first = agent.current_monitor
        await agent.run("two", max_turn=1)

        assert agent.current_monitor is not first
        assert agent.current_monitor.current_turn == 1

    @pytest.mark.asyncio
    async def test_history_carries_over_between_runs(self, make_agent):
        agent = make_agent("Solo", script=["a", "b"])

        await agent.run("one")
        await agent.run("two")

        kinds = [entry.kind for entry in agent.transcript]
        assert kinds == [
            EntryKind.INSTRUCTIONS,
            EntryKind.PROMPT,
            EntryKind.RESPONSE,
            EntryKind.PROMPT,
            EntryKind.RESPONSE,
        ]

        agent.reset()
        assert [entry.kind for entry in agent.transcript] == [EntryKind.INSTRUCTIONS]

    @pytest.mark.asyncio
    async def test_top_level_model_failure_propagates(self, make_agent):
        cause = RuntimeError("connection reset")
        agent = make_agent("Solo", script=[cause])

        with pytest.raises(ModelInvocationFailed) as exc_info:
            await agent.run("hi", max_turn=3)

        assert exc_info.value.cause is cause
        assert exc_info.value.agent == "Solo"
        assert not agent.is_responding
        # The prompt is still in the transcript after the failure
        assert agent.transcript[-1].kind is EntryKind.PROMPT

    @pytest.mark.asyncio
    async def test_over_budget_invocation_propagates_raw(self, make_agent):
        agent = make_agent("Solo")
        monitor = TurnMonitor(1)
        monitor.check_and_increment()

        with pytest.raises(TurnBudgetExceeded):
            await agent._run("hi", monitor)
        assert agent.session.prompts == []


class TestPropagation:
    """The monitor reaches every agent of the tree"""

    @pytest.mark.asyncio
    async def test_same_monitor_on_every_reachable_agent(self, make_agent):
        leaf = make_agent("Leaf")
        middle = make_agent("Middle", tools=[leaf.as_tool("leaf"), calculator_tool])
        other = make_agent("Other")
        top = make_agent("Top", tools=[middle.as_tool("middle"), other.as_tool("other")])

        await top.run("hi", max_turn=5)

        monitor = top.current_monitor
        assert monitor is not None
        assert middle.current_monitor is monitor
        assert leaf.current_monitor is monitor
        assert other.current_monitor is monitor
        assert [agent.name for agent in top.walk()] == ["Top", "Middle", "Leaf", "Other"]

    def test_child_agents_only_lists_agent_tools(self, make_agent):
        leaf = make_agent("Leaf")
        agent = make_agent("Top", tools=[calculator_tool, leaf.as_tool("leaf")])

        assert agent.child_agents == [leaf]

    def test_cyclic_configuration_terminates(self, make_agent):
        a = LateBoundAgent("A", lambda: [b.as_tool("b")])
        b = make_agent("B", tools=[a.as_tool("a")])

        monitor = TurnMonitor(3)
        visited = a.propagate_monitor(monitor)

        assert visited == [a, b]
        assert a.current_monitor is monitor
        assert b.current_monitor is monitor

    @pytest.mark.asyncio
    async def test_shared_sub_agent_visited_once(self, make_agent):
        shared = make_agent("Shared")
        left = make_agent("Left", tools=[shared.as_tool("shared")])
        right = make_agent("Right", tools=[shared.as_tool("shared")])
        top = make_agent("Top", tools=[left.as_tool("left"), right.as_tool("right")])

        assert [agent.name for agent in top.walk()] == ["Top", "Left", "Shared", "Right"]

    @pytest.mark.asyncio
    async def test_independent_tree_is_unaffected(self, make_agent):
        helper = make_agent("Helper")
        top = make_agent("Top", tools=[helper.as_tool("helper")])
        other_helper = make_agent("OtherHelper")
        other_top = make_agent("OtherTop", tools=[other_helper.as_tool("helper")])

        await top.run("hi", max_turn=4)
        await other_top.run("hi", max_turn=9)

        assert top.current_monitor.max_turn == 4
        assert helper.current_monitor is top.current_monitor
        assert other_helper.current_monitor.max_turn == 9

    @pytest.mark.asyncio
    async def test_direct_run_of_sub_agent_keeps_parent_budget_separate(self, make_agent):
        helper = make_agent("Helper", default="helped")
        top = make_agent(
            "Top",
            script=[[("helper", {"prompt": "go"})], "done"],
            tools=[helper.as_tool("helper", name="helper")],
        )

        await helper.run("direct", max_turn=1)
        helper_monitor = helper.current_monitor
        await top.run("hi", max_turn=2)

        # The nested call used the top-level monitor passed down explicitly
        assert helper.session.seen_monitors == [helper_monitor, top.current_monitor]
        assert top.current_monitor.current_turn == 2
        assert helper_monitor.current_turn == 1


class TestAsTool:
    """Agent tool adapters"""

    def test_name_defaults_to_agent_name(self, make_agent):
        agent = make_agent("MathAssistant")
        tool = agent.as_tool("Helps with math")

        assert isinstance(tool, AgentTool)
        assert tool.name == "MathAssistant"
        assert tool.description == "Helps with math"
        assert tool.agent is agent

    @pytest.mark.asyncio
    async def test_two_adapters_share_the_agent(self, make_agent):
        agent = make_agent("Helper", script=["first", "second"])
        algebra = agent.as_tool("Algebra help", name="algebra")
        geometry = agent.as_tool("Geometry help", name="geometry")

        assert algebra != geometry
        assert await algebra.call("x + 1 = 2") == "first"
        assert await geometry.call("area of a unit square") == "second"

        prompts = [e.content for e in agent.transcript if e.kind is EntryKind.PROMPT]
        assert prompts == ["x + 1 = 2", "area of a unit square"]

    def test_openai_format_exposes_prompt_argument(self, make_agent):
        tool = make_agent("Helper").as_tool("Helps")
        schema = tool.to_openai_format()

        assert schema["function"]["name"] == "Helper"
        assert schema["function"]["description"] == "Helps"
        assert schema["function"]["parameters"]["required"] == ["prompt"]


class TestConfiguration:
    """Agent configuration is fixed at construction"""

    def test_tools_cannot_be_rewired(self, make_agent):
        helper = make_agent("Helper")
        agent = make_agent("Top", tools=[calculator_tool])

        with pytest.raises(TypeError):
            agent.tools["Helper"] = helper.as_tool("helps")
        with pytest.raises(AttributeError):
            agent.tools = {}

        assert list(agent.tools) == ["calculator"]
        assert agent.child_agents == []

    @pytest.mark.parametrize(
        "method", ["update_current_trace", "update_current_span", "update_current_generation"]
    )
    def test_tracing_client_supports_run_annotations(self, method):
        assert callable(getattr(get_client(), method, None))

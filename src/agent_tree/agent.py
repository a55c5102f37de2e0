"""
Agents and agents-as-tools.

An Agent wraps one model session. Any agent can be exposed as a tool of
another agent, so an orchestrator can delegate to specialists, recursively.
All agents reached from a top-level run draw from one shared turn budget.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping, Type

from langfuse import get_client, observe
from pydantic import BaseModel, Field, ValidationError

from .monitor import TurnMonitor
from .session import OpenAISession, Session
from .tool import BaseTool
from .transcript import Transcript

logger = logging.getLogger(__name__)

# Marks "no monitor passed"; None is the explicit unbounded monitor
_UNSET = object()


class AgentToolParams(BaseModel):
    """Parameters for calling an agent as a tool."""

    prompt: str = Field(description="A prompt for the agent to respond to.")


class Agent:
    """
    A named AI agent wrapping one conversational session.

    A run works in four steps:
    1. Spend one turn from the shared monitor, if there is one
    2. Apply the prompt transformer, if there is one
    3. Let the session respond, possibly calling tools (including other agents)
    4. Return the response text
    """

    def __init__(
        self,
        name: str,
        instructions: str | None = None,
        tools: list[BaseTool] | None = None,
        prompt_transformer: Callable[[str], str] | None = None,
        model: str | None = None,
        session: Session | None = None,
    ):
        """
        Initialize the agent.

        Args:
            name: Identifier used for tool naming and logging
            instructions: System instructions for the session
            tools: Tools the agent can use, agent tools included
            prompt_transformer: Maps each incoming prompt before dispatch
            model: Model to use when no session is given
            session: Session to wrap; an OpenAISession is built otherwise
        """
        self.name = name
        self.instructions = instructions
        self._tools = MappingProxyType({tool.name: tool for tool in (tools or [])})
        self.prompt_transformer = prompt_transformer
        self.session = session or OpenAISession(
            instructions=instructions, model=model, name=name
        )
        self.current_monitor: TurnMonitor | None = None

    @property
    def tools(self) -> Mapping[str, BaseTool]:
        """Tools keyed by name, read-only."""
        return self._tools

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, tools={list(self.tools)!r})"

    @property
    def child_agents(self) -> list["Agent"]:
        """Agents exposed to this agent through agent tools."""
        return [tool.agent for tool in self.tools.values() if isinstance(tool, AgentTool)]

    @property
    def transcript(self) -> Transcript:
        return self.session.transcript

    @property
    def is_responding(self) -> bool:
        return self.session.is_responding

    def reset(self) -> None:
        """Clear conversation history. History is never cleared between runs otherwise."""
        self.session.reset()

    def as_tool(self, description: str, name: str | None = None) -> "AgentTool":
        """
        Expose this agent as a tool another agent can call.

        Args:
            description: What the agent can help with (sent to the LLM)
            name: Tool name, defaults to the agent's name

        Example:
            >>> math = Agent(name="MathAssistant", instructions="...")
            >>> teacher = Agent(
            ...     name="Teacher",
            ...     tools=[math.as_tool("Helps with mathematical problems")],
            ... )
        """
        return AgentTool(name=name or self.name, description=description, agent=self)

    def walk(self) -> list["Agent"]:
        """
        This agent and every agent reachable through agent tools.

        Depth-first, each agent once, so shared sub-agents and cyclic
        configurations terminate.
        """
        visited: set[int] = set()
        order: list[Agent] = []
        stack: list[Agent] = [self]
        while stack:
            agent = stack.pop()
            if id(agent) in visited:
                continue
            visited.add(id(agent))
            order.append(agent)
            # Reversed so children are visited in tool-list order
            stack.extend(reversed(agent.child_agents))
        return order

    def propagate_monitor(self, monitor: TurnMonitor | None) -> list["Agent"]:
        """Set `monitor` on every agent of the tree, replacing any previous one."""
        agents = self.walk()
        for agent in agents:
            agent.current_monitor = monitor
        return agents

    @observe()
    async def run(self, prompt: str, max_turn: int | None = None) -> str:
        """
        Run a top-level request.

        A fresh turn monitor is created for every call (none when `max_turn`
        is None, meaning unbounded) and shared with every agent reachable
        from this one.

        Args:
            prompt: The user's prompt
            max_turn: Maximum number of agent invocations across the whole tree

        Returns:
            The agent's final text response

        Raises:
            TurnBudgetExceeded: If this top-level invocation is over budget
            ModelInvocationFailed: If the session failed
        """
        monitor = TurnMonitor(max_turn) if max_turn is not None else None
        agents = self.propagate_monitor(monitor)
        get_client().update_current_trace(
            name=f"agent_run:{self.name}",
            input=prompt,
            metadata={"max_turn": max_turn, "agents": [agent.name for agent in agents]},
        )
        logger.debug(
            "Running %s with max_turn=%s across %d agent(s)", self.name, max_turn, len(agents)
        )
        response = await self._run(prompt, monitor)
        get_client().update_current_trace(output=response)
        return response

    @observe(as_type="span")
    async def _run(self, prompt: str, monitor: TurnMonitor | None) -> str:
        """Single invocation of this agent; errors propagate to the caller."""
        if monitor is not None:
            turn = monitor.check_and_increment()
            logger.debug("%s granted turn %d/%d", self.name, turn, monitor.max_turn)

        if self.prompt_transformer is not None:
            prompt = self.prompt_transformer(prompt)

        get_client().update_current_span(name=f"agent:{self.name}", input=prompt)
        response = await self.session.respond(prompt, tools=self.tools, monitor=monitor)
        get_client().update_current_span(output=response)
        return response


@dataclass(frozen=True)
class AgentTool(BaseTool):
    """
    An Agent exposed as a tool.

    Failures of the wrapped agent never propagate out of `call`; they come
    back as text so the calling agent can still answer with what it has.
    """

    name: str
    description: str
    agent: Agent

    parameters: ClassVar[Type[BaseModel]] = AgentToolParams

    @observe(as_type="span")
    async def call(self, prompt: str, monitor: TurnMonitor | None | object = _UNSET) -> str:
        """
        Run the wrapped agent on `prompt`.

        Args:
            prompt: Prompt for the wrapped agent
            monitor: Turn monitor of the current request, None for unbounded;
                when omitted, the one last propagated to the wrapped agent

        Returns:
            The agent's response, or a description of the failure
        """
        logger.info("Running agent tool: %s", self.name)
        if monitor is _UNSET:
            monitor = self.agent.current_monitor
        get_client().update_current_span(name=f"agent_tool:{self.name}", input=prompt)
        try:
            return await self.agent._run(prompt, monitor)
        except Exception as e:
            result = describe_failure(e)
            logger.warning("Agent tool %s failed: %s", self.name, result)
            get_client().update_current_span(output=result, level="WARNING")
            return result

    async def execute(
        self, arguments: dict[str, Any], monitor: TurnMonitor | None | object = _UNSET
    ) -> str:
        try:
            params = AgentToolParams(**arguments)
        except ValidationError as e:
            return describe_failure(e)
        return await self.call(params.prompt, monitor=monitor)


def describe_failure(error: Exception) -> str:
    """Text reported back to the model in place of a failed tool result."""
    describe = getattr(error, "describe", None)
    if callable(describe):
        return describe()
    return f"Error: {str(error).rstrip('.')}."

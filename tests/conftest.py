"""Pytest configuration and fixtures shared by all tests.

Agents run against a scripted session, so no test talks to a model.
"""

import asyncio
import os

# Keep langfuse quiet and offline during tests
os.environ.setdefault("LANGFUSE_TRACING_ENABLED", "false")

import pytest

from agent_tree import Agent, Session, ToolCall


class ScriptedSession(Session):
    """
    Session that replays a script instead of calling a model.

    Each script step is consumed by one model turn:
    - a str is the final response
    - an Exception is raised
    - a list of (tool_name, arguments) pairs is executed concurrently as
      tool calls, after which the next step is consumed
    Once the script runs out, `default` is returned.
    """

    def __init__(self, script=None, default="ok", instructions=None, name=None):
        super().__init__(instructions=instructions, name=name)
        self.script = list(script or [])
        self.default = default
        self.prompts: list[str] = []
        self.tool_outputs: list[list[str]] = []
        self.seen_monitors = []

    async def _respond(self, prompt, tools, monitor):
        self.prompts.append(prompt)
        self.seen_monitors.append(monitor)
        # Suspend like a real model round-trip would
        await asyncio.sleep(0)
        while True:
            step = self.script.pop(0) if self.script else self.default
            if isinstance(step, Exception):
                raise step
            if isinstance(step, str):
                return step
            calls = [
                ToolCall(id=f"call_{i}", name=name, arguments=arguments)
                for i, (name, arguments) in enumerate(step)
            ]
            self.tool_outputs.append(await self._invoke_tools(calls, tools, monitor))


@pytest.fixture
def make_agent():
    """Build an agent backed by a ScriptedSession."""

    def _make(name, script=None, tools=None, prompt_transformer=None, default="ok"):
        return Agent(
            name=name,
            instructions=f"You are {name}.",
            tools=tools,
            prompt_transformer=prompt_transformer,
            session=ScriptedSession(script, default=default, instructions=f"You are {name}.", name=name),
        )

    return _make

"""
Model sessions.

A session is the conversational capability an Agent wraps: given a prompt it
produces a text response, possibly invoking some of the agent's tools along
the way. History accumulates across calls until reset() is called.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from langfuse import get_client, observe
from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)
from openai.types.chat import ChatCompletionMessage
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from . import config
from .exceptions import AgentError, ModelInvocationFailed
from .monitor import TurnMonitor
from .tool import BaseTool
from .transcript import ToolCall, Transcript

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError)


class Session(ABC):
    """
    Base class for model sessions.

    Handles the bookkeeping every session shares: the transcript, the
    responding status and concurrent tool execution. Subclasses implement
    `_respond` with the actual model protocol.
    """

    def __init__(self, instructions: str | None = None, name: str | None = None):
        self.instructions = instructions
        self.name = name
        self.transcript = Transcript()
        self._in_flight = 0
        if instructions:
            self.transcript.add_instructions(instructions)

    @property
    def is_responding(self) -> bool:
        return self._in_flight > 0

    async def respond(
        self,
        prompt: str,
        tools: Mapping[str, BaseTool] | None = None,
        monitor: TurnMonitor | None = None,
    ) -> str:
        """
        Produce a response to `prompt`.

        Args:
            prompt: The prompt to respond to
            tools: Tools the model may invoke, keyed by name
            monitor: Turn monitor of the current request, handed to agent tools

        Raises:
            ModelInvocationFailed: If the model could not produce a response
        """
        self.transcript.add_prompt(prompt)
        self._in_flight += 1
        try:
            response = await self._respond(prompt, dict(tools or {}), monitor)
        except AgentError:
            raise
        except Exception as e:
            raise ModelInvocationFailed(
                f"Model invocation failed: {e}", agent=self.name, cause=e
            ) from e
        finally:
            self._in_flight -= 1

        self.transcript.add_response(response)
        return response

    @abstractmethod
    async def _respond(
        self,
        prompt: str,
        tools: dict[str, BaseTool],
        monitor: TurnMonitor | None,
    ) -> str:
        """Run the model protocol for one prompt and return the final text."""

    def reset(self) -> None:
        """Clear conversation history (keeps instructions)."""
        self.transcript.clear(keep_instructions=True)

    async def _invoke_tools(
        self,
        calls: list[ToolCall],
        tools: dict[str, BaseTool],
        monitor: TurnMonitor | None,
    ) -> list[str]:
        """Execute all tool calls of one model turn concurrently."""
        self.transcript.add_tool_calls(calls)
        outputs = await asyncio.gather(
            *[self._execute_tool_call(call, tools, monitor) for call in calls]
        )
        for call, output in zip(calls, outputs):
            self.transcript.add_tool_output(call, output)
        return list(outputs)

    @observe(as_type="span")
    async def _execute_tool_call(
        self,
        call: ToolCall,
        tools: dict[str, BaseTool],
        monitor: TurnMonitor | None,
    ) -> str:
        """Execute a single tool call and return its result as text."""
        get_client().update_current_span(
            name=f"tool:{call.name}",
            input=call.arguments,
        )

        tool = tools.get(call.name)
        if tool is None:
            error_result = {"error": f"Tool '{call.name}' not found"}
            get_client().update_current_span(output=error_result, level="ERROR")
            return json.dumps(error_result)

        try:
            result = await tool.execute(call.arguments, monitor=monitor)
        except Exception as e:
            logger.warning("Tool %s failed: %s", call.name, e)
            error_result = {"error": str(e)}
            get_client().update_current_span(output=error_result, level="ERROR")
            return json.dumps(error_result)

        get_client().update_current_span(output=result)
        if isinstance(result, str):
            return result
        return json.dumps(result)


class OpenAISession(Session):
    """
    Session backed by an OpenAI-compatible chat completions endpoint.

    The loop:
    1. Send messages to the model
    2. If the model wants to use tools, execute them
    3. Send tool results back to the model
    4. Repeat until we get a final text response
    """

    def __init__(
        self,
        instructions: str | None = None,
        model: str | None = None,
        name: str | None = None,
        client: AsyncOpenAI | None = None,
        max_iterations: int | None = None,
    ):
        """
        Initialize the session.

        Args:
            instructions: System message setting the model's behavior
            model: Model to use (defaults to GROQ_MODEL env var)
            name: Owner name, used in errors and traces
            client: Pre-built client; one is created from the GROQ settings otherwise
            max_iterations: Model round-trips allowed per response
        """
        super().__init__(instructions=instructions, name=name)
        self.client = client or AsyncOpenAI(
            api_key=config.GROQ_API_KEY, base_url=config.GROQ_API_ENDPOINT
        )
        self.model = model or config.GROQ_MODEL
        self.max_iterations = max_iterations or config.MAX_ITERATIONS
        self.messages: list[dict[str, Any]] = []
        if instructions:
            self.messages.append({"role": "system", "content": instructions})

    @observe(as_type="generation")
    @retry(
        stop=stop_after_attempt(config.RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _call_api(
        self, openai_tools: list[dict[str, Any]] | None
    ) -> ChatCompletionMessage:
        """Make a single API call, retrying transient failures with backoff."""
        get_client().update_current_span(
            name="llm_call",
            input=self.messages,
            metadata={"model": self.model, "tools": openai_tools},
        )
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=self.messages,
            tools=openai_tools,
        )
        message = response.choices[0].message
        get_client().update_current_generation(
            output=message.content,
            usage_details={
                "input": response.usage.prompt_tokens if response.usage else None,
                "output": response.usage.completion_tokens if response.usage else None,
            },
            model=self.model,
        )
        return message

    def _parse_tool_calls(self, message: ChatCompletionMessage) -> list[ToolCall]:
        calls = []
        for tc in message.tool_calls:
            try:
                arguments = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raise ModelInvocationFailed(
                    f"Malformed arguments for tool '{tc.function.name}': {e}",
                    agent=self.name,
                    cause=e,
                ) from e
            calls.append(ToolCall(id=tc.id, name=tc.function.name, arguments=arguments))
        return calls

    async def _respond(
        self,
        prompt: str,
        tools: dict[str, BaseTool],
        monitor: TurnMonitor | None,
    ) -> str:
        openai_tools = [tool.to_openai_format() for tool in tools.values()] or None
        self.messages.append({"role": "user", "content": prompt})

        for _ in range(self.max_iterations):
            message = await self._call_api(openai_tools)

            if not message.tool_calls:
                content = message.content or ""
                self.messages.append({"role": "assistant", "content": content})
                return content

            calls = self._parse_tool_calls(message)

            # Only include necessary fields, the API rejects annotations
            assistant_message: dict[str, Any] = {"role": "assistant"}
            if message.content:
                assistant_message["content"] = message.content
            assistant_message["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": tc.type,
                    "function": {
                        "name": tc.function.name,
                        "arguments": tc.function.arguments,
                    },
                }
                for tc in message.tool_calls
            ]
            self.messages.append(assistant_message)

            outputs = await self._invoke_tools(calls, tools, monitor)
            for call, output in zip(calls, outputs):
                self.messages.append(
                    {"role": "tool", "tool_call_id": call.id, "content": output}
                )

        raise ModelInvocationFailed(
            f"Maximum iterations ({self.max_iterations}) reached without a final response.",
            agent=self.name,
        )

    def reset(self) -> None:
        super().reset()
        self.messages = []
        if self.instructions:
            self.messages.append({"role": "system", "content": self.instructions})

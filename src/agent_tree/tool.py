"""
Tool definitions for AI agents.

A tool is a capability an agent's model can invoke while answering a prompt.
Plain function tools live here; the agent-as-tool variant lives next to Agent.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Type

from pydantic import BaseModel

if TYPE_CHECKING:
    from .monitor import TurnMonitor


class BaseTool(ABC):
    """
    Capability that can be placed in an agent's tool list.

    Subclasses provide `name`, `description` (sent to the LLM for tool
    selection) and `parameters` (a Pydantic model describing the arguments).
    """

    name: str
    description: str
    parameters: Type[BaseModel]

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI's tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.model_json_schema(),
            },
        }

    @abstractmethod
    async def execute(
        self, arguments: dict[str, Any], monitor: "TurnMonitor | None" = None
    ) -> Any:
        """Run the tool with parsed arguments from the model."""


@dataclass
class Tool(BaseTool):
    """
    A plain function tool.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (sent to the LLM)
        parameters: Pydantic BaseModel class describing the input parameters
        func: Python function to execute when the tool is called
    """

    name: str
    description: str
    parameters: Type[BaseModel]
    func: Callable[[dict[str, Any]], Any]

    async def execute(
        self, arguments: dict[str, Any], monitor: "TurnMonitor | None" = None
    ) -> Any:
        """Execute the tool; plain tools do not consume turns."""
        result = self.func(arguments)
        # Support both sync and async tool functions
        if inspect.isawaitable(result):
            return await result
        return result

"""
agent_tree - agents calling agents as tools, under one shared turn budget.
"""

from .agent import Agent, AgentTool, AgentToolParams
from .exceptions import AgentError, ModelInvocationFailed, TurnBudgetExceeded
from .monitor import TurnMonitor
from .session import OpenAISession, Session
from .tool import BaseTool, Tool
from .transcript import EntryKind, ToolCall, Transcript, TranscriptEntry
from .tui import TUI

# Make submodules accessible
from . import tools
from . import subagents

__all__ = [
    "Agent",
    "AgentTool",
    "AgentToolParams",
    "AgentError",
    "ModelInvocationFailed",
    "TurnBudgetExceeded",
    "TurnMonitor",
    "Session",
    "OpenAISession",
    "BaseTool",
    "Tool",
    "EntryKind",
    "ToolCall",
    "Transcript",
    "TranscriptEntry",
    "tools",
    "subagents",
    "TUI",
]

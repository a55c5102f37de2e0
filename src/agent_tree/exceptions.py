"""
Error types raised by agents.

Both concrete errors are recoverable in the best-effort sense: an agent tool
turns them into tool-result text so the calling agent can still answer.
"""

from typing import Any


class AgentError(Exception):
    """
    Base class for errors raised while running an agent.

    Args:
        message: Human-readable description of the failure
        recovery_suggestion: Optional hint on how a caller should carry on
        details: Extra context (agent name, counters, ...)
        cause: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        recovery_suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.recovery_suggestion = recovery_suggestion
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def describe(self) -> str:
        """Render the error as text suitable for a tool result."""
        if self.recovery_suggestion:
            return f"Error: {self.message}\n{self.recovery_suggestion}"
        return f"Error: {self.message.rstrip('.')}."


class TurnBudgetExceeded(AgentError):
    """The shared turn monitor went past its maximum."""

    def __init__(self, max_turn: int, current_turn: int):
        super().__init__(
            "Max Turn for answering user's prompt is exceeded.",
            recovery_suggestion="Please provide a response based on the information you have.",
            details={"max_turn": max_turn, "current_turn": current_turn},
        )
        self.max_turn = max_turn
        self.current_turn = current_turn


class ModelInvocationFailed(AgentError):
    """The underlying model session failed to produce a response."""

    def __init__(
        self,
        message: str,
        agent: str | None = None,
        cause: Exception | None = None,
    ):
        details = {"agent": agent} if agent else {}
        super().__init__(message, details=details, cause=cause)
        self.agent = agent

"""
Turn budget shared by every agent in one top-level request.

A turn is one agent invocation, including any tool calls that happen inside it.
"""

import threading

from .exceptions import TurnBudgetExceeded


class TurnMonitor:
    """
    Counts agent invocations against a fixed maximum.

    One instance is created per top-level request and handed to every agent
    reachable from the top-level agent, so nested agents draw from the same
    budget. The counter never goes down; start a new request to get a new
    budget.
    """

    def __init__(self, max_turn: int):
        if isinstance(max_turn, bool) or not isinstance(max_turn, int) or max_turn < 1:
            raise ValueError(f"max_turn must be a positive integer, got {max_turn!r}")
        self._max_turn = max_turn
        self._current_turn = 0
        self._lock = threading.Lock()

    @property
    def max_turn(self) -> int:
        return self._max_turn

    @property
    def current_turn(self) -> int:
        return self._current_turn

    @property
    def remaining(self) -> int:
        return max(self._max_turn - self._current_turn, 0)

    @property
    def exhausted(self) -> bool:
        return self._current_turn >= self._max_turn

    def check_and_increment(self) -> int:
        """
        Spend one turn.

        The increment stands even when it trips the limit, so a failed
        attempt still counts.

        Returns:
            The turn number that was granted

        Raises:
            TurnBudgetExceeded: If the new count is above max_turn
        """
        with self._lock:
            self._current_turn += 1
            turn = self._current_turn
        if turn > self._max_turn:
            raise TurnBudgetExceeded(max_turn=self._max_turn, current_turn=turn)
        return turn

    def __repr__(self) -> str:
        return f"TurnMonitor(max_turn={self._max_turn}, current_turn={self._current_turn})"

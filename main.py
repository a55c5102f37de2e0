"""
One-shot run of the tutor agents.

The Teacher delegates to the Math and English assistants; all three share
one turn budget. For interactive mode, use main-tui.py instead.

Do: uv run main.py --max_turn 4 --verbose
"""

import asyncio

import fire

from agent_tree import AgentError
from agent_tree.config import configure_logging
from agent_tree.subagents import DEFAULT_MAX_TURN, DEFAULT_PROMPT, build_teacher


def main(prompt: str = DEFAULT_PROMPT, max_turn: int | None = DEFAULT_MAX_TURN, verbose: bool = False):
    """Ask the Teacher one question and print the answer or the error."""
    configure_logging("INFO" if verbose else None)
    teacher = build_teacher()

    print("🤖 Teacher with agent tools: MathAssistant, EnglishAssistant")
    print(f"Max turn: {max_turn if max_turn is not None else 'unbounded'}")
    print("-" * 40)
    try:
        response = asyncio.run(teacher.run(prompt, max_turn=max_turn))
    except AgentError as e:
        print(e.describe())
        return
    print(f"Response: {response}")


if __name__ == "__main__":
    fire.Fire(main)

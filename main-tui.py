"""
Interactive TUI for the tutor agents.

Do: uv run main-tui.py --verbose to see tool calls and their results
if you dont want to see tool calls and their results, do: uv run main-tui.py
Use --max_turn to change the per-message turn budget (default 2).
"""

import fire

from agent_tree import TUI
from agent_tree.config import configure_logging
from agent_tree.subagents import DEFAULT_MAX_TURN, build_teacher


def main(verbose: bool = False, max_turn: int | None = DEFAULT_MAX_TURN):
    configure_logging()
    tui = TUI(agent=build_teacher(), max_turn=max_turn, verbose=verbose)
    tui.run()


if __name__ == "__main__":
    fire.Fire(main)

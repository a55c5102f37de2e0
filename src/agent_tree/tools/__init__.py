"""
Built-in tools for agent_tree.

Import from here for convenience:
    from agent_tree.tools import calculator
    from agent_tree.tools.calculator import calculator_tool
"""

from . import calculator

__all__ = ["calculator"]

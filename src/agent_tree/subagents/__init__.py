"""
Pre-configured agents.

Import from here:
    from agent_tree.subagents import build_teacher
"""

from .tutors import (
    DEFAULT_MAX_TURN,
    DEFAULT_PROMPT,
    build_english_assistant,
    build_math_assistant,
    build_teacher,
)

__all__ = [
    "DEFAULT_MAX_TURN",
    "DEFAULT_PROMPT",
    "build_english_assistant",
    "build_math_assistant",
    "build_teacher",
]

"""
Conversation transcript kept by every session.

The transcript is append-only and ordered. Display code reads it after a run
completes or fails; nothing in the core ever edits an entry.
"""

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, Field


class EntryKind(str, Enum):
    INSTRUCTIONS = "instructions"
    PROMPT = "prompt"
    RESPONSE = "response"
    TOOL_CALLS = "tool_calls"
    TOOL_OUTPUT = "tool_output"


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class TranscriptEntry(BaseModel):
    kind: EntryKind
    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_name: str | None = None
    tool_call_id: str | None = None

    model_config = {"frozen": True}


class Transcript:
    """Ordered, append-only log of a session's entries."""

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> TranscriptEntry:
        return self._entries[index]

    def since(self, index: int) -> tuple[TranscriptEntry, ...]:
        """Entries appended after the first `index` entries."""
        return tuple(self._entries[index:])

    def add_instructions(self, content: str) -> None:
        self._entries.append(TranscriptEntry(kind=EntryKind.INSTRUCTIONS, content=content))

    def add_prompt(self, content: str) -> None:
        self._entries.append(TranscriptEntry(kind=EntryKind.PROMPT, content=content))

    def add_response(self, content: str) -> None:
        self._entries.append(TranscriptEntry(kind=EntryKind.RESPONSE, content=content))

    def add_tool_calls(self, calls: list[ToolCall]) -> None:
        self._entries.append(TranscriptEntry(kind=EntryKind.TOOL_CALLS, tool_calls=list(calls)))

    def add_tool_output(self, call: ToolCall, content: str) -> None:
        self._entries.append(
            TranscriptEntry(
                kind=EntryKind.TOOL_OUTPUT,
                content=content,
                tool_name=call.name,
                tool_call_id=call.id,
            )
        )

    def clear(self, keep_instructions: bool = True) -> None:
        if keep_instructions:
            self._entries = [e for e in self._entries if e.kind is EntryKind.INSTRUCTIONS]
        else:
            self._entries = []

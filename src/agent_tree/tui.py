"""
An interactive terminal UI over a top-level agent.

Every message is one top-level request with its own turn budget. The agent's
conversation history carries over between messages until /reset.
"""

import asyncio
import json

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from .agent import Agent
from .exceptions import AgentError
from .transcript import EntryKind, TranscriptEntry


class TUI:
    """
    Interactive TUI for continuous agent operation.

    Renders the top-level agent's transcript as it grows and supports
    slash commands for reset, help, turn budget and exit.
    """

    def __init__(self, agent: Agent, max_turn: int | None = None, verbose: bool = False):
        """
        Initialize the TUI.

        Args:
            agent: The top-level agent to talk to
            max_turn: Turn budget per message, None for unbounded
            verbose: If True, display tool calls and their outputs
        """
        self.console = Console()
        self.agent = agent
        self.max_turn = max_turn
        self.verbose = verbose

    def _print_header(self) -> None:
        """Print welcome banner."""
        title = Text(f"🤖 {self.agent.name}", style="bold cyan")
        self.console.print(Panel(title, expand=False, border_style="cyan"))
        helpers = ", ".join(agent.name for agent in self.agent.child_agents) or "none"
        self.console.print(Text(f"Agent as tools: {helpers}", style="dim"))
        self.console.print(Text(f"Max turn: {self._budget_label()}", style="dim"))
        self.console.print(
            Text(
                "Type your question or command. Type '/help' for available commands.",
                style="dim italic",
            )
        )
        self.console.print()

    def _budget_label(self) -> str:
        return str(self.max_turn) if self.max_turn is not None else "unbounded"

    def _print_help(self) -> None:
        """Print available commands."""
        self.console.print(Rule("Available Commands", style="cyan"))
        help_text = """
[cyan]/help[/cyan]        Show this help message
[cyan]/reset[/cyan]       Clear conversation history of every agent
[cyan]/verbose[/cyan]     Toggle verbose mode (shows tool calls)
[cyan]/turns N[/cyan]     Set the turn budget per message ('/turns off' for unbounded)
[cyan]/transcript[/cyan]  Show the full transcript
[cyan]/quit[/cyan]        Exit the TUI
[cyan]/exit[/cyan]        Same as /quit
        """.strip()
        self.console.print(help_text)
        self.console.print()

    def _handle_command(self, line: str) -> bool:
        """
        Handle slash commands.

        Args:
            line: The user input line

        Returns:
            True if should quit, False otherwise
        """
        command, _, argument = line.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()

        if command in ("/quit", "/exit"):
            self.console.print(Text("Goodbye!", style="cyan"))
            return True

        if command == "/reset":
            for agent in self.agent.walk():
                agent.reset()
            self.console.print(Text("✓ Conversation history cleared.", style="green"))
            return False

        if command == "/help":
            self._print_help()
            return False

        if command == "/verbose":
            self.verbose = not self.verbose
            status = "enabled" if self.verbose else "disabled"
            self.console.print(Text(f"✓ Verbose mode {status}.", style="green"))
            return False

        if command == "/turns":
            if argument.lower() in ("off", "none"):
                self.max_turn = None
            elif argument.isdigit() and int(argument) > 0:
                self.max_turn = int(argument)
            else:
                self.console.print(Text("Usage: /turns N (N >= 1) or /turns off", style="yellow"))
                return False
            self.console.print(Text(f"✓ Max turn set to {self._budget_label()}.", style="green"))
            return False

        if command == "/transcript":
            for entry in self.agent.transcript:
                self._render_entry(entry, show_tools=True)
            return False

        # Unknown command
        self.console.print(
            Text(f"Unknown command: {line}", style="yellow"),
        )
        self.console.print(Text("Type '/help' for available commands.", style="dim"))
        return False

    def _render_entry(self, entry: TranscriptEntry, show_tools: bool) -> None:
        if entry.kind is EntryKind.PROMPT:
            self.console.print(Panel(Text(entry.content), title="Prompt", border_style="blue", expand=False))
        elif entry.kind is EntryKind.RESPONSE:
            self.console.print(
                Panel(Text(entry.content), title=self.agent.name, border_style="green", expand=False)
            )
        elif entry.kind is EntryKind.TOOL_CALLS and show_tools:
            lines = [
                f"[cyan]- \\[{escape(call.name)}][/cyan]: {escape(json.dumps(call.arguments))}"
                for call in entry.tool_calls
            ]
            self.console.print(
                Panel("\n".join(lines), title="Tool Calls", border_style="yellow", expand=False)
            )
        elif entry.kind is EntryKind.TOOL_OUTPUT and show_tools:
            self.console.print(
                Panel(
                    Text(entry.content, style="dim"),
                    title=f"Tool Output: {entry.tool_name}",
                    border_style="yellow",
                    expand=False,
                )
            )

    def _render_error(self, error: Exception) -> None:
        if isinstance(error, AgentError):
            error_text = error.describe()
        else:
            error_text = f"Error: {error}"
        self.console.print(Panel(Text(error_text), title="Error", border_style="red", style="red"))

    async def _send(self, user_input: str) -> None:
        """
        Send user input to the agent and display what was added to its transcript.

        Args:
            user_input: The user's message
        """
        if self.agent.is_responding:
            self.console.print(Text("The agent is still responding.", style="yellow"))
            return

        self.console.print(Panel(Text(user_input), title="You", border_style="blue", expand=False))
        entries_before = len(self.agent.transcript)
        error: Exception | None = None
        try:
            with self.console.status(f"{self.agent.name} is thinking..."):
                await self.agent.run(user_input, max_turn=self.max_turn)
        except Exception as e:
            error = e

        # The transcript keeps whatever happened before a failure
        for entry in self.agent.transcript.since(entries_before):
            if entry.kind is not EntryKind.PROMPT:
                self._render_entry(entry, show_tools=self.verbose)
        if error is not None:
            self._render_error(error)

        self.console.print()  # Spacing

    async def _loop(self) -> None:
        self._print_header()

        while True:
            try:
                # Get user input without blocking the event loop
                user_input = (await asyncio.to_thread(input, "You: ")).strip()
            except (KeyboardInterrupt, EOFError):
                # Handle Ctrl-C and Ctrl-D gracefully
                self.console.print(Text("\nGoodbye!", style="cyan"))
                break

            # Skip empty input
            if not user_input:
                continue

            # Check for commands
            if user_input.startswith("/"):
                if self._handle_command(user_input):
                    break
                continue

            await self._send(user_input)

    def run(self) -> None:
        """Main TUI loop."""
        try:
            asyncio.run(self._loop())
        except KeyboardInterrupt:
            self.console.print(Text("\nGoodbye!", style="cyan"))

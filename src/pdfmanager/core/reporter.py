"""
User-facing status messages.

The Store never prints directly; it reports through a Reporter so the
console formatting stays in one place and tests can capture messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape


class Level(Enum):
    """Severity of a reported message."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"


@runtime_checkable
class Reporter(Protocol):
    """Anything that can show a leveled message to the user."""

    def report(self, level: Level, message: str) -> None:
        ...


class ConsoleReporter:
    """Render messages with rich markup, colored by level."""

    PREFIXES = {
        Level.INFO: "[blue]INFO:[/blue] ",
        Level.WARN: "[yellow]WARNING:[/yellow] ",
        Level.ERROR: "[red]ERROR:[/red] ",
        Level.SUCCESS: "[green]✓[/green] ",
    }

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def report(self, level: Level, message: str) -> None:
        self.console.print(f"{self.PREFIXES[level]}{escape(message)}")


class RecordingReporter:
    """Keep reported messages in memory instead of printing them."""

    def __init__(self) -> None:
        self.messages: list[tuple[Level, str]] = []

    def report(self, level: Level, message: str) -> None:
        self.messages.append((level, message))

    def at(self, level: Level) -> list[str]:
        """Messages reported at one level, in order."""
        return [message for lvl, message in self.messages if lvl == level]

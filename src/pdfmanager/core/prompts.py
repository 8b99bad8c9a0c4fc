"""
Interactive prompts shared by the store and the CLI.

Everything goes through one rich console so prompts and messages interleave
correctly, and so tests driving the CLI through stdin see the prompt text.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

console = Console()

T = TypeVar("T")

# Asks one question, returns the raw answer
PromptFunc = Callable[[str], str]


def prompt_user(message: str, default: str | None = None) -> str:
    """Ask for a line of text. An empty answer with no default gives ""."""
    answer = Prompt.ask(message, default=default, console=console)
    return answer or ""


def confirm(message: str, default: bool = False, auto_yes: bool = False) -> bool:
    """Ask a yes/no question.

    Args:
        message: Question to ask
        default: Answer used when the user just presses Enter
        auto_yes: Answer yes without asking (for --yes flags)
    """
    if auto_yes:
        console.print(f"{message} [dim](--yes)[/dim]")
        return True
    return Confirm.ask(message, default=default, console=console)


def select_from_list(
    items: Sequence[T],
    message: str = "Select an option",
    display_func: Callable[[T], str] = str,
) -> T | None:
    """Show items numbered from 1 and return the one picked, or None for 'q'."""
    if not items:
        console.print("[yellow]Nothing to choose from[/yellow]")
        return None

    console.print(f"\n{message}:")
    for number, item in enumerate(items, 1):
        console.print(f"  {number}. {escape(display_func(item))}")
    console.print("  q. Cancel")

    choices = [str(n) for n in range(1, len(items) + 1)] + ["q"]
    answer = Prompt.ask("Enter number", choices=choices, show_choices=False, console=console)
    if answer == "q":
        return None
    return items[int(answer) - 1]

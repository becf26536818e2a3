"""Centralized Rich Console management.

All user-facing output goes through here so that catalog text (song
titles, genre names) is never interpreted as Rich markup.
"""

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

_console: Console | None = None


def get_console() -> Console:
    """Get or create the global Rich Console instance."""
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def safe_print(message: str, style: str | None = None) -> None:
    """Print using Rich Console with optional styling.

    Args:
        message: The message to print (may contain Rich markup)
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_console()
    if style:
        console.print(message, style=style)
    else:
        console.print(message)


def print_error(message: str) -> None:
    """Print a failure message; the text is shown literally."""
    safe_print(f"Error: {escape(message)}", style="red")


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    """Ask a yes/no question before a destructive action."""
    if assume_yes:
        return True
    return Confirm.ask(prompt, default=False, console=get_console())

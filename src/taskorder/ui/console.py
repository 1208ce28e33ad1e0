"""Console output formatting utilities for taskorder."""

from __future__ import annotations

import sys
from typing import Iterable, Optional

from ..model import Task


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_plan(self, tasks: Iterable[Task]) -> None:
        """
        Print the execution order to stderr, one task per line, with the
        tasks it waits for (duplicate requires shown once).
        """
        tasks = list(tasks)
        title = f"EXECUTION ORDER ({len(tasks)} task(s))"
        print(f"\n{title}", file=sys.stderr)
        print("-" * len(title), file=sys.stderr)
        for idx, task in enumerate(tasks, start=1):
            line = f"  {idx}. {task.name}"
            if task.requires:
                line += f" (after {', '.join(dict.fromkeys(task.requires))})"
            print(line, file=sys.stderr)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message, file=sys.stderr)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console

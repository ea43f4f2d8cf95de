"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
import re
from typing import Any, Optional

import typer
from rich.console import Console as RichConsole

from phpsorter.cli.config import CLIConfig

MARKUP_PATTERN = re.compile(r"\[/?[a-z ]+\]")


class MachineAwareConsole:
    """
    A Console wrapper that automatically adapts output based on machine mode.
    Acts as a drop-in replacement for rich.console.Console.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        """Print that respects machine mode."""
        if CLIConfig.is_machine_mode():
            for arg in args:
                if isinstance(arg, str):
                    # Remove rich markup
                    plain = MARKUP_PATTERN.sub("", arg).strip()
                    if plain:
                        typer.echo(plain)
                elif hasattr(arg, "__rich__") or hasattr(arg, "__rich_console__"):
                    # Rich renderables have no plain form; use --json instead
                    pass
                elif arg:
                    typer.echo(str(arg))
        else:
            self._rich_console.print(*args, **kwargs)

    def __getattr__(self, name):
        """Delegate all other attributes to the rich console."""
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        typer.echo(json.dumps(data, separators=(',', ':')))
    else:
        typer.echo(json.dumps(data, indent=2))


def structured_error(code: str, message: str, input_value: Optional[str] = None,
                     actionable_fix: Optional[str] = None) -> dict:
    """
    Create a structured error object for machine mode.

    Args:
        code: Error code (e.g., "FILE_NOT_FOUND", "CONFIG_ERROR")
        message: Human-readable error message
        input_value: The input that caused the error
        actionable_fix: Command to fix the issue

    Returns:
        Structured error dictionary
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if input_value:
        error_obj["input"] = input_value
    if actionable_fix:
        error_obj["actionable_fix"] = actionable_fix
    return error_obj


def print_error(code: str, message: str, input_value: Optional[str] = None,
                actionable_fix: Optional[str] = None, as_json: bool = False) -> None:
    """
    Print an error: structured JSON in machine mode (or with --json), red
    text otherwise.
    """
    if CLIConfig.is_machine_mode() or as_json:
        print_json(structured_error(code, message, input_value, actionable_fix), minified=True)
    else:
        _console.print(f"[red]Error: {message}[/red]")
        if actionable_fix:
            _console.print(f"[dim]Try: {actionable_fix}[/dim]")


def get_console() -> MachineAwareConsole:
    """
    Get the console instance for advanced usage.
    Note: Direct console usage should check machine mode.
    """
    return _console

"""Output formatters for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from atompub_oauth.cli.config import OutputFormat

console = Console()
error_console = Console(stderr=True)


def format_output(
    data: dict[str, Any],
    output_format: OutputFormat,
    *,
    title: str | None = None,
) -> None:
    """Format and print output in the specified format.

    Args:
        data: Single record to format
        output_format: Output format (table, json)
        title: Optional title for table output
    """
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(data, default=str))
    else:
        _format_table(data, title)


def _snake_to_title(s: str) -> str:
    """Convert snake_case to Title Case for table headers."""
    return " ".join(word.capitalize() for word in s.split("_"))


def _format_table(data: dict[str, Any], title: str | None) -> None:
    """Format as rich table."""
    columns = list(data.keys())
    table = Table(title=title, show_header=True, header_style="bold")
    for col in columns:
        table.add_column(_snake_to_title(col))
    table.add_row(*[str(data[col]) for col in columns])

    console.print(table)


def mask(secret: str) -> str:
    """Hide all but the last four characters of a secret."""
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")

"""Shared console helpers for backend-quickstart.

All user-visible reporting goes through the module-level Rich ``console``:
status lines, the answers summary, the template check report and the
spinner shown while a project is written.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

if TYPE_CHECKING:
    from .scaffolder.checker import TemplateCheck

console = Console()

_STATUS_STYLES: dict[str, str] = {
    "success": "bold green",
    "error": "bold red",
    "warning": "bold yellow",
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format how long a generation run took.

    Runs are usually sub-second, so those are shown in milliseconds::

        format_duration(0.042) -> "42ms"
        format_duration(3.27)  -> "3.3s"
        format_duration(65.2)  -> "1m 5s"
    """
    if seconds <= 0:
        return "0ms"
    if seconds < 1:
        return f"{round(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def _status(kind: str, message: str) -> None:
    style = _STATUS_STYLES[kind]
    console.print(f"[{style}]{message}[/{style}]")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(title: str, subtitle: str = "") -> None:
    """Print the tool banner as a cyan panel."""
    console.print(
        Panel(
            f"[bold cyan]{title}[/bold cyan]" + (f"\n[dim]{subtitle}[/dim]" if subtitle else ""),
            border_style="cyan",
            expand=False,
        )
    )


def print_success(message: str) -> None:
    _status("success", message)


def print_error(message: str) -> None:
    _status("error", message)


def print_warning(message: str) -> None:
    _status("warning", message)


def print_summary_table(answers: dict[str, str], title: str = "Project Configuration Summary") -> None:
    """Print the collected answers as a setting/value table before generation."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value")

    for setting, value in answers.items():
        table.add_row(setting, value or "[dim]-[/dim]")

    console.print(table)
    console.print()


def print_template_report(results: Iterable[TemplateCheck]) -> int:
    """Print one row per checked template and return how many failed."""
    table = Table(title="Template Validation", show_header=True, header_style="bold cyan")
    table.add_column("Template", no_wrap=True)
    table.add_column("Status")
    table.add_column("Errors")

    failed = 0
    for check in results:
        if not check.ok:
            failed += 1
        status = "[green]ok[/green]" if check.ok else "[red]FAIL[/red]"
        table.add_row(str(check.path), status, "\n".join(check.errors))

    console.print(table)
    return failed


@contextmanager
def generation_spinner(description: str = "Generating project...") -> Iterator[Progress]:
    """Show a transient spinner with elapsed time while the body runs."""
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with progress:
        progress.add_task(description, total=None)
        yield progress

"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from sewdraft.core import Design
from sewdraft.domain import PatternDocument
from sewdraft.utils import DraftStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for batch drafting.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Sewdraft[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a drafting step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_design_info(design: Design) -> None:
    """Print design information.

    Args:
        design: Design being drafted
    """
    console.print(f"  [bold]{design.name}[/bold] v{design.version}")
    console.print(
        f"  {len(design.parts)} parts {SYM_DOT} {len(design.measurements)} measurements "
        f"{SYM_DOT} {len(design.options)} options"
    )


def print_input_info(input_path: str, measurements: int, options: int) -> None:
    """Print input file information.

    Args:
        input_path: Path to the input file
        measurements: Number of measurements supplied
        options: Number of options supplied
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(input_path)
    console.print(line)
    console.print(f"  {measurements} measurements {SYM_DOT} {options} options")


def print_part_table(document: PatternDocument, stats: DraftStats) -> None:
    """Print one row per drafted part.

    Args:
        document: Drafted pattern
        stats: Statistics with per-part timings
    """
    table = Table(box=None, padding=(0, 2), show_edge=False)
    table.add_column("Part", style="bold")
    table.add_column("Points", justify="right")
    table.add_column("Paths", justify="right")
    table.add_column("Time", justify="right")

    slowest = stats.slowest_part if len(stats.part_timings_ms) > 1 else None
    for name, part in document.parts.items():
        duration_ms = stats.part_timings_ms.get(name)
        table.add_row(
            name,
            str(len(part.points)),
            str(len(part.paths)),
            f"{duration_ms:.1f}ms" if duration_ms is not None else "-",
            style="yellow" if name == slowest else None,
        )
    console.print(table)


def print_store_entries(store: dict[str, Any]) -> None:
    """Print exported store entries.

    Args:
        store: Exported store entries
    """
    if not store:
        return
    console.print("\n[bold]Store[/bold]")
    for key, value in store.items():
        if isinstance(value, float):
            shown = f"{value:.2f}"
        elif isinstance(value, list):
            shown = f"{len(value)} entries"
        else:
            shown = str(value)
        console.print(f"  {key:<24} {shown}")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_batch_info(inputs: int, workers: int, is_auto: bool = False) -> None:
    """Print batch configuration.

    Args:
        inputs: Number of input files
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(
        f"  {inputs} inputs {SYM_DOT} {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel"
    )


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    parts: int,
    points: int,
    paths: int,
    macros: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total drafting time in seconds
        parts: Number of parts drafted
        points: Total number of points
        paths: Total number of paths
        macros: Number of macro calls
    """
    time_str = _format_time(total_time_s)

    # Success header
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    # Output file info
    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    # Stats line
    console.print(
        f"  {parts} parts {SYM_DOT} {points} points {SYM_DOT} {paths} paths "
        f"{SYM_DOT} {macros} macros"
    )


def print_batch_summary(drafted: int, errors: int, total_time_s: float) -> None:
    """Print batch summary.

    Args:
        drafted: Number of patterns written
        errors: Number of failed inputs
        total_time_s: Total time in seconds
    """
    error_style = "red" if errors > 0 else "green"
    console.print(
        f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}"
    )
    console.print(
        f"  {drafted} patterns {SYM_DOT} [{error_style}]{errors} errors[/{error_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {escape(message)}")
    if details:
        console.print(f"  {escape(details)}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress drafts")


def print_cancellation_summary(drafted: int) -> None:
    """Print cancellation summary.

    Args:
        drafted: Number of patterns written before cancellation
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {drafted} patterns written")

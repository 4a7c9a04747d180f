"""CLI application entry point for sewdraft.

This module provides the main CLI interface using Typer.
"""

import os
import time
from pathlib import Path
from typing import Annotated, Any

import typer

from sewdraft import __version__
from sewdraft.cli.output import (
    SYM_DOT,
    SYM_OK,
    console,
    create_progress,
    print_batch_info,
    print_batch_summary,
    print_cancellation_notice,
    print_cancellation_summary,
    print_design_info,
    print_error,
    print_header,
    print_input_info,
    print_part_table,
    print_step,
    print_store_entries,
    print_success,
)
from sewdraft.config import DraftConfig, LoggingConfig, SewdraftSettings
from sewdraft.core import Design, Draft, draft_batch
from sewdraft.designs import get_design, list_designs
from sewdraft.domain import PatternDocument
from sewdraft.exceptions import DraftIOError, SewdraftError
from sewdraft.io import PatternWriter, load_draft_input
from sewdraft.utils import DraftLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="sewdraft",
    help="Draft sewing patterns from body measurements.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Sewdraft[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def draft(
    design_name: Annotated[
        str | None,
        typer.Argument(
            metavar="DESIGN",
            help="Name of the design to draft (e.g., tee)",
            show_default=False,
        ),
    ] = None,
    inputs: Annotated[
        list[Path] | None,
        typer.Option(
            "--input",
            "-i",
            help="JSON file with measurements and options (repeat for a batch)",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for a single input (default: {input}-{design}.json)",
        ),
    ] = None,
    complete: Annotated[
        bool,
        typer.Option(
            "--complete/--no-complete",
            help="Add titles, fold lines, grainlines and scale box",
        ),
    ] = True,
    paperless: Annotated[
        bool,
        typer.Option(
            "--paperless",
            help="Add dimension annotations",
        ),
    ] = False,
    sa: Annotated[
        float,
        typer.Option(
            "--sa",
            help="Seam allowance in millimetres (0 = none)",
            min=0.0,
            max=100.0,
        ),
    ] = 0.0,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Fail on store reads of values no earlier part wrote",
        ),
    ] = False,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers for a batch (default: auto)",
            min=1,
        ),
    ] = None,
    show_designs: Annotated[
        bool,
        typer.Option(
            "--list-designs",
            help="List bundled designs and exit",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Validate inputs and show what would be drafted without writing",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Draft a sewing pattern from measurements and options.

    Runs every part of the design in order and writes the pattern (points,
    paths and exported values such as seam lengths) as JSON.

    Example:
        sewdraft tee -i alice.json

    This will create alice-tee.json with the back, front and sleeve.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if show_designs:
        _handle_list_designs(quiet)
        raise typer.Exit(code=0)

    if design_name is None:
        print_error("Missing design name", details="Run with --list-designs to see them.")
        raise typer.Exit(code=1)

    if not inputs:
        print_error(
            "No input file given",
            details="Pass measurements and options with -i/--input.",
        )
        raise typer.Exit(code=1)

    # Validate input files exist
    for input_path in inputs:
        if not input_path.is_file():
            print_error(
                f"Input file not found: {input_path}",
                details=f"The file '{input_path}' does not exist or is not a file.",
            )
            raise typer.Exit(code=1)

    if output is not None and len(inputs) > 1:
        print_error("--output can only be used with a single input")
        raise typer.Exit(code=1)

    # Print header
    if not quiet:
        print_header(__version__)

    # Create settings from CLI arguments
    settings = SewdraftSettings(
        draft=DraftConfig(
            complete=complete,
            paperless=paperless,
            sa=sa,
            strict_store=strict,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )
    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    try:
        design = get_design(design_name)

        if not quiet:
            print_step("Loading design")
            print_design_info(design)

        # Handle --dry-run mode
        if dry_run:
            _handle_dry_run(design, inputs, settings, quiet, verbose)
            raise typer.Exit(code=0)

        if len(inputs) == 1:
            _draft_single(design, inputs[0], output, settings, DraftLogger(logger), quiet, verbose)
        else:
            _draft_many(design, inputs, settings, workers, quiet)

    except DraftIOError as e:
        print_error(f"Could not complete file I/O: {e.reason}")
        raise typer.Exit(code=1)
    except SewdraftError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _draft_single(
    design: Design,
    input_path: Path,
    output: Path | None,
    settings: SewdraftSettings,
    draft_logger: DraftLogger,
    quiet: bool,
    verbose: bool,
) -> None:
    """Draft one input and write its pattern.

    Args:
        design: Design to draft
        input_path: Input file
        output: Output path, or None for the default name
        settings: Draft settings
        draft_logger: Logger collecting statistics
        quiet: Suppress output
        verbose: Show store entries
    """
    draft_input = load_draft_input(input_path)
    draft_input.check_design(design.name)
    if not quiet:
        print_step("Loading input")
        print_input_info(
            str(input_path), len(draft_input.measurements), len(draft_input.options)
        )
        print_step("Drafting")

    document = Draft(design, settings, logger=draft_logger).run(
        draft_input.measurements, draft_input.options
    )
    stats = draft_logger.stats

    output_path = output or PatternWriter.get_pattern_path(input_path, design.name)
    PatternWriter(document, output_path).save()

    if not quiet:
        print_part_table(document, stats)
        if verbose:
            print_store_entries(document.store)
        print_success(
            output_path=str(output_path),
            file_size=_format_file_size(output_path),
            total_time_s=stats.duration_seconds,
            parts=stats.parts_drafted,
            points=stats.points_created,
            paths=stats.paths_created,
            macros=stats.macros_applied,
        )


def _draft_many(
    design: Design,
    inputs: list[Path],
    settings: SewdraftSettings,
    workers: int | None,
    quiet: bool,
) -> None:
    """Draft several inputs in parallel and write one pattern per input.

    Args:
        design: Design to draft
        inputs: Input files
        settings: Draft settings
        workers: Maximum worker processes
        quiet: Suppress output
    """
    requests = {
        str(path): load_draft_input(path).to_request(design.name) for path in inputs
    }
    start = time.time()

    if not quiet:
        actual_workers = workers if workers else os.cpu_count() or 1
        print_step("Drafting")
        print_batch_info(len(requests), actual_workers, is_auto=(workers is None))

    written = 0

    def write_pattern(name: str, data: dict[str, Any]) -> None:
        nonlocal written
        document = PatternDocument.from_dict(data)
        PatternWriter(document, PatternWriter.get_pattern_path(Path(name), design.name)).save()
        written += 1

    try:
        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task(
                    f"Drafting {len(requests)} patterns", total=len(requests)
                )

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                batch = draft_batch(requests, settings, workers, update_progress, write_pattern)
        else:
            batch = draft_batch(requests, settings, workers, result_callback=write_pattern)
    except KeyboardInterrupt:
        if not quiet:
            print_cancellation_notice()
            print_cancellation_summary(drafted=written)
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

    for name, error in batch.errors.items():
        print_error(f"{name}: {error['error']}")

    if not quiet:
        print_batch_summary(written, len(batch.errors), time.time() - start)

    if batch.errors:
        raise typer.Exit(code=1)


def _handle_list_designs(quiet: bool) -> None:
    """Handle --list-designs mode.

    Args:
        quiet: Suppress decoration
    """
    designs = list_designs()
    if not quiet:
        console.print(f"\n[bold]{len(designs)} designs[/bold]\n")
    for design in designs:
        parts = ", ".join(design.part_names)
        console.print(f"  {design.name} v{design.version} {SYM_DOT} {parts}")


def _handle_dry_run(
    design: Design,
    inputs: list[Path],
    settings: SewdraftSettings,
    quiet: bool,
    verbose: bool,
) -> None:
    """Handle --dry-run mode.

    Validates every input against the design without drafting.

    Args:
        design: Design to check against
        inputs: Input files
        settings: Draft settings
        quiet: Suppress output
        verbose: Show resolved options
    """
    if settings.draft.strict_store:
        design.check_order()

    for input_path in inputs:
        draft_input = load_draft_input(input_path)
        draft_input.check_design(design.name)
        design.validate_measurements(draft_input.measurements)
        options = design.resolve_options(draft_input.options)

        if not quiet:
            print_step(f"Checking {input_path.name} (dry run)")
            console.print(f"  Measurements        {len(draft_input.measurements)}")
            console.print(f"  Options overridden  {len(draft_input.options)}")
            console.print(f"  Parts               {', '.join(design.part_names)}")
            if verbose:
                console.print("\n[bold]Options[/bold]")
                for key, value in options.items():
                    console.print(f"  {key:<24} {value}")

    if not quiet:
        console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] – no pattern written")


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "42 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()

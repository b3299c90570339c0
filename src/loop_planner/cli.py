"""
Command-line interface for the loop planner.

Works on loop export files (JSON): check a collection for conflicts, resolve
them, suggest a placement for a new loop, or dump a debug analysis.
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from tabulate import tabulate

from .config import PlannerSettings, load_settings
from .conflict_resolution import LoopConflictResolver, ResolutionOptions
from .health import CollectionHealthReporter
from .models import Loop
from .placement import suggest_non_overlapping_time_range
from .schemas import LoopExportData, parse_loop_payload
from .utils import format_time, setup_logging

logger = logging.getLogger(__name__)


def load_loops(path: str) -> Tuple[LoopExportData, List[Loop]]:
    """Read an export file (or a bare JSON list of loops)."""
    with open(path, "r") as f:
        payload = json.load(f)
    export = parse_loop_payload(payload)
    return export, export.to_loops()


def _settings(ctx: click.Context) -> PlannerSettings:
    return ctx.obj["settings"]


def _fail(message: str, error: Exception) -> None:
    logger.error(f"{message}: {error}")
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option('--log-level', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level')
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='YAML settings file')
@click.pass_context
def main(ctx: click.Context, log_level: str, log_file: Optional[str],
         config_path: Optional[str]) -> None:
    """Loop Planner - detect and resolve conflicts between practice loops."""
    setup_logging(log_level, log_file)
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = load_settings(config_path)
    except (OSError, ValueError) as e:
        _fail("Loading settings failed", e)


@main.command()
@click.argument('loops_file', type=click.Path(exists=True))
@click.option('--duration', type=float, help='Video duration in seconds')
@click.pass_context
def check(ctx: click.Context, loops_file: str, duration: Optional[float]) -> None:
    """Check a loop collection for conflicts."""
    try:
        _, loops = load_loops(loops_file)
    except Exception as e:
        _fail("Reading loops failed", e)
        return

    reporter = CollectionHealthReporter(_settings(ctx))
    conflicts = reporter.detector.detect(loops, duration)
    report = reporter.validate_collection(loops, duration, conflicts)

    click.echo(f"Loops: {len(loops)}")

    if conflicts.overlapping:
        rows = [
            [o.loop1.name, o.loop2.name, format_time(o.overlap_start),
             format_time(o.overlap_end), f"{o.overlap_duration:.2f}s"]
            for o in conflicts.overlapping
        ]
        click.echo("\n" + tabulate(
            rows, headers=["Loop", "Overlaps", "From", "To", "Overlap"],
            tablefmt="grid"))

    for title, items in (("Critical", report.critical_issues),
                         ("Warning", report.warnings),
                         ("Suggestion", report.suggestions)):
        for item in items:
            click.echo(f"{title}: {item}")

    if report.is_valid:
        click.echo("Collection is valid")
    else:
        sys.exit(1)


@main.command()
@click.argument('loops_file', type=click.Path(exists=True))
@click.option('--duration', type=float, help='Video duration in seconds')
@click.option('--output', type=click.Path(), help='Write resolved loops here')
@click.option('--no-remove-invalid', is_flag=True, help='Keep loops with invalid times')
@click.option('--no-trim', is_flag=True, help='Do not trim loops to the video duration')
@click.option('--no-rename', is_flag=True, help='Do not rename duplicate names')
@click.option('--no-adjust', is_flag=True, help='Do not reposition overlapping loops')
@click.pass_context
def resolve(
    ctx: click.Context,
    loops_file: str,
    duration: Optional[float],
    output: Optional[str],
    no_remove_invalid: bool,
    no_trim: bool,
    no_rename: bool,
    no_adjust: bool,
) -> None:
    """Resolve conflicts in a loop collection."""
    try:
        export, loops = load_loops(loops_file)
    except Exception as e:
        _fail("Reading loops failed", e)
        return

    options = ResolutionOptions(
        remove_invalid=not no_remove_invalid,
        trim_to_video_duration=not no_trim,
        rename_duplicates=not no_rename,
        adjust_overlaps=not no_adjust,
    )
    result = LoopConflictResolver(options, _settings(ctx)).resolve(loops, duration)

    if result.modifications:
        rows = [[m.type.value, m.original.name, m.reason] for m in result.modifications]
        click.echo(tabulate(rows, headers=["Change", "Loop", "Reason"], tablefmt="grid"))
    else:
        click.echo("No conflicts to resolve")

    click.echo(f"Kept {len(result.resolved_loops)} loop(s), "
               f"removed {len(result.removed_loops)}")

    if output:
        resolved = LoopExportData.from_loops(
            result.resolved_loops, export.video_id, export.video_title)
        Path(output).write_text(resolved.model_dump_json(by_alias=True, indent=2))
        click.echo(f"Resolved loops saved to: {output}")


@main.command()
@click.argument('loops_file', type=click.Path(exists=True))
@click.option('--start', required=True, type=float, help='Desired start (seconds)')
@click.option('--length', required=True, type=float, help='Loop length (seconds)')
@click.option('--duration', type=float, help='Video duration in seconds')
def suggest(loops_file: str, start: float, length: float,
            duration: Optional[float]) -> None:
    """Suggest a non-overlapping placement for a new loop."""
    try:
        _, loops = load_loops(loops_file)
    except Exception as e:
        _fail("Reading loops failed", e)
        return

    placement = suggest_non_overlapping_time_range(start, length, loops, duration)
    if placement is None:
        click.echo("No placement available")
        return

    click.echo(f"Suggested: {format_time(placement.start_time)} - "
               f"{format_time(placement.end_time)} "
               f"({placement.start_time}s - {placement.end_time}s)")


@main.command()
@click.argument('loops_file', type=click.Path(exists=True))
@click.option('--duration', type=float, help='Video duration in seconds')
@click.pass_context
def debug(ctx: click.Context, loops_file: str, duration: Optional[float]) -> None:
    """Print a debug analysis of a loop collection as JSON."""
    try:
        _, loops = load_loops(loops_file)
    except Exception as e:
        _fail("Reading loops failed", e)
        return

    analysis = CollectionHealthReporter(_settings(ctx)).analyze_for_debug(loops, duration)
    click.echo(json.dumps(analysis.to_dict(), indent=2, default=str))


if __name__ == '__main__':
    main()

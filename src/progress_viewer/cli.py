"""Main CLI entry point for Progress Viewer."""

import sys
import time
import logging
from pathlib import Path
from typing import Optional
from concurrent.futures import ThreadPoolExecutor

import click
from rich.console import Console

from progress_viewer import __version__
from progress_viewer.core.context import CancellationContext
from progress_viewer.core.errors import ProgressError
from progress_viewer.core.tracker import ProgressTracker
from progress_viewer.ui.text_reporter import LEGEND_PROGRESS_BAR, TextReporter
from progress_viewer.utils.config import Config

# Configure logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

console = Console(stderr=True)


def setup_config(config_path: Optional[Path] = None) -> Config:
    """Setup and return configuration instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Configuration instance
    """
    return Config(config_path)


def build_reporter(
    config: Config,
    style: Optional[str],
    legend: Optional[str],
    precision: Optional[int],
    width: Optional[int]
) -> TextReporter:
    """Build a text reporter from config, overridden by command-line options."""
    reporter = config.build_reporter()
    if style == "bar":
        reporter = reporter.with_legend(LEGEND_PROGRESS_BAR)
    if legend is not None:
        # allow "\r" and "\n" to be typed on the command line
        reporter = reporter.with_legend(legend.replace("\\r", "\r").replace("\\n", "\n"))
    if precision is not None:
        reporter = reporter.with_float_precision(precision)
    if width is not None:
        reporter = reporter.with_progress_bar_width(width)
    return reporter


def run_simulated_task(tracker: ProgressTracker, delay: float, workers: int) -> None:
    """Process tracker.total fake items, sleeping delay seconds per item.

    Args:
        tracker: Started tracker receiving progress
        delay: Seconds spent on each item
        workers: Number of concurrent worker threads
    """
    def work_item(_: int) -> None:
        time.sleep(delay)
        tracker.add(1)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        list(executor.map(work_item, range(tracker.total)))


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(verbose: bool) -> None:
    """Progress Viewer - progress reporting for long-running tasks."""
    if verbose:
        console.print(f"[bold green]Progress Viewer v{__version__}[/bold green]")
        console.print("Verbose mode enabled")
        logging.getLogger().setLevel(logging.INFO)


@main.command("demo")
@click.option("--total", default=360, type=int, help="Number of simulated work items")
@click.option("--delay", default=0.1, type=float, help="Seconds spent on each item")
@click.option("--workers", default=1, type=int, help="Number of concurrent worker threads")
@click.option("--tasks", default=1, type=int, help="Run the simulated job this many times")
@click.option("--interval", type=float, help="Seconds between progress reports")
@click.option("--style", type=click.Choice(["default", "bar"]), help="Built-in legend to use")
@click.option("--legend", help="Custom legend, e.g. '{done}/{total} {eta}\\r'")
@click.option("--precision", type=int, help="Digits after the decimal point")
@click.option("--width", type=int, help="Progress bar width including brackets")
@click.option("--config", "config_path", type=click.Path(), help="Path to JSON config file")
def demo_command(
    total: int,
    delay: float,
    workers: int,
    tasks: int,
    interval: Optional[float],
    style: Optional[str],
    legend: Optional[str],
    precision: Optional[int],
    width: Optional[int],
    config_path: Optional[str]
) -> None:
    """Simulate a long-running job and report its progress."""
    if workers <= 0:
        console.print("[red]Error: --workers must be positive[/red]")
        sys.exit(1)

    try:
        config = setup_config(Path(config_path) if config_path else None)
        reporter = build_reporter(config, style, legend, precision, width)
        report_interval = interval if interval is not None else config.report_interval

        for task_number in range(1, tasks + 1):
            console.print(f"[bold blue]Executing long task{task_number}...[/bold blue]")

            # fresh reporter per task so line state does not carry over
            tracker = ProgressTracker(
                total,
                report_interval=report_interval,
                reporter=reporter.with_output(reporter.output)
            )
            ctx = CancellationContext()
            tracker.start(ctx)
            try:
                run_simulated_task(tracker, delay, workers)
            finally:
                ctx.cancel()
                tracker.wait()

        console.print("[green]✓ Done[/green]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        sys.exit(130)
    except (ProgressError, ValueError) as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()

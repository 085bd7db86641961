"""CLI commands for Pomodoro Cycle using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from pomodoro_cycle import __version__
from pomodoro_cycle.core.config import DEFAULT_CONFIG_DIR, Config, get_config
from pomodoro_cycle.timer import (
    ManualScheduler,
    Phase,
    PomodoroError,
    PomodoroTimer,
)
from pomodoro_cycle.timer.phase import coerce_phase

# Initialize Typer app
app = typer.Typer(
    name="pomodoro-cycle",
    help="Pomodoro timer cycling focus sessions, short breaks and long breaks.",
    add_completion=False,
)

console = Console()


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def format_offset(seconds: float) -> str:
    """Format an offset from now as +H:MM."""
    hours, rest = divmod(int(seconds) // 60, 60)
    return f"+{hours}:{rest:02d}"


def _load_config(config_path: Path | None) -> Config:
    try:
        if config_path is None:
            return get_config()
        return Config.load(config_path)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)


def _initial_phase(phase: str | None, config: Config) -> Phase:
    try:
        return coerce_phase(phase or config.initial_phase)
    except PomodoroError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


async def run_sessions(timer: PomodoroTimer, sessions: int) -> int:
    """Run ``sessions`` consecutive sessions, showing a progress bar for each."""
    finished = asyncio.Event()
    timer.subscribe(lambda phase: finished.set())
    timer.subscribe(lambda phase: console.print(f"[green]{phase.label} complete![/green]"))

    completed = 0
    try:
        for _ in range(sessions):
            finished.clear()
            timer.start()
            total = timer.time_remaining

            with Progress(
                TextColumn("[bold]{task.description}"),
                BarColumn(),
                TextColumn("{task.fields[remaining]}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task(
                    timer.phase.label,
                    total=total,
                    remaining=timer.state.time_remaining_display,
                )
                while not finished.is_set():
                    progress.update(
                        task,
                        completed=total - timer.time_remaining,
                        remaining=timer.state.time_remaining_display,
                    )
                    try:
                        await asyncio.wait_for(finished.wait(), timeout=1)
                    except asyncio.TimeoutError:
                        pass

            completed += 1
            if completed < sessions:
                console.print(f"Up next: [cyan]{timer.next_phase.label}[/cyan]")
    finally:
        timer.stop()

    return completed


@app.command()
def run(
    sessions: int = typer.Option(
        1,
        "--sessions",
        "-s",
        min=1,
        help="Number of consecutive sessions to run",
    ),
    phase: str = typer.Option(
        None,
        "--phase",
        "-p",
        help="Phase to start in (focus, short_break, long_break)",
    ),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config YAML file",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Run Pomodoro sessions in the foreground.

    Examples:
        pomodoro-cycle run              # one focus session
        pomodoro-cycle run -s 8         # a full cycle with breaks
        pomodoro-cycle run -p long_break
    """
    config = _load_config(config_path)
    setup_logging(log_level or config.log_level, config.log_file)

    timer = PomodoroTimer(config.timer, _initial_phase(phase, config))

    console.print(f"[green]Starting {timer.phase.label}[/green] ({sessions} session(s))")
    console.print("Press Ctrl+C to stop\n")

    try:
        completed = asyncio.run(run_sessions(timer, sessions))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        completed = None
    except PomodoroError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if completed is not None:
        console.print(f"\n[bold]Sessions completed:[/bold] {completed}")
    console.print(f"Pomodoros toward long break: {timer.pomodoro_count}")


@app.command()
def plan(
    count: int = typer.Option(
        8,
        "--count",
        "-n",
        min=1,
        help="Number of sessions to preview",
    ),
    phase: str = typer.Option(
        None,
        "--phase",
        "-p",
        help="Phase to start in (focus, short_break, long_break)",
    ),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config YAML file",
    ),
) -> None:
    """Preview the upcoming sequence of phases."""
    config = _load_config(config_path)

    scheduler = ManualScheduler()
    timer = PomodoroTimer(config.timer, _initial_phase(phase, config), scheduler=scheduler)

    table = Table(title="Upcoming Sessions", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Phase")
    table.add_column("Minutes", justify="right")
    table.add_column("Starts")

    try:
        for index in range(1, count + 1):
            starts_at = scheduler.now()
            timer.start()
            table.add_row(
                str(index),
                timer.phase.label,
                f"{timer.time_remaining / 60:g}",
                format_offset(starts_at),
            )
            scheduler.advance(timer.time_remaining)
    except PomodoroError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(table)


@app.command()
def config_show(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config YAML file",
    ),
) -> None:
    """Show current configuration."""
    config = _load_config(config_path)
    timer = config.timer

    table = Table(title="Pomodoro Cycle Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("[bold]Timer[/bold]", "")
    table.add_row("  Focus", f"{timer.focus.duration} min")
    table.add_row("  Short Break", f"{timer.short_break.duration} min")
    table.add_row("  Long Break", f"{timer.long_break.duration} min")
    interval = timer.long_break.interval
    table.add_row(
        "  Long Break Every",
        f"{interval} pomodoros" if interval else "[yellow]Disabled[/yellow]",
    )
    table.add_row("  Initial Phase", config.initial_phase)

    table.add_row("[bold]Logging[/bold]", "")
    table.add_row("  Level", config.log_level)
    table.add_row("  File", str(config.log_file) if config.log_file else "[dim]None[/dim]")

    console.print(table)


@app.command()
def config_init(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Where to write the config YAML file",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a config file with the default settings."""
    config_path = config_path or DEFAULT_CONFIG_DIR / "config.yaml"
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    # Built without settings sources so environment overrides are not written out
    Config.model_construct().save(config_path)
    console.print(f"[green]Config written to {config_path}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Pomodoro Cycle v{__version__}")


@app.callback()
def main_callback() -> None:
    """Pomodoro Cycle - focus sessions with short and long breaks."""
    pass


if __name__ == "__main__":
    app()

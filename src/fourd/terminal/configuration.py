# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from fourd import configuration
from fourd.repository.configuration import CONFIGURATION_REPO
from fourd.terminal.custom_typer import AliasedTyperGroup
from fourd.view.util import format_color

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("config_path", str(configuration.APP_CONFIG_PATH))
    table.add_row("tick_seconds", str(config["tick_seconds"]))
    table.add_row("playback_speed", str(config["playback_speed"]))
    table.add_row("mode", config["mode"])
    table.add_row("visualization_style", config["visualization_style"])
    table.add_row(
        "highlight_critical_path",
        "✓ Enabled" if config["highlight_critical_path"] else "✗ Disabled",
    )
    table.add_row("refresh_interval_seconds", str(config["refresh_interval_seconds"]))
    table.add_row("critical_float_epsilon", str(config["critical_float_epsilon"]))
    table.add_row("log_level", config["log_level"])
    table.add_row("schedule_path", config["schedule_path"] or "None")

    console.print(table)

    console.print("\n[bold]Palette[/bold]")
    palette = CONFIGURATION_REPO.get_palette()
    palette_table = Table()
    palette_table.add_column("State", style="cyan")
    palette_table.add_column("Color")
    for key, color in palette.items():
        palette_table.add_row(key, format_color(color))
    console.print(palette_table)


@app.command("set, s")
def set(
    tick_seconds: Annotated[
        Optional[float],
        typer.Option("--tick-seconds", help="Seconds per simulated day at speed 1"),
    ] = None,
    playback_speed: Annotated[
        Optional[float],
        typer.Option("--playback-speed", help="Default playback speed multiplier"),
    ] = None,
    refresh_interval_seconds: Annotated[
        Optional[float],
        typer.Option("--refresh-interval", help="Seconds between schedule reloads"),
    ] = None,
    highlight_critical_path: Annotated[
        Optional[bool],
        typer.Option(
            "--highlight-critical-path/--no-highlight-critical-path",
            help="Enable/disable critical path highlighting by default",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    schedule_path: Annotated[
        Optional[str],
        typer.Option("--schedule-path", help="Schedule used when none is given"),
    ] = None,
    remove_schedule_path: Annotated[
        bool,
        typer.Option("--remove-schedule-path", help="Forget the default schedule"),
    ] = False,
) -> None:
    """Update configuration settings."""
    try:
        CONFIGURATION_REPO.update_config(
            tick_seconds=tick_seconds,
            playback_speed=playback_speed,
            refresh_interval_seconds=refresh_interval_seconds,
            highlight_critical_path=highlight_critical_path,
            log_level=log_level,
            schedule_path=schedule_path,
            remove_schedule_path=remove_schedule_path,
        )
    except ValueError as e:
        CONFIGURATION_REPO.reload()
        raise typer.BadParameter(str(e))
    CONFIGURATION_REPO.flush()
    view()

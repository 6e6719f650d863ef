# SPDX-License-Identifier: MIT

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from fourd.errors import CycleError, ScheduleLoadError
from fourd.logger import configure_logging
from fourd.model.schedule import ScheduleSnapshot
from fourd.model.simulation import (
    SIMULATION_MODES,
    VISUALIZATION_STYLES,
    SimulationMode,
    VisualizationStyle,
)
from fourd.playback.controller import TimelineController
from fourd.playback.session import SimulationSession
from fourd.repository.configuration import CONFIGURATION_REPO
from fourd.repository.schedule import ScheduleRepository
from fourd.service.critical_path import calculate_critical_path
from fourd.service.engine import ProgressVisibilityEngine
from fourd.service.timeframe import milestones as schedule_milestones
from fourd.service.timeframe import project_timeframe
from fourd.terminal import configuration
from fourd.terminal.custom_typer import AliasedTyperGroup
from fourd.terminal.parse import parse_date
from fourd.view.critical_path import critical_path_view, milestones_view
from fourd.view.frame import frame_view
from fourd.view.playback import print_playback_line
from fourd.viewer.recording import RecordingAdapter

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="fourd - 4D construction schedule simulation",
    no_args_is_help=True,
)
app.add_typer(configuration.app, name="config, c")

ScheduleArgument = Annotated[
    Optional[Path],
    typer.Argument(help="Schedule YAML file (defaults to the configured schedule_path)"),
]


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output"),
    ] = False,
) -> None:
    """
    fourd - 4D construction schedule simulation

    Global options that apply to all commands.
    """
    configure_logging("DEBUG" if verbose else CONFIGURATION_REPO.config["log_level"])


def _load_schedule(schedule: Optional[Path]) -> tuple[ScheduleRepository, ScheduleSnapshot]:
    if schedule is None:
        configured = CONFIGURATION_REPO.config["schedule_path"]
        if configured is None:
            raise typer.BadParameter("no schedule given and no schedule_path configured")
        schedule = Path(configured)

    repository = ScheduleRepository(schedule)
    try:
        return repository, repository.load()
    except ScheduleLoadError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _mode(mode: Optional[str]) -> SimulationMode:
    if mode is None:
        return CONFIGURATION_REPO.config["mode"]
    if mode not in SIMULATION_MODES:
        raise typer.BadParameter(f"mode must be one of {', '.join(SIMULATION_MODES)}")
    return mode  # type: ignore[return-value]


def _style(style: Optional[str]) -> VisualizationStyle:
    if style is None:
        return CONFIGURATION_REPO.config["visualization_style"]
    if style not in VISUALIZATION_STYLES:
        raise typer.BadParameter(
            f"style must be one of {', '.join(VISUALIZATION_STYLES)}"
        )
    return style  # type: ignore[return-value]


def _engine(snapshot: ScheduleSnapshot) -> ProgressVisibilityEngine:
    config = CONFIGURATION_REPO.config
    return ProgressVisibilityEngine(
        snapshot["activities"],
        snapshot["links"],
        palette=CONFIGURATION_REPO.get_palette(),
        float_epsilon=config["critical_float_epsilon"],
    )


@app.command("frame, f")
def frame(
    schedule: ScheduleArgument = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Simulated date (YYYY-MM-DD, today, or day offset)"),
    ] = None,
    mode: Annotated[
        Optional[str],
        typer.Option("--mode", "-m", help="planned or actual"),
    ] = None,
    style: Annotated[
        Optional[str],
        typer.Option("--style", "-s", help="element-count, opacity or color-gradient"),
    ] = None,
    critical: Annotated[
        Optional[bool],
        typer.Option("--critical/--no-critical", help="Highlight the critical path"),
    ] = None,
    elements: Annotated[
        bool,
        typer.Option("--elements/--no-elements", help="List every linked element"),
    ] = True,
) -> None:
    """Compute and display the frame for one date."""
    config = CONFIGURATION_REPO.config
    repository, snapshot = _load_schedule(schedule)
    engine = _engine(snapshot)

    current_date = parse_date(date)
    if current_date is None:
        timeframe = project_timeframe(snapshot["activities"], snapshot["links"])
        if timeframe is None:
            raise typer.BadParameter("schedule has no dates, pass --date")
        current_date = timeframe[0]

    visibility_frame = engine.compute_frame(
        current_date,
        _mode(mode),
        _style(style),
        config["highlight_critical_path"] if critical is None else critical,
    )
    frame_view(repository.path.name, visibility_frame, engine.palette, elements)


@app.command("critical-path, cp")
def critical_path(schedule: ScheduleArgument = None) -> None:
    """Display activity timings and the critical path."""
    repository, snapshot = _load_schedule(schedule)
    try:
        result = calculate_critical_path(
            snapshot["activities"], CONFIGURATION_REPO.config["critical_float_epsilon"]
        )
    except CycleError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    critical_path_view(repository.path.name, snapshot["activities"], result)


@app.command("milestones, ms")
def milestones(schedule: ScheduleArgument = None) -> None:
    """List activity start dates in order, for jumping along the timeline."""
    repository, snapshot = _load_schedule(schedule)
    milestones_view(repository.path.name, schedule_milestones(snapshot["activities"]))


async def _no_wait(_: float) -> None:
    await asyncio.sleep(0)


@app.command("play, p")
def play(
    schedule: ScheduleArgument = None,
    speed: Annotated[
        Optional[float],
        typer.Option("--speed", help="Playback speed multiplier"),
    ] = None,
    from_date: Annotated[
        Optional[str],
        typer.Option("--from", help="First simulated date"),
    ] = None,
    to_date: Annotated[
        Optional[str],
        typer.Option("--to", help="Last simulated date"),
    ] = None,
    mode: Annotated[
        Optional[str],
        typer.Option("--mode", "-m", help="planned or actual"),
    ] = None,
    style: Annotated[
        Optional[str],
        typer.Option("--style", "-s", help="element-count, opacity or color-gradient"),
    ] = None,
    critical: Annotated[
        Optional[bool],
        typer.Option("--critical/--no-critical", help="Highlight the critical path"),
    ] = None,
    no_wait: Annotated[
        bool,
        typer.Option("--no-wait", help="Advance days without waiting between ticks"),
    ] = False,
    watch: Annotated[
        bool,
        typer.Option("--watch", help="Reload the schedule while playing"),
    ] = False,
) -> None:
    """Play the simulation day by day against a headless viewer."""
    config = CONFIGURATION_REPO.config
    repository, snapshot = _load_schedule(schedule)
    engine = _engine(snapshot)

    timeframe = project_timeframe(snapshot["activities"], snapshot["links"])
    if timeframe is None:
        Console(stderr=True).print("[red]schedule has no dates to play[/red]")
        raise typer.Exit(1)
    start = parse_date(from_date) or timeframe[0]
    end = parse_date(to_date) or timeframe[1]
    if end < start:
        raise typer.BadParameter(f"--to {end} is before --from {start}")

    try:
        controller = TimelineController(
            (start, end),
            mode=_mode(mode),
            style=_style(style),
            highlight_critical_path=(
                config["highlight_critical_path"] if critical is None else critical
            ),
            speed=config["playback_speed"] if speed is None else speed,
            tick_seconds=config["tick_seconds"],
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    console = Console()
    session = SimulationSession(
        engine,
        controller,
        sleep=_no_wait if no_wait else asyncio.sleep,
        keep_timeframe=from_date is not None or to_date is not None,
    )

    def print_frame(_: TimelineController) -> None:
        if session.last_frame is not None:
            print_playback_line(console, controller, session.last_frame, engine.palette)

    async def run_session() -> None:
        scene = set(engine.link_index.element_ids())
        scene.update(element["stable_id"] for element in snapshot["elements"])
        await session.mount(RecordingAdapter(scene))
        print_frame(controller)
        # registered after the session so the frame is already rendered
        controller.subscribe(print_frame)
        if watch:
            session.start_polling(
                repository,
                config["refresh_interval_seconds"],
                fingerprint=snapshot["fingerprint"],
            )
        try:
            await session.play()
        finally:
            await session.close()

    asyncio.run(run_session())


def run() -> None:
    app()

# SPDX-License-Identifier: MIT

from rich.console import Console

from fourd.color import Palette
from fourd.model.frame import VisibilityFrame, visible_ids
from fourd.playback.controller import TimelineController
from fourd.time import date_to_display_str
from fourd.view.util import format_state


def playback_line(
    controller: TimelineController, frame: VisibilityFrame, palette: Palette
) -> str:
    """One line per simulated day: date, day counter, visible count, active tasks."""
    active = [
        f"{summary['activity_id']} {format_state(summary['state'], palette.for_state(summary['state']))}"
        for summary in frame["activities"]
        if 0 < summary["timeline_progress"] < 1
    ]
    return (
        f"{date_to_display_str(frame['date'])}  "
        f"Day {controller.day_index} of {controller.total_days}  "
        f"{controller.percent_complete:5.1f}%  "
        f"{len(visible_ids(frame)):>4} visible"
        + (f"  {', '.join(active)}" if active else "")
    )


def print_playback_line(
    console: Console,
    controller: TimelineController,
    frame: VisibilityFrame,
    palette: Palette,
) -> None:
    console.print(playback_line(controller, frame, palette), highlight=False)

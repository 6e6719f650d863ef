# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from fourd.color import Palette
from fourd.model.frame import VisibilityFrame, visible_ids
from fourd.time import date_to_display_str
from fourd.view.header import header
from fourd.view.util import format_color, format_percent, format_state


def frame_view(
    schedule_name: str,
    frame: VisibilityFrame,
    palette: Palette,
    show_elements: bool = True,
) -> None:
    """Display the activity summary and, optionally, every element of a frame."""
    header(
        schedule_name,
        f"{date_to_display_str(frame['date'])} ({frame['mode']}, {frame['style']})",
    )

    activities_table = Table(box=box.SIMPLE)
    activities_table.add_column("activity")
    activities_table.add_column("name")
    activities_table.add_column("state")
    activities_table.add_column("progress", justify="right")
    activities_table.add_column("visible", justify="right")
    activities_table.add_column("critical")

    for summary in frame["activities"]:
        activities_table.add_row(
            summary["activity_id"],
            summary["name"],
            format_state(summary["state"], palette.for_state(summary["state"])),
            format_percent(summary["timeline_progress"]),
            f"{summary['visible_count']}/{summary['total_count']}",
            "✓" if summary["critical"] else "",
        )

    console = Console()
    console.print(activities_table)

    if show_elements:
        elements_table = Table(box=box.SIMPLE)
        elements_table.add_column("element")
        elements_table.add_column("visible")
        elements_table.add_column("color")
        elements_table.add_column("opacity", justify="right")
        for element_id, appearance in sorted(frame["elements"].items()):
            elements_table.add_row(
                element_id,
                "✓" if appearance["visible"] else "",
                format_color(appearance["color"]) if appearance["visible"] else "",
                f"{appearance['opacity']:.2f}" if appearance["visible"] else "",
            )
        console.print(elements_table)

    console.print(f"{len(visible_ids(frame))} of {len(frame['elements'])} elements visible")

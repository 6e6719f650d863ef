# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from fourd.model.activity import Activity
from fourd.model.critical_path import CriticalPathResult
from fourd.service.timeframe import Milestone
from fourd.time import date_to_display_str
from fourd.view.header import header
from fourd.view.util import format_days


def critical_path_view(
    schedule_name: str,
    activities: list[Activity],
    result: CriticalPathResult,
) -> None:
    """
    Display earliest/latest timings and float for every activity.

    Days are counted from project start.
    """
    header(schedule_name, "critical path")

    table = Table(box=box.SIMPLE)
    for column in ("activity", "name", "ES", "EF", "LS", "LF", "float", "critical"):
        table.add_column(column, justify="left" if column in ("activity", "name") else "right")

    for activity in activities:
        timing = result["timings"].get(activity["id"])
        if timing is None:
            continue
        critical = activity["id"] in result["critical_ids"]
        row_style = "bold red" if critical else None
        table.add_row(
            activity["id"],
            activity["name"],
            format_days(timing["earliest_start"]),
            format_days(timing["earliest_finish"]),
            format_days(timing["latest_start"]),
            format_days(timing["latest_finish"]),
            format_days(timing["total_float"]),
            "✓" if critical else "",
            style=row_style,
        )

    console = Console()
    console.print(table)
    console.print(f"Project duration: {format_days(result['project_duration'])} days")


def milestones_view(schedule_name: str, milestones: list[Milestone]) -> None:
    header(schedule_name, "milestones")

    table = Table(box=box.SIMPLE)
    table.add_column("date")
    table.add_column("activity")
    table.add_column("name")
    for milestone in milestones:
        table.add_row(
            date_to_display_str(milestone["date"]),
            milestone["activity_id"],
            milestone["name"],
        )

    console = Console()
    console.print(table)

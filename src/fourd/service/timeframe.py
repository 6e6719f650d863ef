# SPDX-License-Identifier: MIT

from typing import Iterable, Optional, TypedDict

import pendulum

from fourd.model.activity import Activity
from fourd.model.entity_id import ActivityId
from fourd.model.link import ElementActivityLink


class Milestone(TypedDict):
    activity_id: ActivityId
    name: str
    date: pendulum.Date


def project_timeframe(
    activities: Iterable[Activity],
    links: Iterable[ElementActivityLink] = (),
) -> Optional[tuple[pendulum.Date, pendulum.Date]]:
    """
    Earliest and latest date found anywhere in the schedule.

    Planned, actual and link override dates all count. Returns None when the
    schedule carries no usable date at all.
    """
    dates: list[pendulum.Date] = []
    for activity in activities:
        for key in ("planned_start", "planned_end", "actual_start", "actual_end"):
            value = activity[key]  # type: ignore[literal-required]
            if value is not None:
                dates.append(value)
    for link in links:
        if link["override_start"] is not None:
            dates.append(link["override_start"])
        if link["override_end"] is not None:
            dates.append(link["override_end"])

    if not dates:
        return None
    return min(dates), max(dates)


def milestones(activities: Iterable[Activity]) -> list[Milestone]:
    result: list[Milestone] = [
        {
            "activity_id": activity["id"],
            "name": activity["name"],
            "date": activity["planned_start"],
        }
        for activity in activities
        if activity["planned_start"] is not None
    ]
    result.sort(key=lambda milestone: (milestone["date"], milestone["activity_id"]))
    return result

# SPDX-License-Identifier: MIT

from fractions import Fraction
from typing import Optional, TypeAlias

import pendulum

from fourd.model.activity import Activity
from fourd.model.link import ElementActivityLink
from fourd.model.simulation import DrawState, SimulationMode
from fourd.time import days_between

Window: TypeAlias = tuple[Optional[pendulum.Date], Optional[pendulum.Date]]

NO_WINDOW: Window = (None, None)


def planned_window(
    activity: Activity, link: Optional[ElementActivityLink] = None
) -> Window:
    start = activity["planned_start"]
    end = activity["planned_end"]
    if link is not None:
        if link["override_start"] is not None:
            start = link["override_start"]
        if link["override_end"] is not None:
            end = link["override_end"]
    return start, end


def effective_window(
    activity: Activity,
    mode: SimulationMode,
    link: Optional[ElementActivityLink] = None,
) -> Window:
    """
    The (start, end) a link's element is timed against.

    Planned mode uses the link override or the activity's planned dates. Actual
    mode prefers the activity's actual dates field by field and falls back to
    the planned ones. A window that ends before it starts is unusable, except
    when an actual start is paired with a planned end: the activity started
    late and its end collapses onto the start.
    """
    start, end = planned_window(activity, link)
    if mode == "actual":
        if activity["actual_start"] is not None:
            start = activity["actual_start"]
        if activity["actual_end"] is not None:
            end = activity["actual_end"]

    if start is None or end is None:
        return NO_WINDOW
    if end < start:
        mixed = (
            mode == "actual"
            and activity["actual_start"] is not None
            and activity["actual_end"] is None
        )
        if not mixed:
            return NO_WINDOW
        end = start
    return start, end


def timeline_progress(current_date: pendulum.Date, window: Window) -> Fraction:
    """
    Elapsed fraction of the window at current_date, exact and within [0, 1].

    A zero-length window is a step: 0 before its day, 1 from it on. A missing
    window never starts.
    """
    start, end = window
    if start is None or end is None:
        return Fraction(0)
    if current_date < start:
        return Fraction(0)
    span = days_between(start, end)
    if span == 0 or current_date > end:
        return Fraction(1)
    return Fraction(days_between(start, current_date), max(1, span))


def reported_progress(activity: Activity) -> Fraction:
    percent = min(100.0, max(0.0, float(activity["progress_percent"] or 0)))
    return Fraction(percent) / 100


def classify(
    activity: Activity,
    progress: Fraction,
    mode: SimulationMode,
    planned_end: Optional[pendulum.Date],
) -> DrawState:
    """
    Draw state from reported progress against timeline progress.

    In actual mode a finished activity is further split by comparing its
    actual end with the planned end it was timed against.
    """
    if progress == 0:
        return DrawState.NOT_STARTED

    reported = reported_progress(activity)
    if progress < 1:
        if reported >= progress:
            return DrawState.IN_PROGRESS
        return DrawState.BEHIND

    if reported < 1:
        return DrawState.DELAYED
    if mode == "actual":
        actual_end = activity["actual_end"]
        if actual_end is None or planned_end is None:
            return DrawState.COMPLETED
        if actual_end < planned_end:
            return DrawState.FINISHED_AHEAD
        if actual_end > planned_end:
            return DrawState.FINISHED_LATE
        return DrawState.FINISHED_ON_TIME
    return DrawState.COMPLETED

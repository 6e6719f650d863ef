# SPDX-License-Identifier: MIT

import logging
from collections import deque
from typing import Iterable

from fourd.errors import CycleError
from fourd.model.activity import Activity
from fourd.model.critical_path import (
    ActivityTiming,
    CriticalPathResult,
    empty_critical_path_result,
)
from fourd.model.entity_id import ActivityId
from fourd.time import days_between

logger = logging.getLogger(__name__)

DEFAULT_FLOAT_EPSILON = 1e-6


def activity_duration(activity: Activity) -> float:
    """
    Duration in days used by the critical path passes.

    An explicit duration wins; otherwise it is derived from the planned window.
    """
    if activity["duration_days"] is not None:
        return max(0.0, float(activity["duration_days"]))
    start = activity["planned_start"]
    end = activity["planned_end"]
    if start is None or end is None:
        return 0.0
    return float(max(0, days_between(start, end)))


def _build_graph(
    activities: list[Activity],
) -> tuple[dict[ActivityId, list[ActivityId]], dict[ActivityId, list[ActivityId]]]:
    known_ids = {activity["id"] for activity in activities}
    predecessors: dict[ActivityId, list[ActivityId]] = {}
    successors: dict[ActivityId, list[ActivityId]] = {
        activity["id"]: [] for activity in activities
    }

    for activity in activities:
        activity_predecessors = []
        for predecessor_id in sorted(activity["predecessor_ids"]):
            if predecessor_id not in known_ids:
                logger.warning(
                    "activity %s lists unknown predecessor %s; ignoring it",
                    activity["id"],
                    predecessor_id,
                )
                continue
            activity_predecessors.append(predecessor_id)
            successors[predecessor_id].append(activity["id"])
        predecessors[activity["id"]] = activity_predecessors

    return predecessors, successors


def _topological_order(
    activity_ids: Iterable[ActivityId],
    predecessors: dict[ActivityId, list[ActivityId]],
    successors: dict[ActivityId, list[ActivityId]],
) -> list[ActivityId]:
    """Kahn's algorithm. Raises CycleError with the ids that never reached in-degree zero."""
    in_degree = {
        activity_id: len(predecessors[activity_id]) for activity_id in activity_ids
    }
    queue = deque(
        activity_id for activity_id, degree in in_degree.items() if degree == 0
    )
    order: list[ActivityId] = []

    while queue:
        activity_id = queue.popleft()
        order.append(activity_id)
        for successor_id in successors[activity_id]:
            in_degree[successor_id] -= 1
            if in_degree[successor_id] == 0:
                queue.append(successor_id)

    if len(order) != len(in_degree):
        raise CycleError(
            activity_id for activity_id, degree in in_degree.items() if degree > 0
        )

    return order


def calculate_critical_path(
    activities: list[Activity], epsilon: float = DEFAULT_FLOAT_EPSILON
) -> CriticalPathResult:
    """
    Classify activities on the zero-float path with a two-pass CPM.

    Forward pass in topological order gives earliest start/finish; the backward
    pass from the latest sink finish gives latest start/finish. An activity is
    critical when its earliest and latest starts agree within `epsilon`.

    Raises:
        CycleError: the predecessor graph is not acyclic
    """
    if len(activities) == 0:
        return empty_critical_path_result()

    durations = {activity["id"]: activity_duration(activity) for activity in activities}
    predecessors, successors = _build_graph(activities)
    order = _topological_order(durations.keys(), predecessors, successors)

    earliest_start: dict[ActivityId, float] = {}
    earliest_finish: dict[ActivityId, float] = {}
    for activity_id in order:
        earliest_start[activity_id] = max(
            (earliest_finish[p] for p in predecessors[activity_id]), default=0.0
        )
        earliest_finish[activity_id] = (
            earliest_start[activity_id] + durations[activity_id]
        )

    sinks = [activity_id for activity_id in order if not successors[activity_id]]
    project_end = max(earliest_finish[activity_id] for activity_id in sinks)

    latest_start: dict[ActivityId, float] = {}
    latest_finish: dict[ActivityId, float] = {}
    for activity_id in reversed(order):
        latest_finish[activity_id] = min(
            (latest_start[s] for s in successors[activity_id]), default=project_end
        )
        latest_start[activity_id] = latest_finish[activity_id] - durations[activity_id]

    timings: dict[ActivityId, ActivityTiming] = {}
    critical_ids: set[ActivityId] = set()
    for activity_id in order:
        total_float = latest_start[activity_id] - earliest_start[activity_id]
        if abs(total_float) <= epsilon:
            critical_ids.add(activity_id)
        timings[activity_id] = {
            "earliest_start": earliest_start[activity_id],
            "earliest_finish": earliest_finish[activity_id],
            "latest_start": latest_start[activity_id],
            "latest_finish": latest_finish[activity_id],
            "total_float": total_float,
        }

    return {
        "critical_ids": frozenset(critical_ids),
        "timings": timings,
        "project_duration": project_end,
    }

# SPDX-License-Identifier: MIT

from typing import TypedDict

from fourd.model.entity_id import ActivityId


class ActivityTiming(TypedDict):
    """
    CPM timing for one activity, in days measured from project start.
    """

    earliest_start: float
    earliest_finish: float
    latest_start: float
    latest_finish: float
    total_float: float


class CriticalPathResult(TypedDict):
    critical_ids: frozenset[ActivityId]
    timings: dict[ActivityId, ActivityTiming]
    project_duration: float


def empty_critical_path_result() -> CriticalPathResult:
    return {
        "critical_ids": frozenset(),
        "timings": {},
        "project_duration": 0.0,
    }

# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from fourd.model.entity_id import ActivityId


class Activity(TypedDict):
    id: ActivityId
    name: str
    planned_start: Optional[pendulum.Date]
    planned_end: Optional[pendulum.Date]
    actual_start: Optional[pendulum.Date]
    actual_end: Optional[pendulum.Date]
    progress_percent: float
    duration_days: Optional[float]
    predecessor_ids: set[ActivityId]
    status: Optional[str]

# SPDX-License-Identifier: MIT

from typing import TypedDict

import pendulum

from fourd.color import Rgb
from fourd.model.entity_id import ActivityId, ElementStableId
from fourd.model.simulation import DrawState, SimulationMode, VisualizationStyle


class ElementAppearance(TypedDict):
    visible: bool
    color: Rgb
    opacity: float


class ActivityFrameState(TypedDict):
    activity_id: ActivityId
    name: str
    state: DrawState
    timeline_progress: float
    visible_count: int
    total_count: int
    critical: bool


class VisibilityFrame(TypedDict):
    """
    Complete visibility/color assignment for every linked element at one date.

    `elements` is authoritative. `activities` summarises the same pass per
    activity for presentation layers.
    """

    date: pendulum.Date
    mode: SimulationMode
    style: VisualizationStyle
    elements: dict[ElementStableId, ElementAppearance]
    activities: list[ActivityFrameState]


def visible_ids(frame: VisibilityFrame) -> list[ElementStableId]:
    return [
        element_id
        for element_id, appearance in frame["elements"].items()
        if appearance["visible"]
    ]

# SPDX-License-Identifier: MIT

import logging
import math
from fractions import Fraction
from typing import Iterable, Optional, TypeAlias

import pendulum

from fourd.color import Palette, Rgb, interpolate
from fourd.errors import CycleError
from fourd.model.activity import Activity
from fourd.model.critical_path import CriticalPathResult, empty_critical_path_result
from fourd.model.entity_id import ElementStableId
from fourd.model.frame import ActivityFrameState, ElementAppearance, VisibilityFrame
from fourd.model.link import ElementActivityLink
from fourd.model.simulation import DrawState, SimulationMode, VisualizationStyle
from fourd.service.critical_path import DEFAULT_FLOAT_EPSILON, calculate_critical_path
from fourd.service.link_index import LinkIndex
from fourd.service.progress import (
    Window,
    classify,
    effective_window,
    planned_window,
    timeline_progress,
)

logger = logging.getLogger(__name__)

OPACITY_FLOOR = 0.3
OPACITY_RANGE = 0.7

_GroupKey: TypeAlias = tuple[Window, Optional[pendulum.Date]]


class ProgressVisibilityEngine:
    """
    Computes complete visibility frames for a schedule.

    The schedule, its link index and its critical path are swapped together by
    update_schedule, so compute_frame never sees a critical path from an older
    graph. compute_frame keeps no state between calls: every frame starts from
    "all linked elements hidden" and layers the visible sets on top.

    When an element is linked to several activities, visible writes are layered
    in schedule order and the last one wins; hidden entries never overwrite a
    visible one.
    """

    def __init__(
        self,
        activities: Iterable[Activity] = (),
        links: Iterable[ElementActivityLink] = (),
        palette: Optional[Palette] = None,
        float_epsilon: float = DEFAULT_FLOAT_EPSILON,
    ) -> None:
        self._palette = palette if palette is not None else Palette()
        self._float_epsilon = float_epsilon
        self._activities: list[Activity] = []
        self._link_index = LinkIndex([])
        self._critical_path: CriticalPathResult = empty_critical_path_result()
        self.generation = 0
        self.update_schedule(activities, links)

    @property
    def activities(self) -> list[Activity]:
        return list(self._activities)

    @property
    def link_index(self) -> LinkIndex:
        return self._link_index

    @property
    def critical_path(self) -> CriticalPathResult:
        return self._critical_path

    @property
    def palette(self) -> Palette:
        return self._palette

    def update_schedule(
        self,
        activities: Iterable[Activity],
        links: Iterable[ElementActivityLink],
    ) -> None:
        activities = list(activities)
        link_index = LinkIndex(links)
        _report_data_quality(activities, link_index)

        try:
            critical_path = calculate_critical_path(activities, self._float_epsilon)
        except CycleError as e:
            logger.error("critical path unavailable, no activity marked critical: %s", e)
            critical_path = empty_critical_path_result()

        self._activities = activities
        self._link_index = link_index
        self._critical_path = critical_path
        self.generation += 1

    def compute_frame(
        self,
        current_date: pendulum.Date,
        mode: SimulationMode,
        style: VisualizationStyle,
        highlight_critical_path: bool,
    ) -> VisibilityFrame:
        not_started = self._palette.not_started
        elements: dict[ElementStableId, ElementAppearance] = {
            element_id: {"visible": False, "color": not_started, "opacity": 1.0}
            for element_id in self._link_index.element_ids()
        }
        summaries: list[ActivityFrameState] = []
        critical_ids = self._critical_path["critical_ids"]

        for activity in self._activities:
            activity_links = self._link_index.links_for_activity(activity["id"])
            if not activity_links:
                continue

            is_critical = activity["id"] in critical_ids
            lead_state = DrawState.NOT_STARTED
            lead_progress = Fraction(0)
            visible_count = 0

            for (window, planned_end), group in _group_by_window(
                activity, activity_links, mode
            ).items():
                progress = timeline_progress(current_date, window)
                state = classify(activity, progress, mode, planned_end)
                color = self._state_color(
                    state, is_critical and highlight_critical_path
                )
                for element_id, appearance in self._style_group(
                    group, progress, color, style
                ):
                    elements[element_id] = appearance
                    visible_count += 1

                if progress >= lead_progress:
                    lead_progress = progress
                    lead_state = state

            summaries.append(
                {
                    "activity_id": activity["id"],
                    "name": activity["name"],
                    "state": lead_state,
                    "timeline_progress": float(lead_progress),
                    "visible_count": visible_count,
                    "total_count": len(activity_links),
                    "critical": is_critical,
                }
            )

        return {
            "date": current_date,
            "mode": mode,
            "style": style,
            "elements": elements,
            "activities": summaries,
        }

    def _state_color(self, state: DrawState, critical_highlight: bool) -> Rgb:
        if (
            critical_highlight
            and state is not DrawState.NOT_STARTED
            and not state.is_warning
        ):
            return self._palette.critical
        return self._palette.for_state(state)

    def _style_group(
        self,
        group: list[ElementActivityLink],
        progress: Fraction,
        color: Rgb,
        style: VisualizationStyle,
    ) -> list[tuple[ElementStableId, ElementAppearance]]:
        """Visible appearances for one window group; hidden links are omitted."""
        if progress == 0:
            return []

        if style == "element-count":
            reveal_count = math.ceil(progress * len(group))
            return [
                (
                    link["element_stable_id"],
                    {"visible": True, "color": color, "opacity": 1.0},
                )
                for link in group[:reveal_count]
            ]

        if style == "opacity":
            opacity = OPACITY_FLOOR + OPACITY_RANGE * float(progress)
            shade = self._palette.partial if progress < 1 else color
            return [
                (
                    link["element_stable_id"],
                    {"visible": True, "color": shade, "opacity": opacity},
                )
                for link in group
            ]

        if style == "color-gradient":
            blended = interpolate(self._palette.not_started, color, float(progress))
            return [
                (
                    link["element_stable_id"],
                    {"visible": True, "color": blended, "opacity": 1.0},
                )
                for link in group
            ]

        raise ValueError(f"unknown visualization style: {style}")


def _group_by_window(
    activity: Activity,
    activity_links: list[ElementActivityLink],
    mode: SimulationMode,
) -> dict[_GroupKey, list[ElementActivityLink]]:
    """
    Split an activity's links by the window they are timed against.

    Links without overrides share one group. Group order and the order inside
    each group follow the link index's stable order.
    """
    groups: dict[_GroupKey, list[ElementActivityLink]] = {}
    for link in activity_links:
        key = (effective_window(activity, mode, link), planned_window(activity, link)[1])
        groups.setdefault(key, []).append(link)
    return groups


def _report_data_quality(activities: list[Activity], link_index: LinkIndex) -> None:
    known_ids = set()
    for activity in activities:
        known_ids.add(activity["id"])
        start = activity["planned_start"]
        end = activity["planned_end"]
        if start is None or end is None:
            logger.warning(
                "activity %s (%s) has no valid planned window; its elements stay hidden",
                activity["id"],
                activity["name"],
            )
        elif end < start:
            logger.warning(
                "activity %s (%s) ends before it starts; its elements stay hidden",
                activity["id"],
                activity["name"],
            )

    for activity_id in link_index.activity_ids():
        if activity_id not in known_ids:
            logger.warning(
                "%d link(s) reference unknown activity %s",
                len(link_index.links_for_activity(activity_id)),
                activity_id,
            )

# SPDX-License-Identifier: MIT

from typing import TypedDict

from fourd.model.activity import Activity
from fourd.model.element import Element
from fourd.model.link import ElementActivityLink


class ScheduleSnapshot(TypedDict):
    activities: list[Activity]
    links: list[ElementActivityLink]
    elements: list[Element]
    fingerprint: str

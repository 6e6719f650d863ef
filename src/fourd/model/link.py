# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from fourd.model.entity_id import ActivityId, ElementStableId


class ElementActivityLink(TypedDict):
    element_stable_id: ElementStableId
    activity_id: ActivityId
    override_start: Optional[pendulum.Date]
    override_end: Optional[pendulum.Date]
    link_type: Optional[str]
    status: Optional[str]

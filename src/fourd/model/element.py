# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

from fourd.model.entity_id import ElementStableId


class Element(TypedDict):
    stable_id: ElementStableId
    category: Optional[str]
    family: Optional[str]

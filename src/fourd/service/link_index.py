# SPDX-License-Identifier: MIT

import logging
from typing import Iterable, Optional

from fourd.model.entity_id import ActivityId, ElementStableId
from fourd.model.link import ElementActivityLink

logger = logging.getLogger(__name__)


class LinkIndex:
    """
    Element-activity links grouped by activity.

    Each activity's links are kept sorted by element stable id so that the
    element-count style always reveals the same elements in the same order,
    whatever order the links arrived in. The grouping is built on first use.
    """

    def __init__(self, links: Iterable[ElementActivityLink]) -> None:
        self._links: list[ElementActivityLink] = list(links)
        self._by_activity: Optional[dict[ActivityId, list[ElementActivityLink]]] = None

    @property
    def by_activity(self) -> dict[ActivityId, list[ElementActivityLink]]:
        if self._by_activity is None:
            self.__build()
        if self._by_activity is None:
            raise ValueError()
        return self._by_activity

    def __build(self) -> None:
        grouped: dict[ActivityId, list[ElementActivityLink]] = {}
        seen: set[tuple[ActivityId, ElementStableId]] = set()
        for link in self._links:
            key = (link["activity_id"], link["element_stable_id"])
            if key in seen:
                logger.debug(
                    "duplicate link %s -> %s ignored",
                    link["element_stable_id"],
                    link["activity_id"],
                )
                continue
            seen.add(key)
            grouped.setdefault(link["activity_id"], []).append(link)

        for activity_links in grouped.values():
            activity_links.sort(key=lambda link: link["element_stable_id"])

        self._by_activity = grouped

    def links_for_activity(self, activity_id: ActivityId) -> list[ElementActivityLink]:
        return list(self.by_activity.get(activity_id, []))

    def activity_ids(self) -> list[ActivityId]:
        return list(self.by_activity.keys())

    def element_ids(self) -> list[ElementStableId]:
        """Every linked element, sorted, without duplicates."""
        return sorted(
            {
                link["element_stable_id"]
                for activity_links in self.by_activity.values()
                for link in activity_links
            }
        )

    def __len__(self) -> int:
        return sum(len(activity_links) for activity_links in self.by_activity.values())

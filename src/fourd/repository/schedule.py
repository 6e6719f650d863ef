# SPDX-License-Identifier: MIT

import hashlib
import logging
from pathlib import Path
from typing import Any, Optional

import pendulum
from yaml import YAMLError, load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]

from fourd.errors import ScheduleLoadError
from fourd.model.activity import Activity
from fourd.model.element import Element
from fourd.model.link import ElementActivityLink
from fourd.model.schedule import ScheduleSnapshot
from fourd.template.activity import get_activity_template
from fourd.template.link import get_link_template
from fourd.time import date_from_value_lenient

logger = logging.getLogger(__name__)

ACTIVITY_DATE_KEYS = ("planned_start", "planned_end", "actual_start", "actual_end")
LINK_DATE_KEYS = ("override_start", "override_end")


class ScheduleRepository:
    """
    Read-only provider for a schedule file.

    The file is a YAML document with `activities` and `links` lists and an
    optional `elements` list naming model geometry. Dates may be YAML dates or
    ISO strings; a date that cannot be read is dropped with a
    warning rather than failing the load.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._snapshot: Optional[ScheduleSnapshot] = None

    @property
    def snapshot(self) -> ScheduleSnapshot:
        if self._snapshot is None:
            self._snapshot = self.load()
        return self._snapshot

    def load(self) -> ScheduleSnapshot:
        """
        Raises:
            ScheduleLoadError: the file is missing, is not YAML or has the wrong shape
        """
        try:
            text = self.path.read_text()
        except OSError as e:
            raise ScheduleLoadError(f"cannot read schedule {self.path}: {e}") from e

        try:
            raw = load(text, Loader=Loader)
        except YAMLError as e:
            raise ScheduleLoadError(f"schedule {self.path} is not valid YAML: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ScheduleLoadError(f"schedule {self.path} must be a mapping")

        raw_activities = raw.get("activities") or []
        raw_links = raw.get("links") or []
        raw_elements = raw.get("elements") or []
        if not all(
            isinstance(section, list)
            for section in (raw_activities, raw_links, raw_elements)
        ):
            raise ScheduleLoadError(
                f"schedule {self.path}: activities, links and elements must be lists"
            )

        snapshot: ScheduleSnapshot = {
            "activities": [
                self.__convert_activity_for_deserialization(index, item)
                for index, item in enumerate(raw_activities)
            ],
            "links": [
                self.__convert_link_for_deserialization(index, item)
                for index, item in enumerate(raw_links)
            ],
            "elements": [
                self.__convert_element_for_deserialization(index, item)
                for index, item in enumerate(raw_elements)
            ],
            "fingerprint": hashlib.sha256(text.encode("utf-8")).hexdigest(),
        }
        self._snapshot = snapshot
        logger.debug(
            "loaded %d activities and %d links from %s",
            len(snapshot["activities"]),
            len(snapshot["links"]),
            self.path,
        )
        return snapshot

    def reload(self) -> None:
        self._snapshot = None

    def __convert_activity_for_deserialization(
        self, index: int, raw: Any
    ) -> Activity:
        if not isinstance(raw, dict) or raw.get("id") in (None, ""):
            raise ScheduleLoadError(f"activity #{index} must be a mapping with an id")

        activity = get_activity_template()
        activity["id"] = str(raw["id"])
        activity["name"] = str(raw.get("name") or activity["id"])
        for key in ACTIVITY_DATE_KEYS:
            activity[key] = self.__date(raw.get(key), f"activity {activity['id']} {key}")  # type: ignore[literal-required]

        try:
            activity["progress_percent"] = float(raw.get("progress_percent") or 0.0)
        except (TypeError, ValueError):
            logger.warning(
                "activity %s: progress_percent %r is not a number, using 0",
                activity["id"],
                raw.get("progress_percent"),
            )
        if raw.get("duration_days") is not None:
            try:
                activity["duration_days"] = float(raw["duration_days"])
            except (TypeError, ValueError):
                logger.warning(
                    "activity %s: duration_days %r is not a number, ignored",
                    activity["id"],
                    raw["duration_days"],
                )

        activity["predecessor_ids"] = {
            str(predecessor_id) for predecessor_id in raw.get("predecessor_ids") or []
        }
        activity["status"] = raw.get("status")
        return activity

    def __convert_link_for_deserialization(
        self, index: int, raw: Any
    ) -> ElementActivityLink:
        if (
            not isinstance(raw, dict)
            or raw.get("element_stable_id") in (None, "")
            or raw.get("activity_id") in (None, "")
        ):
            raise ScheduleLoadError(
                f"link #{index} must name an element_stable_id and an activity_id"
            )

        link = get_link_template()
        link["element_stable_id"] = str(raw["element_stable_id"])
        link["activity_id"] = str(raw["activity_id"])
        for key in LINK_DATE_KEYS:
            link[key] = self.__date(  # type: ignore[literal-required]
                raw.get(key), f"link {link['element_stable_id']} {key}"
            )
        link["link_type"] = raw.get("link_type")
        link["status"] = raw.get("status")
        return link

    def __convert_element_for_deserialization(self, index: int, raw: Any) -> Element:
        if isinstance(raw, str):
            raw = {"stable_id": raw}
        if not isinstance(raw, dict) or raw.get("stable_id") in (None, ""):
            raise ScheduleLoadError(f"element #{index} must have a stable_id")
        return {
            "stable_id": str(raw["stable_id"]),
            "category": raw.get("category"),
            "family": raw.get("family"),
        }

    def __date(self, value: Any, label: str) -> Optional[pendulum.Date]:
        date, ok = date_from_value_lenient(value)
        if not ok:
            logger.warning("%s: %r is not a date, treated as missing", label, value)
        return date

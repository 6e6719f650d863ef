# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Any, Optional, Protocol, Sequence, TypeAlias

from fourd.model.entity_id import ElementStableId
from fourd.viewer._support import require_ready
from fourd.viewer.id_table import IdTable
from fourd.viewer.protocol import ColorFilter

logger = logging.getLogger(__name__)

BACKEND = "cad platform"

Rgba: TypeAlias = tuple[float, float, float, float]


class CadViewer(Protocol):
    """Native surface of a viewer hosted by a CAD/BIM platform."""

    async def load(self, document_id: str) -> None: ...

    def db_ids(self) -> list[int]: ...

    async def get_properties(self, db_id: int) -> dict[str, Any]: ...

    def isolate(self, db_ids: list[int]) -> None: ...

    def set_ghosting(self, enabled: bool) -> None: ...

    def hide_all(self) -> None: ...

    def hide(self, db_ids: list[int]) -> None: ...

    def show(self, db_ids: list[int]) -> None: ...

    def clear_theming_colors(self) -> None: ...

    def set_theming_color(self, db_id: int, color: Rgba) -> None: ...

    def invalidate(self) -> None: ...

    def canvas(self) -> Any: ...

    async def unload(self) -> None: ...


def stable_id_from_properties(db_id: int, properties: dict[str, Any]) -> ElementStableId:
    return properties.get("externalId") or properties.get("guid") or f"autodesk-{db_id}"


def to_rgba(color: tuple[int, int, int], opacity: Optional[float]) -> Rgba:
    red, green, blue = color
    return (red / 255, green / 255, blue / 255, 1.0 if opacity is None else opacity)


class CadPlatformAdapter:
    """
    Viewer adapter over a CAD platform viewer addressed by numeric db ids.

    Stable ids come from each object's external id. A stable id that is a
    plain number naming a loaded db id is accepted as that db id, which covers
    links recorded before external ids were available.
    """

    def __init__(self, viewer: CadViewer, document_id: str) -> None:
        self._viewer = viewer
        self._document_id = document_id
        self._ids: IdTable[int] = IdTable()
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def id_table(self) -> IdTable[int]:
        return self._ids

    async def initialize(self) -> None:
        await self._viewer.load(self._document_id)
        db_ids = self._viewer.db_ids()
        properties = await asyncio.gather(
            *(self._viewer.get_properties(db_id) for db_id in db_ids)
        )
        for db_id, props in zip(db_ids, properties):
            self._ids.associate(stable_id_from_properties(db_id, props), db_id)
        self._ready = True
        logger.info("cad document %s loaded with %d objects", self._document_id, len(self._ids))

    async def dispose(self) -> None:
        self._ready = False
        self._ids.clear()
        await self._viewer.unload()

    def _db_ids(self, ids: Sequence[ElementStableId], action: str) -> list[int]:
        resolved = []
        unresolved = []
        for stable_id in ids:
            db_id = self._ids.native_id(stable_id)
            if db_id is None and stable_id.isdigit() and self._ids.stable_id(int(stable_id)):
                db_id = int(stable_id)
            if db_id is None:
                unresolved.append(stable_id)
            else:
                resolved.append(db_id)
        if unresolved:
            logger.debug(
                "cad platform %s: %d of %d ids unresolved", action, len(unresolved), len(ids)
            )
        return resolved

    def isolate_objects(
        self, ids: Sequence[ElementStableId], ghost_others: bool = False
    ) -> None:
        require_ready(self._ready, BACKEND)
        self._viewer.set_ghosting(ghost_others)
        self._viewer.isolate(self._db_ids(ids, "isolate"))

    def hide_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, BACKEND)
        if not ids:
            self._viewer.hide_all()
            return
        self._viewer.hide(self._db_ids(ids, "hide"))

    def show_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, BACKEND)
        self._viewer.show(self._db_ids(ids, "show"))

    def set_color_filter(self, color_filter: ColorFilter) -> None:
        require_ready(self._ready, BACKEND)

        colors: dict[int, Rgba] = {}
        for entry in color_filter["entries"]:
            for db_id in self._db_ids([entry["id"]], "color"):
                colors[db_id] = to_rgba(entry["color"], entry.get("opacity"))
        default = to_rgba(color_filter["default_color"], None)

        self._viewer.clear_theming_colors()
        failed = 0
        for db_id in self._ids.native_ids():
            try:
                self._viewer.set_theming_color(db_id, colors.get(db_id, default))
            except Exception:
                failed += 1
                logger.debug("theming color failed for db id %s", db_id, exc_info=True)
        if failed:
            logger.debug("cad platform color: %d objects not colored", failed)
        self._viewer.invalidate()

    def get_canvas(self) -> Any:
        return self._viewer.canvas()

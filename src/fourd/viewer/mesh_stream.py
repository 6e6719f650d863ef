# SPDX-License-Identifier: MIT

import logging
from typing import Any, Optional, Protocol, Sequence, TypedDict

from fourd.color import Rgb, rgb_to_hex
from fourd.model.entity_id import ElementStableId
from fourd.viewer._support import require_ready, resolve_ids
from fourd.viewer.id_table import IdTable
from fourd.viewer.protocol import ColorFilter

logger = logging.getLogger(__name__)

BACKEND = "mesh stream"


class ColorGroup(TypedDict):
    object_ids: list[str]
    color: str
    opacity: Optional[float]


class MeshStreamClient(Protocol):
    """Native surface of a cloud mesh-streaming viewer."""

    async def load_stream(self, stream_url: str) -> None: ...

    def object_ids(self) -> list[str]: ...

    def object_properties(self, object_id: str) -> dict[str, Any]: ...

    def isolate(self, object_ids: list[str], ghost: bool) -> None: ...

    def hide(self, object_ids: list[str]) -> None: ...

    def hide_all(self) -> None: ...

    def show(self, object_ids: list[str]) -> None: ...

    def reset_colors(self) -> None: ...

    def set_object_colors(self, groups: list[ColorGroup], default_color: str) -> None: ...

    def canvas(self) -> Any: ...

    async def unload(self) -> None: ...


class MeshStreamAdapter:
    """
    Viewer adapter over a mesh-streaming client.

    Streamed objects carry the authoring tool's id as `applicationId`, which is
    the element stable id; objects without one are addressed by their stream
    object id.
    """

    def __init__(self, client: MeshStreamClient, stream_url: str) -> None:
        self._client = client
        self._stream_url = stream_url
        self._ids: IdTable[str] = IdTable()
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def id_table(self) -> IdTable[str]:
        return self._ids

    async def initialize(self) -> None:
        await self._client.load_stream(self._stream_url)
        for object_id in self._client.object_ids():
            properties = self._client.object_properties(object_id)
            self._ids.associate(properties.get("applicationId") or object_id, object_id)
        self._ready = True
        logger.info("mesh stream loaded with %d objects", len(self._ids))

    async def dispose(self) -> None:
        self._ready = False
        self._ids.clear()
        await self._client.unload()

    def isolate_objects(
        self, ids: Sequence[ElementStableId], ghost_others: bool = False
    ) -> None:
        require_ready(self._ready, BACKEND)
        self._client.isolate(resolve_ids(self._ids, ids, BACKEND, "isolate"), ghost_others)

    def hide_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, BACKEND)
        if not ids:
            self._client.hide_all()
            return
        self._client.hide(resolve_ids(self._ids, ids, BACKEND, "hide"))

    def show_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, BACKEND)
        self._client.show(resolve_ids(self._ids, ids, BACKEND, "show"))

    def set_color_filter(self, color_filter: ColorFilter) -> None:
        require_ready(self._ready, BACKEND)

        # one native call per distinct color
        groups: dict[tuple[Rgb, Optional[float]], list[str]] = {}
        unresolved = 0
        for entry in color_filter["entries"]:
            object_id = self._ids.native_id(entry["id"])
            if object_id is None:
                unresolved += 1
                continue
            key = (entry["color"], entry.get("opacity"))
            groups.setdefault(key, []).append(object_id)
        if unresolved:
            logger.debug("mesh stream color: %d ids unresolved", unresolved)

        self._client.reset_colors()
        self._client.set_object_colors(
            [
                {"object_ids": object_ids, "color": rgb_to_hex(color), "opacity": opacity}
                for (color, opacity), object_ids in groups.items()
            ],
            rgb_to_hex(color_filter["default_color"]),
        )

    def get_canvas(self) -> Any:
        return self._client.canvas()

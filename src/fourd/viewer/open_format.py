# SPDX-License-Identifier: MIT

import logging
from typing import Any, Callable, Optional, Protocol, Sequence

from fourd.color import rgb_to_hex
from fourd.model.entity_id import ElementStableId
from fourd.viewer._support import require_ready, resolve_ids
from fourd.viewer.id_table import IdTable
from fourd.viewer.protocol import ColorFilter

logger = logging.getLogger(__name__)

BACKEND = "open format"
GHOST_OPACITY = 0.1


class OpenFormatMesh(Protocol):
    express_id: int
    global_id: Optional[str]
    visible: bool

    def set_material(self, color: str, opacity: float) -> None: ...

    def restore_material(self) -> None: ...


class OpenFormatLoader(Protocol):
    """Native surface of a local open-format geometry loader."""

    async def load(self, file_path: str) -> list[OpenFormatMesh]: ...

    def canvas(self) -> Any: ...

    async def unload(self) -> None: ...


def stable_id_for_mesh(mesh: OpenFormatMesh) -> ElementStableId:
    return mesh.global_id or f"IFC_{mesh.express_id}"


class OpenFormatAdapter:
    """
    Viewer adapter over meshes loaded from a local open-format file.

    Meshes are addressed by express id. Elements are identified by their
    global id when the file carries one.
    """

    def __init__(self, loader: OpenFormatLoader, file_path: str) -> None:
        self._loader = loader
        self._file_path = file_path
        self._ids: IdTable[int] = IdTable()
        self._meshes: dict[int, OpenFormatMesh] = {}
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def id_table(self) -> IdTable[int]:
        return self._ids

    async def initialize(self) -> None:
        for mesh in await self._loader.load(self._file_path):
            self._meshes[mesh.express_id] = mesh
            self._ids.associate(stable_id_for_mesh(mesh), mesh.express_id)
        self._ready = True
        logger.info("%s loaded with %d meshes", self._file_path, len(self._meshes))

    async def dispose(self) -> None:
        self._ready = False
        self._ids.clear()
        self._meshes.clear()
        await self._loader.unload()

    def _for_each(
        self,
        express_ids: list[int],
        action: str,
        operation: Callable[[OpenFormatMesh], None],
    ) -> None:
        failed = 0
        for express_id in express_ids:
            try:
                operation(self._meshes[express_id])
            except Exception:
                failed += 1
                logger.debug("%s failed for express id %s", action, express_id, exc_info=True)
        if failed:
            logger.debug("open format %s: %d meshes skipped", action, failed)

    def isolate_objects(
        self, ids: Sequence[ElementStableId], ghost_others: bool = False
    ) -> None:
        require_ready(self._ready, BACKEND)
        isolated = set(resolve_ids(self._ids, ids, BACKEND, "isolate"))

        def isolate(mesh: OpenFormatMesh) -> None:
            if mesh.express_id in isolated:
                mesh.visible = True
                mesh.restore_material()
            elif ghost_others:
                mesh.visible = True
                mesh.set_material("#FFFFFF", GHOST_OPACITY)
            else:
                mesh.visible = False

        self._for_each(list(self._meshes), "isolate", isolate)

    def hide_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, BACKEND)
        express_ids = (
            list(self._meshes) if not ids else resolve_ids(self._ids, ids, BACKEND, "hide")
        )
        self._for_each(express_ids, "hide", lambda mesh: setattr(mesh, "visible", False))

    def show_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, BACKEND)
        self._for_each(
            resolve_ids(self._ids, ids, BACKEND, "show"),
            "show",
            lambda mesh: setattr(mesh, "visible", True),
        )

    def set_color_filter(self, color_filter: ColorFilter) -> None:
        require_ready(self._ready, BACKEND)
        materials: dict[int, tuple[str, float]] = {}
        for entry in color_filter["entries"]:
            express_id = self._ids.native_id(entry["id"])
            if express_id is None:
                continue
            opacity = entry.get("opacity")
            materials[express_id] = (
                rgb_to_hex(entry["color"]),
                1.0 if opacity is None else opacity,
            )
        default = (rgb_to_hex(color_filter["default_color"]), 1.0)

        def paint(mesh: OpenFormatMesh) -> None:
            mesh.restore_material()
            mesh.set_material(*materials.get(mesh.express_id, default))

        self._for_each(list(self._meshes), "color", paint)

    def get_canvas(self) -> Any:
        return self._loader.canvas()

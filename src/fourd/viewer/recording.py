# SPDX-License-Identifier: MIT

from typing import Any, Iterable, Sequence

from fourd.color import Rgb
from fourd.model.entity_id import ElementStableId
from fourd.viewer._support import require_ready
from fourd.viewer.protocol import ColorFilter


class RecordingAdapter:
    """
    Headless viewer that keeps the scene state in memory.

    Element stable ids double as native ids. Every protocol call is appended
    to `calls`, and get_canvas returns a snapshot of what would be on screen.
    Used by the command line and by tests.
    """

    def __init__(self, element_ids: Iterable[ElementStableId] = ()) -> None:
        self.element_ids: set[ElementStableId] = set(element_ids)
        self.visible: set[ElementStableId] = set()
        self.colors: dict[ElementStableId, tuple[Rgb, float]] = {}
        self.default_color: Rgb | None = None
        self.isolated: set[ElementStableId] | None = None
        self.calls: list[tuple[str, Any]] = []
        self._ready = False
        self.disposed = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        self.visible = set(self.element_ids)
        self._ready = True
        self.disposed = False
        self.calls.append(("initialize", None))

    async def dispose(self) -> None:
        self._ready = False
        self.disposed = True
        self.visible.clear()
        self.colors.clear()
        self.calls.append(("dispose", None))

    def _known(self, ids: Sequence[ElementStableId]) -> set[ElementStableId]:
        # scene grows with what it is told about when no element list is given
        if not self.element_ids:
            return set(ids)
        return set(ids) & self.element_ids

    def isolate_objects(
        self, ids: Sequence[ElementStableId], ghost_others: bool = False
    ) -> None:
        require_ready(self._ready, "recording")
        self.calls.append(("isolate_objects", (list(ids), ghost_others)))
        self.isolated = self._known(ids)
        self.visible = set(self.element_ids) if ghost_others else set(self.isolated)

    def hide_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, "recording")
        self.calls.append(("hide_objects", list(ids)))
        if not ids:
            self.visible.clear()
        else:
            self.visible -= set(ids)

    def show_objects(self, ids: Sequence[ElementStableId]) -> None:
        require_ready(self._ready, "recording")
        self.calls.append(("show_objects", list(ids)))
        self.visible |= self._known(ids)

    def set_color_filter(self, color_filter: ColorFilter) -> None:
        require_ready(self._ready, "recording")
        self.calls.append(("set_color_filter", color_filter))
        self.default_color = color_filter["default_color"]
        self.colors = {}
        for entry in color_filter["entries"]:
            if entry["id"] not in self._known([entry["id"]]):
                continue
            opacity = entry.get("opacity")
            self.colors[entry["id"]] = (entry["color"], 1.0 if opacity is None else opacity)

    def color_of(self, element_id: ElementStableId) -> Rgb | None:
        if element_id in self.colors:
            return self.colors[element_id][0]
        return self.default_color

    def get_canvas(self) -> dict[str, Any]:
        return {
            "visible": sorted(self.visible),
            "colors": {
                element_id: color for element_id, (color, _) in sorted(self.colors.items())
            },
            "default_color": self.default_color,
        }

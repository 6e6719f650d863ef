# SPDX-License-Identifier: MIT

from typing import Any, NotRequired, Optional, Protocol, Sequence, TypedDict, runtime_checkable

from fourd.color import Rgb
from fourd.model.entity_id import ElementStableId


class ColorFilterEntry(TypedDict):
    id: ElementStableId
    color: Rgb
    opacity: NotRequired[Optional[float]]


class ColorFilter(TypedDict):
    """
    A complete coloring of the model.

    Applying a filter replaces every earlier one: listed elements take their
    entry's color, every other element takes default_color.
    """

    entries: list[ColorFilterEntry]
    default_color: Rgb


@runtime_checkable
class ViewerAdapter(Protocol):
    """
    Capability surface every rendering backend exposes.

    Ids are element stable ids; each backend translates them to its own native
    identifiers. Calls on a backend that has not finished loading raise
    ViewerNotReadyError. Ids the backend cannot resolve are skipped.
    """

    @property
    def is_ready(self) -> bool: ...

    async def initialize(self) -> None: ...

    async def dispose(self) -> None: ...

    def isolate_objects(
        self, ids: Sequence[ElementStableId], ghost_others: bool = False
    ) -> None: ...

    def hide_objects(self, ids: Sequence[ElementStableId]) -> None:
        """Hide the given elements, or every element when ids is empty."""
        ...

    def show_objects(self, ids: Sequence[ElementStableId]) -> None: ...

    def set_color_filter(self, color_filter: ColorFilter) -> None: ...

    def get_canvas(self) -> Any: ...

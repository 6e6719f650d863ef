# SPDX-License-Identifier: MIT

import logging
from typing import Callable

from fourd.errors import ViewerNotReadyError
from fourd.model.frame import VisibilityFrame
from fourd.viewer.protocol import ColorFilter, ColorFilterEntry, ViewerAdapter

logger = logging.getLogger(__name__)


def _always_current() -> bool:
    return True


def build_color_filter(frame: VisibilityFrame, default_color: tuple[int, int, int]) -> ColorFilter:
    entries: list[ColorFilterEntry] = []
    for element_id, appearance in frame["elements"].items():
        if not appearance["visible"]:
            continue
        entry: ColorFilterEntry = {"id": element_id, "color": appearance["color"]}
        if appearance["opacity"] < 1.0:
            entry["opacity"] = appearance["opacity"]
        entries.append(entry)
    return {"entries": entries, "default_color": default_color}


def apply_frame(
    adapter: ViewerAdapter,
    frame: VisibilityFrame,
    default_color: tuple[int, int, int],
    is_current: Callable[[], bool] = _always_current,
) -> bool:
    """
    Push a frame to a viewer with the reset-then-layer sequence.

    Everything is hidden first, then the frame's visible elements are shown,
    then the frame's coloring replaces any previous one. is_current is checked
    before every step; once it returns False the frame is abandoned because a
    newer one supersedes it.
    A step the viewer fails is logged and skipped; the remaining steps still run.

    Returns:
        True when every step ran
    """
    visible = [
        element_id
        for element_id, appearance in frame["elements"].items()
        if appearance["visible"]
    ]
    color_filter = build_color_filter(frame, default_color)

    steps: list[tuple[str, Callable[[], None]]] = [
        ("hide", lambda: adapter.hide_objects([])),
        ("show", lambda: adapter.show_objects(visible)),
        ("color", lambda: adapter.set_color_filter(color_filter)),
    ]

    for name, step in steps:
        if not is_current():
            logger.debug("frame for %s superseded before %s step", frame["date"], name)
            return False
        try:
            step()
        except ViewerNotReadyError:
            logger.debug("viewer not ready, %s step skipped", name)
        except Exception:
            logger.debug("viewer %s step failed, continuing", name, exc_info=True)

    return True

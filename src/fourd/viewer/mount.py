# SPDX-License-Identifier: MIT

import logging
from typing import Callable, Mapping, Optional, TypeAlias

from fourd.errors import UnknownModelSourceError
from fourd.model.model_source import ModelSource, ViewerKind
from fourd.viewer.protocol import ViewerAdapter

logger = logging.getLogger(__name__)

CAD_PLATFORM_SOURCES = ("autodesk_construction_cloud", "autodesk_drive")
OPEN_FORMAT_SUFFIX = ".ifc"

ViewerFactory: TypeAlias = Callable[[ModelSource], ViewerAdapter]


def _ends_with_open_format(value: Optional[str]) -> bool:
    return bool(value) and value.lower().endswith(OPEN_FORMAT_SUFFIX)  # type: ignore[union-attr]


def detect_viewer_kind(model: ModelSource) -> ViewerKind:
    """
    Decide which backend renders a model from what the model declares.

    Rules are checked in order: a local file, a CAD platform document, a
    stream, a path or URL to an open-format file. Anything else is treated
    as a stream.
    """
    source = model.get("source")
    if source == "local" and model.get("file_path"):
        return "open_format"
    if model.get("source_id") and source in CAD_PLATFORM_SOURCES:
        return "cad_platform"
    if model.get("stream_url") or model.get("stream_id") or source == "speckle":
        return "mesh_stream"
    if _ends_with_open_format(model.get("file_path")) or _ends_with_open_format(
        model.get("file_url")
    ):
        return "open_format"
    return "mesh_stream"


def mount_viewer(
    model: ModelSource, factories: Mapping[ViewerKind, ViewerFactory]
) -> ViewerAdapter:
    """
    Build the adapter for a model. The adapter still needs initialize().

    Raises:
        UnknownModelSourceError: no factory is registered for the detected kind
    """
    kind = detect_viewer_kind(model)
    match kind:
        case "mesh_stream" | "cad_platform" | "open_format" if kind in factories:
            logger.info("mounting %s viewer for model %s", kind, model["id"])
            return factories[kind](model)
        case _:
            raise UnknownModelSourceError(
                f"no viewer available for model {model['id']} ({kind})"
            )

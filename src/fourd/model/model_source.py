# SPDX-License-Identifier: MIT

from typing import Literal, NotRequired, Optional, TypedDict

ViewerKind = Literal["mesh_stream", "cad_platform", "open_format"]


class ModelSource(TypedDict):
    """
    A model as declared by the project: where its geometry comes from.
    """

    id: str
    name: NotRequired[Optional[str]]
    source: Optional[str]
    source_id: NotRequired[Optional[str]]
    file_path: NotRequired[Optional[str]]
    file_url: NotRequired[Optional[str]]
    stream_url: NotRequired[Optional[str]]
    stream_id: NotRequired[Optional[str]]

# SPDX-License-Identifier: MIT

import logging
from typing import Sequence, TypeVar

from fourd.errors import ViewerNotReadyError
from fourd.model.entity_id import ElementStableId
from fourd.viewer.id_table import IdTable

logger = logging.getLogger(__name__)

N = TypeVar("N", int, str)


def require_ready(is_ready: bool, backend: str) -> None:
    if not is_ready:
        raise ViewerNotReadyError(f"{backend} viewer has not finished loading")


def resolve_ids(
    ids: IdTable[N], stable_ids: Sequence[ElementStableId], backend: str, action: str
) -> list[N]:
    resolved, unresolved = ids.resolve(stable_ids)
    if unresolved:
        logger.debug(
            "%s %s: %d of %d ids unresolved",
            backend,
            action,
            len(unresolved),
            len(stable_ids),
        )
    return resolved

# SPDX-License-Identifier: MIT

from typing import Generic, Iterable, Optional, TypeVar

from fourd.model.entity_id import ElementStableId

N = TypeVar("N", int, str)


class IdTable(Generic[N]):
    """
    Two-way mapping between element stable ids and one backend's native ids.

    An adapter fills its table once the model has loaded and clears it when
    the adapter is disposed; the table never outlives its adapter.
    """

    def __init__(self) -> None:
        self._stable_to_native: dict[ElementStableId, N] = {}
        self._native_to_stable: dict[N, ElementStableId] = {}

    def associate(self, stable_id: ElementStableId, native_id: N) -> None:
        """
        Record a pairing. The first native id seen for a stable id is kept.
        """
        if stable_id in self._stable_to_native:
            return
        self._stable_to_native[stable_id] = native_id
        self._native_to_stable[native_id] = stable_id

    def native_id(self, stable_id: ElementStableId) -> Optional[N]:
        return self._stable_to_native.get(stable_id)

    def stable_id(self, native_id: N) -> Optional[ElementStableId]:
        return self._native_to_stable.get(native_id)

    def resolve(
        self, stable_ids: Iterable[ElementStableId]
    ) -> tuple[list[N], list[ElementStableId]]:
        """
        Returns:
            (native ids found, stable ids with no native counterpart)
        """
        resolved: list[N] = []
        unresolved: list[ElementStableId] = []
        for stable_id in stable_ids:
            native_id = self._stable_to_native.get(stable_id)
            if native_id is None:
                unresolved.append(stable_id)
            else:
                resolved.append(native_id)
        return resolved, unresolved

    def native_ids(self) -> list[N]:
        return list(self._native_to_stable.keys())

    def clear(self) -> None:
        self._stable_to_native.clear()
        self._native_to_stable.clear()

    def __len__(self) -> int:
        return len(self._stable_to_native)

    def __contains__(self, stable_id: object) -> bool:
        return stable_id in self._stable_to_native

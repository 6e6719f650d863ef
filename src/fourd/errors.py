# SPDX-License-Identifier: MIT

from typing import Iterable


class FourDError(Exception):
    pass


class CycleError(FourDError):
    """Raised when the predecessor graph of a schedule contains a cycle."""

    def __init__(self, activity_ids: Iterable[str]) -> None:
        self.activity_ids = sorted(activity_ids)
        super().__init__(
            f"Cycle detected involving: {', '.join(self.activity_ids)}"
        )


class ViewerNotReadyError(FourDError):
    pass


class UnknownModelSourceError(FourDError):
    pass


class ScheduleLoadError(FourDError):
    pass

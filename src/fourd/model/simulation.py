# SPDX-License-Identifier: MIT

from enum import Enum
from typing import Literal, get_args

SimulationMode = Literal["planned", "actual"]
VisualizationStyle = Literal["element-count", "opacity", "color-gradient"]
PlaybackState = Literal["stopped", "playing", "scrubbing"]

SIMULATION_MODES: tuple[str, ...] = get_args(SimulationMode)
VISUALIZATION_STYLES: tuple[str, ...] = get_args(VisualizationStyle)


class DrawState(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BEHIND = "behind"
    COMPLETED = "completed"
    DELAYED = "delayed"
    FINISHED_AHEAD = "finished_ahead"
    FINISHED_ON_TIME = "finished_on_time"
    FINISHED_LATE = "finished_late"

    @property
    def is_warning(self) -> bool:
        return self in (DrawState.BEHIND, DrawState.DELAYED)

# SPDX-License-Identifier: MIT

import os
from pathlib import Path
from typing import NotRequired, Optional, TypedDict

import platformdirs

from fourd.model.simulation import SimulationMode, VisualizationStyle

APP_NAME = "fourd"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH: Path = CONFIG_PATH / "config.yaml"


class Configuration(TypedDict):
    tick_seconds: float
    playback_speed: float
    mode: SimulationMode
    visualization_style: VisualizationStyle
    highlight_critical_path: bool
    refresh_interval_seconds: float
    critical_float_epsilon: float
    log_level: str
    schedule_path: Optional[str]
    palette: NotRequired[Optional[dict[str, str]]]


def get_default_configuration() -> Configuration:
    return {
        "tick_seconds": 1.0,
        "playback_speed": 1.0,
        "mode": "planned",
        "visualization_style": "element-count",
        "highlight_critical_path": False,
        "refresh_interval_seconds": 10.0,
        "critical_float_epsilon": 1e-6,
        "log_level": "WARNING",
        "schedule_path": None,
        "palette": None,
    }


def load_config_path_configuration() -> None:
    """
    Point APP_CONFIG_PATH at FOURD_CONFIG_PATH when it is set.

    Must be called before the configuration repository first loads.
    """
    global CONFIG_PATH, APP_CONFIG_PATH

    override = os.environ.get("FOURD_CONFIG_PATH")
    if override:
        APP_CONFIG_PATH = Path(override)
        CONFIG_PATH = APP_CONFIG_PATH.parent

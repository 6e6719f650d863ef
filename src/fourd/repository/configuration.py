# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from fourd import configuration
from fourd.color import Palette
from fourd.model.simulation import SIMULATION_MODES, VISUALIZATION_STYLES

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        raw: Optional[dict[str, Any]] = None
        if configuration.APP_CONFIG_PATH.is_file():
            raw = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        # Missing keys fall back to defaults so older files keep working
        config = configuration.get_default_configuration()
        if raw is not None:
            for key, value in raw.items():
                if key in config:
                    config[key] = value  # type: ignore[literal-required]

        self.__validate(config)
        self._config = config

    def __validate(self, config: configuration.Configuration) -> None:
        if config["mode"] not in SIMULATION_MODES:
            raise ValueError(f"mode must be one of {SIMULATION_MODES}")
        if config["visualization_style"] not in VISUALIZATION_STYLES:
            raise ValueError(
                f"visualization_style must be one of {VISUALIZATION_STYLES}"
            )
        if config["tick_seconds"] <= 0:
            raise ValueError("tick_seconds must be positive")
        if config["playback_speed"] <= 0:
            raise ValueError("playback_speed must be positive")
        if config["refresh_interval_seconds"] <= 0:
            raise ValueError("refresh_interval_seconds must be positive")
        if str(config["log_level"]).upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}")
        # Raises on unknown keys or malformed hex values
        Palette(config.get("palette"))

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(
            dump(cast(dict[str, Any], config), Dumper=Dumper)
        )

    def flush(self) -> None:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False

    def reload(self) -> None:
        self._config = None
        self.is_dirty = False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def get_palette(self) -> Palette:
        return Palette(self.config.get("palette"))

    def update_config(
        self,
        tick_seconds: Optional[float] = None,
        playback_speed: Optional[float] = None,
        refresh_interval_seconds: Optional[float] = None,
        highlight_critical_path: Optional[bool] = None,
        log_level: Optional[str] = None,
        schedule_path: Optional[str] = None,
        remove_schedule_path: bool = False,
    ) -> None:
        self.is_dirty = True

        if tick_seconds is not None:
            self.config["tick_seconds"] = tick_seconds
        if playback_speed is not None:
            self.config["playback_speed"] = playback_speed
        if refresh_interval_seconds is not None:
            self.config["refresh_interval_seconds"] = refresh_interval_seconds
        if highlight_critical_path is not None:
            self.config["highlight_critical_path"] = highlight_critical_path
        if log_level is not None:
            self.config["log_level"] = log_level.upper()
        if schedule_path is not None:
            self.config["schedule_path"] = schedule_path
        if remove_schedule_path:
            self.config["schedule_path"] = None

        self.__validate(self.config)


CONFIGURATION_REPO = ConfigurationRepository()

# SPDX-License-Identifier: MIT

import atexit
from typing import Any, cast

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from fourd import configuration
from fourd.logger import configure_logging
from fourd.repository.configuration import CONFIGURATION_REPO


def initialize() -> None:
    configuration.load_config_path_configuration()
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)

    __ensure_config_files()

    config = CONFIGURATION_REPO.get_config()
    configure_logging(config["log_level"])
    atexit.register(CONFIGURATION_REPO.flush)


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        configuration.APP_CONFIG_PATH.touch()
        config = configuration.get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(
            dump(cast(dict[str, Any], config), Dumper=Dumper)
        )

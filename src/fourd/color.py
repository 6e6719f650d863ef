# SPDX-License-Identifier: MIT

import re
from typing import Mapping, TypeAlias

from fourd.model.simulation import DrawState

Rgb: TypeAlias = tuple[int, int, int]

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

# Palette keys usable in the configuration file
NOT_STARTED = "not_started"
IN_PROGRESS = "in_progress"
IN_PROGRESS_PARTIAL = "in_progress_partial"
COMPLETED = "completed"
CRITICAL = "critical"
BEHIND = "behind"
DELAYED = "delayed"
FINISHED_AHEAD = "finished_ahead"
FINISHED_ON_TIME = "finished_on_time"
FINISHED_LATE = "finished_late"

DEFAULT_PALETTE: dict[str, str] = {
    NOT_STARTED: "#CCCCCC",
    IN_PROGRESS: "#3B82F6",
    IN_PROGRESS_PARTIAL: "#60A5FA",
    COMPLETED: "#16A34A",
    CRITICAL: "#DC2626",
    BEHIND: "#F97316",
    DELAYED: "#EA580C",
    FINISHED_AHEAD: "#10B981",
    FINISHED_ON_TIME: "#16A34A",
    FINISHED_LATE: "#F97316",
}


def hex_to_rgb(value: str) -> Rgb:
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"invalid hex color: {value!r}")
    red, green, blue = (int(group, 16) for group in match.groups())
    return (red, green, blue)


def rgb_to_hex(color: Rgb) -> str:
    return "#{:02X}{:02X}{:02X}".format(*color)


def interpolate(start: Rgb, end: Rgb, ratio: float) -> Rgb:
    """Component-wise linear interpolation, rounded to whole channel values."""
    ratio = min(1.0, max(0.0, ratio))
    red, green, blue = (
        round(start_channel + (end_channel - start_channel) * ratio)
        for start_channel, end_channel in zip(start, end)
    )
    return (red, green, blue)


class Palette:
    """
    Resolved status colors, keyed by palette name.

    Unknown override keys are rejected so that a typo in the configuration file
    does not silently fall back to a default.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        merged = dict(DEFAULT_PALETTE)
        if overrides:
            unknown = set(overrides) - set(DEFAULT_PALETTE)
            if unknown:
                raise ValueError(f"unknown palette keys: {', '.join(sorted(unknown))}")
            merged.update(overrides)
        self._colors: dict[str, Rgb] = {
            key: hex_to_rgb(value) for key, value in merged.items()
        }

    def __getitem__(self, key: str) -> Rgb:
        return self._colors[key]

    @property
    def not_started(self) -> Rgb:
        return self._colors[NOT_STARTED]

    @property
    def partial(self) -> Rgb:
        return self._colors[IN_PROGRESS_PARTIAL]

    @property
    def critical(self) -> Rgb:
        return self._colors[CRITICAL]

    def for_state(self, state: DrawState) -> Rgb:
        return self._colors[state.value]

    def items(self) -> list[tuple[str, Rgb]]:
        return list(self._colors.items())

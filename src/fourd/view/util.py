# SPDX-License-Identifier: MIT

from fourd.color import Rgb, rgb_to_hex
from fourd.model.simulation import DrawState


def format_color(color: Rgb) -> str:
    hex_color = rgb_to_hex(color)
    return f"[{hex_color}]■[/{hex_color}] {hex_color}"


def format_state(state: DrawState, color: Rgb) -> str:
    hex_color = rgb_to_hex(color)
    label = state.value.replace("_", " ")
    return f"[{hex_color}]{label}[/{hex_color}]"


def format_percent(ratio: float) -> str:
    return f"{ratio * 100:.0f}%"


def format_days(days: float) -> str:
    if float(days).is_integer():
        return str(int(days))
    return f"{days:.2f}"

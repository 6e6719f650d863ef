# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding


def header(schedule_name: str, sub_header: Optional[str] = None) -> None:
    """Print the application header with the schedule being simulated.

    Args:
        schedule_name: Name of the schedule file
        sub_header: Optional sub-header text to display
    """
    additional = ""
    if sub_header is not None:
        additional = f"[sandy_brown]{sub_header}[/sandy_brown]"

    print(Padding("[dark_orange]fourd[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(additional, (0, 1)))
    print(Padding(f"[plum1]{schedule_name}[/plum1]", (0, 1)))

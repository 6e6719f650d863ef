# SPDX-License-Identifier: MIT

from fourd.model.activity import Activity


def get_activity_template() -> Activity:
    return {
        "id": "",
        "name": "",
        "planned_start": None,
        "planned_end": None,
        "actual_start": None,
        "actual_end": None,
        "progress_percent": 0.0,
        "duration_days": None,
        "predecessor_ids": set(),
        "status": None,
    }

# SPDX-License-Identifier: MIT

from fourd.model.link import ElementActivityLink


def get_link_template() -> ElementActivityLink:
    return {
        "element_stable_id": "",
        "activity_id": "",
        "override_start": None,
        "override_end": None,
        "link_type": None,
        "status": None,
    }

# SPDX-License-Identifier: MIT

from typing import Any, Optional

import pendulum
import pytest

from fourd import configuration
from fourd.model.activity import Activity
from fourd.model.link import ElementActivityLink
from fourd.repository.configuration import CONFIGURATION_REPO
from fourd.template.activity import get_activity_template
from fourd.template.link import get_link_template

BASE_DATE = pendulum.date(2024, 3, 4)


def day(offset: int) -> pendulum.Date:
    return BASE_DATE.add(days=offset)


def make_activity(activity_id: str, **fields: Any) -> Activity:
    activity = get_activity_template()
    activity["id"] = activity_id
    activity["name"] = fields.pop("name", f"Activity {activity_id}")
    for key, value in fields.items():
        activity[key] = value  # type: ignore[literal-required]
    return activity


def make_link(element_id: str, activity_id: str, **fields: Any) -> ElementActivityLink:
    link = get_link_template()
    link["element_stable_id"] = element_id
    link["activity_id"] = activity_id
    for key, value in fields.items():
        link[key] = value  # type: ignore[literal-required]
    return link


@pytest.fixture
def wall_activity() -> Activity:
    """Ten-day activity, half done by report."""
    return make_activity(
        "A",
        name="Walls",
        planned_start=day(0),
        planned_end=day(10),
        progress_percent=50.0,
    )


@pytest.fixture
def wall_links() -> list[ElementActivityLink]:
    return [make_link(f"wall-{n}", "A") for n in (3, 1, 4, 2)]


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the configuration repository at a throwaway file."""
    config_path = tmp_path / "config" / "config.yaml"
    config_path.parent.mkdir()
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_path)
    monkeypatch.setattr(configuration, "CONFIG_PATH", config_path.parent)
    CONFIGURATION_REPO.reload()
    CONFIGURATION_REPO.is_dirty = False
    yield config_path
    CONFIGURATION_REPO.reload()
    CONFIGURATION_REPO.is_dirty = False


class FakeMeshClient:
    def __init__(self, objects: dict[str, dict[str, Any]]) -> None:
        self.objects = objects
        self.calls: list[tuple[Any, ...]] = []
        self.loaded_url: Optional[str] = None
        self.unloaded = False

    async def load_stream(self, stream_url: str) -> None:
        self.loaded_url = stream_url

    def object_ids(self) -> list[str]:
        return list(self.objects)

    def object_properties(self, object_id: str) -> dict[str, Any]:
        return self.objects[object_id]

    def isolate(self, object_ids: list[str], ghost: bool) -> None:
        self.calls.append(("isolate", object_ids, ghost))

    def hide(self, object_ids: list[str]) -> None:
        self.calls.append(("hide", object_ids))

    def hide_all(self) -> None:
        self.calls.append(("hide_all",))

    def show(self, object_ids: list[str]) -> None:
        self.calls.append(("show", object_ids))

    def reset_colors(self) -> None:
        self.calls.append(("reset_colors",))

    def set_object_colors(self, groups: list[Any], default_color: str) -> None:
        self.calls.append(("set_object_colors", groups, default_color))

    def canvas(self) -> str:
        return "mesh-canvas"

    async def unload(self) -> None:
        self.unloaded = True


class FakeCadViewer:
    def __init__(
        self,
        properties: dict[int, dict[str, Any]],
        failing_db_ids: frozenset[int] = frozenset(),
    ) -> None:
        self.properties = properties
        self.failing_db_ids = failing_db_ids
        self.calls: list[tuple[Any, ...]] = []
        self.theming: dict[int, tuple[float, float, float, float]] = {}
        self.document_id: Optional[str] = None
        self.unloaded = False

    async def load(self, document_id: str) -> None:
        self.document_id = document_id

    def db_ids(self) -> list[int]:
        return list(self.properties)

    async def get_properties(self, db_id: int) -> dict[str, Any]:
        return self.properties[db_id]

    def isolate(self, db_ids: list[int]) -> None:
        self.calls.append(("isolate", db_ids))

    def set_ghosting(self, enabled: bool) -> None:
        self.calls.append(("set_ghosting", enabled))

    def hide_all(self) -> None:
        self.calls.append(("hide_all",))

    def hide(self, db_ids: list[int]) -> None:
        self.calls.append(("hide", db_ids))

    def show(self, db_ids: list[int]) -> None:
        self.calls.append(("show", db_ids))

    def clear_theming_colors(self) -> None:
        self.calls.append(("clear_theming_colors",))
        self.theming.clear()

    def set_theming_color(self, db_id: int, color: tuple[float, float, float, float]) -> None:
        if db_id in self.failing_db_ids:
            raise RuntimeError(f"db id {db_id} has no fragments")
        self.theming[db_id] = color

    def invalidate(self) -> None:
        self.calls.append(("invalidate",))

    def canvas(self) -> str:
        return "cad-canvas"

    async def unload(self) -> None:
        self.unloaded = True


class FakeMesh:
    def __init__(self, express_id: int, global_id: Optional[str], broken: bool = False) -> None:
        self.express_id = express_id
        self.global_id = global_id
        self.visible = True
        self.material: Optional[tuple[str, float]] = None
        self.broken = broken

    def set_material(self, color: str, opacity: float) -> None:
        if self.broken:
            raise RuntimeError("geometry was not uploaded")
        self.material = (color, opacity)

    def restore_material(self) -> None:
        self.material = None


class FakeLoader:
    def __init__(self, meshes: list[FakeMesh]) -> None:
        self.meshes = meshes
        self.file_path: Optional[str] = None
        self.unloaded = False

    async def load(self, file_path: str) -> list[FakeMesh]:
        self.file_path = file_path
        return self.meshes

    def canvas(self) -> str:
        return "open-format-canvas"

    async def unload(self) -> None:
        self.unloaded = True

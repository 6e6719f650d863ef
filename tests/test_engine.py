# SPDX-License-Identifier: MIT

import pytest

from conftest import day, make_activity, make_link
from fourd.color import Palette
from fourd.model.frame import visible_ids
from fourd.model.simulation import DrawState
from fourd.service.engine import ProgressVisibilityEngine


@pytest.fixture
def engine(wall_activity, wall_links):
    return ProgressVisibilityEngine([wall_activity], wall_links)


class TestComputeFrameScenarios:
    """Reveal counts and colors for a four-element, ten-day activity."""

    def test_halfway_on_track(self, engine):
        frame = engine.compute_frame(day(5), "planned", "element-count", False)

        assert visible_ids(frame) == ["wall-1", "wall-2"]
        assert frame["elements"]["wall-1"]["color"] == engine.palette.for_state(
            DrawState.IN_PROGRESS
        )
        summary = frame["activities"][0]
        assert summary["state"] is DrawState.IN_PROGRESS
        assert summary["timeline_progress"] == 0.5
        assert (summary["visible_count"], summary["total_count"]) == (2, 4)

    def test_behind_reveals_all_in_warning_color(self, engine):
        frame = engine.compute_frame(day(8), "planned", "element-count", False)

        assert sorted(visible_ids(frame)) == ["wall-1", "wall-2", "wall-3", "wall-4"]
        assert {appearance["color"] for appearance in frame["elements"].values()} == {
            engine.palette.for_state(DrawState.BEHIND)
        }

    def test_before_start_everything_hidden(self, engine):
        frame = engine.compute_frame(day(-1), "planned", "element-count", False)

        assert visible_ids(frame) == []
        assert len(frame["elements"]) == 4


class TestComputeFrameProperties:
    def test_idempotent(self, engine):
        first = engine.compute_frame(day(6), "planned", "opacity", True)
        second = engine.compute_frame(day(6), "planned", "opacity", True)

        assert first == second

    def test_scrub_symmetry(self, engine):
        before = visible_ids(engine.compute_frame(day(3), "planned", "element-count", False))
        engine.compute_frame(day(9), "planned", "element-count", False)
        after = visible_ids(engine.compute_frame(day(3), "planned", "element-count", False))

        assert before == after

    def test_monotonic_reveal(self, engine):
        counts = [
            len(visible_ids(engine.compute_frame(day(offset), "planned", "element-count", False)))
            for offset in range(-2, 13)
        ]

        assert counts == sorted(counts)
        assert counts[-1] == 4


class TestVisualizationStyles:
    def test_opacity_style_shows_all_with_partial_shade(self, engine):
        frame = engine.compute_frame(day(5), "planned", "opacity", False)

        assert len(visible_ids(frame)) == 4
        appearance = frame["elements"]["wall-1"]
        assert appearance["opacity"] == pytest.approx(0.65)
        assert appearance["color"] == engine.palette.partial

    def test_color_gradient_blends_from_not_started(self, engine):
        frame = engine.compute_frame(day(5), "planned", "color-gradient", False)

        color = frame["elements"]["wall-1"]["color"]
        assert color not in (engine.palette.not_started, engine.palette.for_state(DrawState.IN_PROGRESS))

    def test_unknown_style(self, engine):
        with pytest.raises(ValueError):
            engine.compute_frame(day(5), "planned", "wireframe", False)  # type: ignore[arg-type]


class TestCriticalHighlight:
    def test_critical_replaces_on_track_color(self, engine):
        frame = engine.compute_frame(day(5), "planned", "element-count", True)

        assert frame["elements"]["wall-1"]["color"] == engine.palette.critical
        assert frame["activities"][0]["critical"] is True

    def test_warning_color_survives_highlight(self, engine):
        frame = engine.compute_frame(day(8), "planned", "element-count", True)

        assert frame["elements"]["wall-1"]["color"] == engine.palette.for_state(DrawState.BEHIND)

    def test_cycle_leaves_nothing_critical(self, caplog):
        activities = [
            make_activity("A", planned_start=day(0), planned_end=day(4), predecessor_ids={"B"}),
            make_activity("B", planned_start=day(0), planned_end=day(4), predecessor_ids={"A"}),
        ]
        engine = ProgressVisibilityEngine(activities, [make_link("e1", "A")])

        frame = engine.compute_frame(day(2), "planned", "element-count", True)

        assert engine.critical_path["critical_ids"] == frozenset()
        assert frame["elements"]["e1"]["visible"] is True
        assert "Cycle detected" in caplog.text


class TestLayering:
    def test_shared_element_last_visible_write_wins(self):
        activities = [
            make_activity("A", planned_start=day(0), planned_end=day(2), progress_percent=100),
            make_activity("B", planned_start=day(5), planned_end=day(9)),
        ]
        engine = ProgressVisibilityEngine(
            activities, [make_link("slab", "A"), make_link("slab", "B")]
        )

        frame = engine.compute_frame(day(3), "planned", "element-count", False)

        # B has not started, so its hidden entry must not hide A's completed slab
        assert frame["elements"]["slab"]["visible"] is True
        assert frame["elements"]["slab"]["color"] == engine.palette.for_state(DrawState.COMPLETED)

        later = engine.compute_frame(day(7), "planned", "element-count", False)
        assert later["elements"]["slab"]["color"] == engine.palette.for_state(DrawState.BEHIND)

    def test_link_overrides_get_their_own_window(self, wall_activity):
        links = [
            make_link("early", "A", override_start=day(0), override_end=day(2)),
            make_link("late", "A", override_start=day(6), override_end=day(10)),
        ]
        engine = ProgressVisibilityEngine([wall_activity], links)

        frame = engine.compute_frame(day(3), "planned", "element-count", False)

        assert visible_ids(frame) == ["early"]

    def test_invalid_dates_never_shown(self, caplog):
        activity = make_activity("A", planned_start=day(9), planned_end=day(1))
        engine = ProgressVisibilityEngine([activity], [make_link("e1", "A")])

        frame = engine.compute_frame(day(5), "planned", "element-count", False)

        assert visible_ids(frame) == []
        assert "ends before it starts" in caplog.text


class TestUpdateSchedule:
    def test_swaps_schedule_and_critical_path(self, engine):
        generation = engine.generation
        engine.update_schedule(
            [make_activity("Z", planned_start=day(0), planned_end=day(1), duration_days=1)],
            [make_link("z1", "Z")],
        )

        assert engine.generation == generation + 1
        assert engine.critical_path["critical_ids"] == frozenset({"Z"})
        assert engine.link_index.element_ids() == ["z1"]

    def test_palette_override(self, wall_activity, wall_links):
        engine = ProgressVisibilityEngine(
            [wall_activity], wall_links, palette=Palette({"in_progress": "#000000"})
        )

        frame = engine.compute_frame(day(5), "planned", "element-count", False)

        assert frame["elements"]["wall-1"]["color"] == (0, 0, 0)

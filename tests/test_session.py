# SPDX-License-Identifier: MIT

import asyncio
import logging

import pytest

from conftest import day, make_activity, make_link
from fourd.model.frame import visible_ids
from fourd.playback.controller import TimelineController
from fourd.playback.loop import poll_schedule, run_playback
from fourd.playback.session import SimulationSession
from fourd.service.engine import ProgressVisibilityEngine
from fourd.viewer.recording import RecordingAdapter


async def no_wait(_):
    await asyncio.sleep(0)


@pytest.fixture
def session(wall_activity, wall_links):
    engine = ProgressVisibilityEngine([wall_activity], wall_links)
    controller = TimelineController((day(0), day(10)))
    return SimulationSession(engine, controller, sleep=no_wait)


class StaticProvider:
    def __init__(self, snapshots):
        self.snapshots = list(snapshots)
        self.loads = 0

    def load(self):
        self.loads += 1
        return self.snapshots[min(self.loads, len(self.snapshots)) - 1]


class TestSimulationSession:
    """Rendering, playback and viewer switching."""

    def test_mount_renders_current_date(self, session):
        viewer = RecordingAdapter()
        asyncio.run(session.mount(viewer))

        assert viewer.is_ready
        assert session.last_frame["date"] == day(0)
        assert viewer.visible == set()

    def test_scrub_renders_immediately(self, session):
        viewer = RecordingAdapter()
        asyncio.run(session.mount(viewer))

        session.controller.scrub(5)

        assert session.last_frame["date"] == day(5)
        assert viewer.visible == {"wall-1", "wall-2"}

    def test_play_runs_to_end(self, session):
        viewer = RecordingAdapter()
        rendered = []

        async def scenario():
            await session.mount(viewer)
            session.controller.subscribe(lambda c: rendered.append(c.current_date))
            await session.play()

        asyncio.run(scenario())

        assert rendered[-1] == day(10)
        assert len(rendered) == 10
        assert session.controller.state == "stopped"
        assert viewer.visible == {"wall-1", "wall-2", "wall-3", "wall-4"}

    def test_switch_viewer_disposes_old_and_stops_playback(self, session):
        first = RecordingAdapter()
        second = RecordingAdapter()

        async def scenario():
            await session.mount(first)

            async def never(_):
                await asyncio.Event().wait()

            session._sleep = never
            task = session.play()
            await asyncio.sleep(0)
            await session.switch_viewer(second)
            return task

        task = asyncio.run(scenario())

        assert task.cancelled()
        assert first.disposed
        assert session.controller.state == "stopped"
        assert session.adapter is second
        assert second.calls[0] == ("initialize", None)

    def test_refresh_recomputes_now(self, session):
        viewer = RecordingAdapter()
        asyncio.run(session.mount(viewer))
        session.controller.jump_to(day(5))

        frame = session.refresh(
            {
                "activities": [
                    make_activity("B", planned_start=day(0), planned_end=day(4), progress_percent=100)
                ],
                "links": [make_link("beam-1", "B")],
                "elements": [],
                "fingerprint": "v2",
            }
        )

        assert session.controller.end_date == day(4)
        assert session.controller.current_date == day(4)
        assert visible_ids(frame) == ["beam-1"]
        assert viewer.visible == {"beam-1"}

    def test_close_disposes_viewer(self, session):
        viewer = RecordingAdapter()

        async def scenario():
            await session.mount(viewer)
            await session.close()

        asyncio.run(scenario())

        assert viewer.disposed
        assert session.adapter is None

    def test_playback_survives_a_failing_viewer(self, session):
        class FlakyViewer(RecordingAdapter):
            def show_objects(self, ids):
                raise RuntimeError("renderer lost its context")

        viewer = FlakyViewer()

        async def scenario():
            await session.mount(viewer)
            await session.play()

        asyncio.run(scenario())

        assert session.controller.current_date == day(10)
        assert session.controller.state == "stopped"
        assert viewer.calls[-1][0] == "set_color_filter"

    def test_refresh_keeps_a_pinned_timeframe(self, wall_activity, wall_links):
        engine = ProgressVisibilityEngine([wall_activity], wall_links)
        controller = TimelineController((day(2), day(6)))
        session = SimulationSession(engine, controller, sleep=no_wait, keep_timeframe=True)

        session.refresh(
            {
                "activities": [wall_activity],
                "links": wall_links,
                "elements": [],
                "fingerprint": "v2",
            }
        )

        assert controller.start_date == day(2)
        assert controller.end_date == day(6)


class TestPolling:
    """Background schedule polling owned by a session."""

    def test_restarting_polling_cancels_the_previous_task(self, wall_activity, wall_links):
        async def never(_):
            await asyncio.Event().wait()

        engine = ProgressVisibilityEngine([wall_activity], wall_links)
        session = SimulationSession(engine, TimelineController((day(0), day(10))), sleep=never)
        provider = StaticProvider([{"activities": [], "links": [], "elements": [], "fingerprint": "a"}])

        async def scenario():
            first = session.start_polling(provider, 1.0)
            second = session.start_polling(provider, 1.0)
            await session.close()
            return first, second

        first, second = asyncio.run(scenario())

        assert first.cancelled()
        assert second.cancelled()
        assert provider.loads == 0

    def test_close_logs_a_failed_poll_task(self, session, caplog):
        class BrokenProvider:
            def load(self):
                raise RuntimeError("disk vanished")

        async def scenario():
            task = session.start_polling(BrokenProvider(), 1.0)
            while not task.done():
                await asyncio.sleep(0)
            await session.close()

        with caplog.at_level(logging.ERROR):
            asyncio.run(scenario())

        assert "background task failed: disk vanished" in caplog.text


class TestLoops:
    def test_run_playback_ticks_with_interval(self):
        controller = TimelineController((day(0), day(2)), speed=2.0, tick_seconds=1.0)
        waits = []

        async def sleep(seconds):
            waits.append(seconds)

        controller.play()
        asyncio.run(run_playback(controller, sleep))

        assert waits == [0.5, 0.5]
        assert controller.current_date == day(2)

    def test_poll_only_reports_changes(self):
        base = {"activities": [], "links": [], "elements": []}
        provider = StaticProvider(
            [dict(base, fingerprint="a"), dict(base, fingerprint="a"), dict(base, fingerprint="b")]
        )
        changes = []

        asyncio.run(
            poll_schedule(provider, changes.append, 10.0, no_wait, fingerprint=None, max_polls=3)
        )

        assert [snapshot["fingerprint"] for snapshot in changes] == ["a", "b"]
        assert provider.loads == 3

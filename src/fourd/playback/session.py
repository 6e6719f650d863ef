# SPDX-License-Identifier: MIT

import asyncio
import contextlib
import logging
from typing import Optional

from fourd.model.frame import VisibilityFrame
from fourd.model.schedule import ScheduleSnapshot
from fourd.playback.controller import TimelineController
from fourd.playback.loop import ScheduleProvider, Sleep, poll_schedule, run_playback
from fourd.service.engine import ProgressVisibilityEngine
from fourd.service.timeframe import project_timeframe
from fourd.viewer.apply import apply_frame
from fourd.viewer.protocol import ViewerAdapter

logger = logging.getLogger(__name__)


async def _cancel(task: Optional[asyncio.Task]) -> None:
    """Cancel and await a task; a task that already failed has its error logged."""
    if task is None:
        return
    if task.done():
        if not task.cancelled() and task.exception() is not None:
            logger.error("background task failed: %s", task.exception())
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


class SimulationSession:
    """
    Ties the engine, the timeline controller and the mounted viewer together.

    Every controller change renders a fresh frame. Each render takes a new
    token; a frame stops being applied as soon as a newer render or a viewer
    switch takes a newer one.

    With keep_timeframe set, schedule refreshes leave the controller's range
    alone, so a range chosen by the user survives reloads.
    """

    def __init__(
        self,
        engine: ProgressVisibilityEngine,
        controller: TimelineController,
        sleep: Sleep = asyncio.sleep,
        keep_timeframe: bool = False,
    ) -> None:
        self.engine = engine
        self.controller = controller
        self.keep_timeframe = keep_timeframe
        self.last_frame: Optional[VisibilityFrame] = None
        self._sleep = sleep
        self._adapter: Optional[ViewerAdapter] = None
        self._token = 0
        self._playback_task: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._retired_tasks: list[asyncio.Task] = []
        self._unsubscribe = controller.subscribe(lambda _: self.render())

    @property
    def adapter(self) -> Optional[ViewerAdapter]:
        return self._adapter

    @property
    def is_playing(self) -> bool:
        return self._playback_task is not None and not self._playback_task.done()

    async def mount(self, adapter: ViewerAdapter) -> None:
        await self.switch_viewer(adapter)

    async def switch_viewer(self, adapter: ViewerAdapter) -> None:
        """
        Replace the mounted viewer.

        Playback stops and in-flight frames are abandoned before the old
        viewer is disposed; the new viewer gets the current frame once loaded.
        """
        await self.stop()
        self._token += 1
        previous, self._adapter = self._adapter, None
        if previous is not None:
            await previous.dispose()
        await adapter.initialize()
        self._adapter = adapter
        self.render()

    def render(self) -> Optional[VisibilityFrame]:
        current_date = self.controller.current_date
        if current_date is None:
            return None

        self._token += 1
        token = self._token
        frame = self.engine.compute_frame(
            current_date,
            self.controller.mode,
            self.controller.style,
            self.controller.highlight_critical_path,
        )
        self.last_frame = frame

        adapter = self._adapter
        if adapter is not None and adapter.is_ready:
            apply_frame(
                adapter,
                frame,
                self.engine.palette.not_started,
                lambda: token == self._token and self._adapter is adapter,
            )
        return frame

    def refresh(self, snapshot: ScheduleSnapshot) -> Optional[VisibilityFrame]:
        """Swap in a new schedule and render it without waiting for a tick."""
        self.engine.update_schedule(snapshot["activities"], snapshot["links"])
        timeframe = project_timeframe(snapshot["activities"], snapshot["links"])
        if timeframe is not None and not self.keep_timeframe:
            self.controller.set_timeframe(*timeframe)
        return self.render()

    def play(self) -> asyncio.Task:
        self.controller.play()
        if not self.is_playing:
            self._playback_task = asyncio.create_task(
                run_playback(self.controller, self._sleep)
            )
        return self._playback_task  # type: ignore[return-value]

    async def stop(self) -> None:
        self.controller.pause()
        await _cancel(self._playback_task)
        self._playback_task = None

    def start_polling(
        self,
        provider: ScheduleProvider,
        interval: float,
        fingerprint: Optional[str] = None,
    ) -> asyncio.Task:
        if self._poll_task is not None:
            if not self._poll_task.done():
                self._poll_task.cancel()
            self._retired_tasks.append(self._poll_task)
        self._poll_task = asyncio.create_task(
            poll_schedule(provider, self.refresh, interval, self._sleep, fingerprint)
        )
        return self._poll_task

    async def close(self) -> None:
        await self.stop()
        for task in [*self._retired_tasks, self._poll_task]:
            await _cancel(task)
        self._retired_tasks.clear()
        self._poll_task = None
        self._unsubscribe()
        self._token += 1
        previous, self._adapter = self._adapter, None
        if previous is not None:
            await previous.dispose()

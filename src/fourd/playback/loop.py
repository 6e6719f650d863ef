# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol, TypeAlias

from fourd.errors import ScheduleLoadError
from fourd.model.schedule import ScheduleSnapshot
from fourd.playback.controller import TimelineController

logger = logging.getLogger(__name__)

Sleep: TypeAlias = Callable[[float], Awaitable[None]]


class ScheduleProvider(Protocol):
    def load(self) -> ScheduleSnapshot: ...


async def run_playback(
    controller: TimelineController, sleep: Sleep = asyncio.sleep
) -> None:
    """Tick the controller once per tick interval until playback stops."""
    while controller.state == "playing":
        await sleep(controller.tick_interval)
        if controller.state != "playing":
            break
        controller.tick()


async def poll_schedule(
    provider: ScheduleProvider,
    on_change: Callable[[ScheduleSnapshot], None],
    interval: float,
    sleep: Sleep = asyncio.sleep,
    fingerprint: Optional[str] = None,
    max_polls: Optional[int] = None,
) -> None:
    """
    Reload the schedule every interval seconds and hand over changed snapshots.

    A snapshot counts as changed when its fingerprint differs from the last one
    seen. A failed load is logged and retried on the next poll.
    """
    polls = 0
    while max_polls is None or polls < max_polls:
        await sleep(interval)
        polls += 1
        try:
            snapshot = provider.load()
        except ScheduleLoadError as e:
            logger.warning("schedule refresh failed: %s", e)
            continue
        if snapshot["fingerprint"] == fingerprint:
            continue
        fingerprint = snapshot["fingerprint"]
        logger.info("schedule changed, refreshing")
        on_change(snapshot)

# SPDX-License-Identifier: MIT

import logging
from typing import Callable, Optional, TypeAlias

import pendulum

from fourd.model.simulation import (
    SIMULATION_MODES,
    VISUALIZATION_STYLES,
    PlaybackState,
    SimulationMode,
    VisualizationStyle,
)
from fourd.time import add_days, days_between

logger = logging.getLogger(__name__)

Listener: TypeAlias = Callable[["TimelineController"], None]


class TimelineController:
    """
    Playback state machine over the project timeframe.

    States are `stopped`, `playing` and `scrubbing`. While playing, each tick
    advances the current date by one day until the end date, where playback
    stops. Scrubbing, jumping and changing mode, style or critical-path
    highlighting notify subscribers synchronously so they can recompute the
    frame before the call returns.
    """

    def __init__(
        self,
        timeframe: Optional[tuple[pendulum.Date, pendulum.Date]] = None,
        mode: SimulationMode = "planned",
        style: VisualizationStyle = "element-count",
        highlight_critical_path: bool = False,
        speed: float = 1.0,
        tick_seconds: float = 1.0,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")
        self._listeners: list[Listener] = []
        self._state: PlaybackState = "stopped"
        self._start: Optional[pendulum.Date] = None
        self._end: Optional[pendulum.Date] = None
        self._current_date: Optional[pendulum.Date] = None
        self._tick_seconds = tick_seconds
        self._speed = 1.0
        self._mode: SimulationMode = "planned"
        self._style: VisualizationStyle = "element-count"
        self._highlight_critical_path = highlight_critical_path

        self.set_speed(speed)
        self._mode = _validated_mode(mode)
        self._style = _validated_style(style)
        if timeframe is not None:
            self.set_timeframe(*timeframe)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_date(self) -> Optional[pendulum.Date]:
        return self._current_date

    @property
    def start_date(self) -> Optional[pendulum.Date]:
        return self._start

    @property
    def end_date(self) -> Optional[pendulum.Date]:
        return self._end

    @property
    def mode(self) -> SimulationMode:
        return self._mode

    @property
    def style(self) -> VisualizationStyle:
        return self._style

    @property
    def highlight_critical_path(self) -> bool:
        return self._highlight_critical_path

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def tick_interval(self) -> float:
        """Seconds between day advances at the current speed."""
        return self._tick_seconds / self._speed

    @property
    def day_index(self) -> int:
        if self._start is None or self._current_date is None:
            return 0
        return days_between(self._start, self._current_date)

    @property
    def total_days(self) -> int:
        if self._start is None or self._end is None:
            return 0
        return days_between(self._start, self._end)

    @property
    def percent_complete(self) -> float:
        if self.total_days == 0:
            return 0.0 if self._current_date is None else 100.0
        return 100.0 * self.day_index / self.total_days

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Returns:
            a callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _clamp(self, date: pendulum.Date) -> pendulum.Date:
        assert self._start is not None and self._end is not None
        return min(max(date, self._start), self._end)

    def set_timeframe(self, start: pendulum.Date, end: pendulum.Date) -> None:
        """
        Replace the playable range, keeping the current date where possible.

        Subscribers are not notified; the caller renders after it has swapped
        in whatever changed along with the timeframe.
        """
        if end < start:
            raise ValueError(f"timeframe end {end} is before start {start}")
        self._start = start
        self._end = end
        if self._current_date is None:
            self._current_date = start
        else:
            self._current_date = self._clamp(self._current_date)

    def play(self) -> None:
        if self._current_date is None:
            logger.debug("play ignored, no timeframe")
            return
        if self._current_date >= self._end:  # type: ignore[operator]
            self._current_date = self._start
            self._state = "playing"
            self._notify()
            return
        self._state = "playing"

    def pause(self) -> None:
        if self._state == "playing":
            self._state = "stopped"

    def reset(self) -> None:
        self._state = "stopped"
        if self._start is not None:
            self._current_date = self._start
            self._notify()

    def tick(self) -> bool:
        """
        Advance one day while playing.

        Returns:
            True while playback continues after this tick
        """
        if self._state != "playing" or self._current_date is None:
            return False
        self._current_date = self._clamp(add_days(self._current_date, 1))
        if self._current_date >= self._end:  # type: ignore[operator]
            self._state = "stopped"
        self._notify()
        return self._state == "playing"

    def begin_scrub(self) -> None:
        if self._current_date is not None:
            self._state = "scrubbing"

    def scrub(self, offset_days: int) -> None:
        """Set the current date to start + offset_days and recompute now."""
        if self._start is None:
            return
        self._state = "scrubbing"
        self._current_date = self._clamp(add_days(self._start, offset_days))
        self._notify()

    def end_scrub(self) -> None:
        if self._state == "scrubbing":
            self._state = "stopped"

    def jump_to(self, date: pendulum.Date) -> None:
        if self._start is None:
            return
        self._current_date = self._clamp(date)
        self._notify()

    def set_speed(self, speed: float) -> None:
        if speed <= 0:
            raise ValueError(f"playback speed must be positive, got {speed}")
        self._speed = speed

    def set_mode(self, mode: SimulationMode) -> None:
        self._mode = _validated_mode(mode)
        self._notify()

    def set_style(self, style: VisualizationStyle) -> None:
        self._style = _validated_style(style)
        self._notify()

    def set_highlight(self, highlight_critical_path: bool) -> None:
        self._highlight_critical_path = highlight_critical_path
        self._notify()


def _validated_mode(mode: str) -> SimulationMode:
    if mode not in SIMULATION_MODES:
        raise ValueError(f"unknown simulation mode: {mode}")
    return mode  # type: ignore[return-value]


def _validated_style(style: str) -> VisualizationStyle:
    if style not in VISUALIZATION_STYLES:
        raise ValueError(f"unknown visualization style: {style}")
    return style  # type: ignore[return-value]

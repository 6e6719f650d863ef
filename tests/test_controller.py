# SPDX-License-Identifier: MIT

import pytest

from conftest import day
from fourd.playback.controller import TimelineController


@pytest.fixture
def controller():
    return TimelineController((day(0), day(3)))


def record(controller):
    dates = []
    controller.subscribe(lambda c: dates.append(c.current_date))
    return dates


class TestPlayback:
    """Day-by-day advance until the end of the timeframe."""

    def test_starts_stopped_at_start(self, controller):
        assert controller.state == "stopped"
        assert controller.current_date == day(0)
        assert (controller.start_date, controller.end_date) == (day(0), day(3))

    def test_ticks_until_end_then_stops(self, controller):
        dates = record(controller)
        controller.play()

        while controller.tick():
            pass

        assert dates == [day(1), day(2), day(3)]
        assert controller.state == "stopped"
        assert controller.current_date == day(3)

    def test_tick_does_nothing_when_stopped(self, controller):
        assert controller.tick() is False
        assert controller.current_date == day(0)

    def test_play_at_end_restarts(self, controller):
        controller.jump_to(day(3))
        dates = record(controller)

        controller.play()

        assert controller.state == "playing"
        assert dates == [day(0)]

    def test_pause(self, controller):
        controller.play()
        controller.pause()

        assert controller.state == "stopped"
        assert controller.tick() is False

    def test_reset(self, controller):
        controller.play()
        controller.tick()
        controller.reset()

        assert controller.state == "stopped"
        assert controller.current_date == day(0)


class TestScrubbing:
    def test_scrub_notifies_synchronously(self, controller):
        dates = record(controller)
        controller.begin_scrub()

        controller.scrub(2)
        controller.scrub(1)

        assert controller.state == "scrubbing"
        assert dates == [day(2), day(1)]

    def test_scrub_is_clamped(self, controller):
        controller.scrub(40)
        assert controller.current_date == day(3)
        controller.scrub(-5)
        assert controller.current_date == day(0)

    def test_scrub_interrupts_playback(self, controller):
        controller.play()
        controller.scrub(1)

        assert controller.state == "scrubbing"
        assert controller.tick() is False

        controller.end_scrub()
        assert controller.state == "stopped"

    def test_jump_to(self, controller):
        dates = record(controller)
        controller.jump_to(day(2))
        controller.jump_to(day(99))

        assert dates == [day(2), day(3)]


class TestSettings:
    def test_speed_divides_tick(self):
        controller = TimelineController((day(0), day(3)), speed=4.0, tick_seconds=2.0)

        assert controller.tick_interval == 0.5

    @pytest.mark.parametrize("speed", [0, -1.5])
    def test_speed_must_be_positive(self, controller, speed):
        with pytest.raises(ValueError):
            controller.set_speed(speed)

    def test_mode_style_highlight_notify(self, controller):
        dates = record(controller)

        controller.set_mode("actual")
        controller.set_style("opacity")
        controller.set_highlight(True)

        assert len(dates) == 3
        assert controller.mode == "actual"
        assert controller.style == "opacity"
        assert controller.highlight_critical_path is True

    def test_invalid_mode(self, controller):
        with pytest.raises(ValueError):
            controller.set_mode("forecast")  # type: ignore[arg-type]

    def test_unsubscribe(self, controller):
        dates = []
        unsubscribe = controller.subscribe(lambda c: dates.append(c.current_date))
        unsubscribe()

        controller.jump_to(day(1))

        assert dates == []


class TestReadout:
    def test_day_counter(self, controller):
        controller.jump_to(day(1))

        assert controller.day_index == 1
        assert controller.total_days == 3
        assert controller.percent_complete == pytest.approx(100 / 3)

    def test_without_timeframe(self):
        controller = TimelineController()

        controller.play()
        controller.scrub(3)

        assert controller.state == "stopped"
        assert controller.current_date is None
        assert controller.percent_complete == 0.0

    def test_set_timeframe_keeps_current_date(self, controller):
        controller.jump_to(day(2))
        controller.set_timeframe(day(1), day(10))

        assert controller.current_date == day(2)

        controller.set_timeframe(day(5), day(10))
        assert controller.current_date == day(5)

    def test_set_timeframe_rejects_inverted(self, controller):
        with pytest.raises(ValueError):
            controller.set_timeframe(day(5), day(1))

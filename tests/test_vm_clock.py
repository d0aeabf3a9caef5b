"""
Timer and timer-scheduling tests.

The scheduler runs against the FakeClock fixture, so no test sleeps.
"""

import pytest

from chip8vm.vm import TimerScheduler, Timers


class TestTimers:
    """Delay and sound timer registers."""

    def test_tick_decrements_both(self):
        timers = Timers(delay=3, sound=2)
        timers.tick()
        assert (timers.delay, timers.sound) == (2, 1)

    def test_tick_floors_at_zero(self):
        timers = Timers(delay=1, sound=0)
        timers.tick()
        timers.tick()
        assert (timers.delay, timers.sound) == (0, 0)

    def test_tick_reports_tone(self):
        timers = Timers(sound=2)
        assert timers.tick() is True
        assert timers.tick() is False

    def test_tone_property(self):
        timers = Timers()
        assert not timers.tone
        timers.sound = 1
        assert timers.tone

    def test_reset(self):
        timers = Timers(delay=9, sound=9)
        timers.reset()
        assert (timers.delay, timers.sound) == (0, 0)


class TestTimerScheduler:
    """60 Hz boundary detection."""

    def test_nothing_due_at_start(self, fake_clock):
        scheduler = TimerScheduler(clock=fake_clock)
        assert scheduler.poll() == 0

    def test_boundary_consumed_once(self, fake_clock):
        scheduler = TimerScheduler(clock=fake_clock)
        fake_clock.advance(1 / 60)
        assert scheduler.poll() == 1
        assert scheduler.poll() == 0
        fake_clock.advance(0.001)
        assert scheduler.poll() == 0

    def test_many_fast_polls_inside_one_period(self, fake_clock):
        scheduler = TimerScheduler(clock=fake_clock)
        ticks = 0
        for _ in range(12):
            fake_clock.advance(1 / 720)
            ticks += scheduler.poll()
        assert ticks == 1

    def test_slow_loop_catches_up(self, fake_clock):
        scheduler = TimerScheduler(clock=fake_clock)
        fake_clock.advance(0.05)
        assert scheduler.poll() == 3
        assert scheduler.consumed == 3

    def test_one_second_gives_sixty_ticks(self, fake_clock):
        scheduler = TimerScheduler(clock=fake_clock)
        ticks = 0
        for _ in range(1000):
            fake_clock.advance(0.001)
            ticks += scheduler.poll()
        assert ticks == 60

    def test_restart(self, fake_clock):
        scheduler = TimerScheduler(clock=fake_clock)
        fake_clock.advance(1.0)
        scheduler.restart()
        assert scheduler.poll() == 0
        assert scheduler.elapsed == 0

    def test_custom_frequency(self, fake_clock):
        scheduler = TimerScheduler(frequency=10, clock=fake_clock)
        assert scheduler.period == pytest.approx(0.1)
        fake_clock.advance(0.25)
        assert scheduler.poll() == 2

    @pytest.mark.parametrize("frequency", [0, -60])
    def test_invalid_frequency(self, frequency):
        with pytest.raises(ValueError):
            TimerScheduler(frequency=frequency)

"""Tests for PresenceTimer (ticking, grace period debounce, finalize)."""

import pytest

from presence_module.models import FinalizedDuration, PresenceState, TimerState
from presence_module.timer import PresenceTimer


class _FakeHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for the event loop's time()/call_at() surface."""

    def __init__(self):
        self.now = 0.0
        self._handles = []

    def time(self):
        return self.now

    def call_at(self, when, callback, *args):
        handle = _FakeHandle(when, callback, args)
        self._handles.append(handle)
        return handle

    def call_later(self, delay, callback, *args):
        return self.call_at(self.now + delay, callback, *args)

    def active_handles(self):
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self._handles if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target


def _make_timer():
    scheduler = FakeScheduler()
    reports = []
    timer = PresenceTimer(scheduler, on_finalize=reports.append)
    return scheduler, timer, reports


class TestPresenceTimer:
    """Test suite for the presence timer state machine."""

    def test_starts_idle(self):
        """A fresh timer is idle with nothing elapsed."""
        _, timer, _ = _make_timer()
        assert timer.state is PresenceState.IDLE
        assert timer.snapshot() == TimerState(elapsed_seconds=0, running=False)

    def test_hands_start_running_and_tick_each_second(self):
        """Presence moves to running and counts whole seconds."""
        scheduler, timer, _ = _make_timer()
        assert timer.observe(1) is PresenceState.RUNNING

        scheduler.advance(0.75)
        assert timer.elapsed_seconds == 0
        scheduler.advance(0.25)
        assert timer.elapsed_seconds == 1
        scheduler.advance(4)
        assert timer.elapsed_seconds == 5
        assert timer.snapshot() == TimerState(elapsed_seconds=5, running=True)

    def test_repeated_samples_do_not_restart_tick(self):
        """Samples arriving every frame must not reset the tick phase."""
        scheduler, timer, _ = _make_timer()
        timer.observe(2)
        for _ in range(32):
            scheduler.advance(1 / 32)
            timer.observe(2)
        assert timer.elapsed_seconds == 1
        assert len(scheduler.active_handles()) == 1

    def test_zero_hands_while_idle_stays_idle(self):
        """No presence and nothing counted leaves the timer idle."""
        scheduler, timer, reports = _make_timer()
        assert timer.observe(0) is PresenceState.IDLE
        scheduler.advance(10)
        assert timer.elapsed_seconds == 0
        assert reports == []

    def test_short_gap_is_debounced(self):
        """A gap shorter than the grace period keeps the count."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(3)
        assert timer.observe(0) is PresenceState.GRACE
        scheduler.advance(4.5)
        assert timer.elapsed_seconds == 3
        assert timer.observe(1) is PresenceState.RUNNING
        scheduler.advance(10)

        assert reports == []
        assert timer.elapsed_seconds == 13

    def test_gap_does_not_tick(self):
        """Seconds spent in the grace period are not counted."""
        scheduler, timer, _ = _make_timer()
        timer.observe(1)
        scheduler.advance(2)
        timer.observe(0)
        scheduler.advance(4)
        assert timer.elapsed_seconds == 2
        assert timer.running is False

    def test_long_gap_finalizes_once_and_resets(self):
        """Five seconds without hands reports the episode exactly once."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(7)
        timer.observe(0)
        for _ in range(10):
            scheduler.advance(1)
            timer.observe(0)

        assert reports == [FinalizedDuration(seconds=7)]
        assert timer.state is PresenceState.IDLE
        assert timer.elapsed_seconds == 0
        assert scheduler.active_handles() == []

    def test_finalize_fires_exactly_at_grace_deadline(self):
        """The grace delay is five seconds of wall-clock time."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(2)
        timer.observe(0)
        scheduler.advance(4.5)
        assert reports == []
        scheduler.advance(0.5)
        assert reports == [FinalizedDuration(seconds=2)]

    def test_partial_second_is_dropped_on_loss(self):
        """Only whole seconds are counted before presence is lost."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(2.7)
        timer.observe(0)
        scheduler.advance(5)
        assert reports == [FinalizedDuration(seconds=2)]

    def test_loss_before_first_second_reports_nothing(self):
        """An episode with zero elapsed seconds is never reported."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(0.5)
        assert timer.observe(0) is PresenceState.IDLE
        scheduler.advance(10)
        assert reports == []
        assert scheduler.active_handles() == []

    def test_new_episode_after_finalize_counts_from_zero(self):
        """After a report the next episode starts again at zero."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(3)
        timer.observe(0)
        scheduler.advance(5)
        timer.observe(1)
        scheduler.advance(2)
        timer.observe(0)
        scheduler.advance(5)
        assert reports == [FinalizedDuration(seconds=3), FinalizedDuration(seconds=2)]

    def test_repeated_gaps_arm_a_single_grace_delay(self):
        """Staying in the grace period does not re-arm the delay."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(1)
        timer.observe(0)
        timer.observe(0)
        timer.observe(0)
        assert len(scheduler.active_handles()) == 1
        scheduler.advance(5)
        assert reports == [FinalizedDuration(seconds=1)]

    def test_elapsed_is_monotonic_across_debounced_gaps(self):
        """With every gap under five seconds the count never goes down."""
        scheduler, timer, reports = _make_timer()
        pattern = [(1, 2.0), (0, 1.0), (2, 3.0), (0, 4.5), (1, 1.0), (0, 0.25), (1, 2.0)]
        previous = 0
        for hands, duration in pattern:
            timer.observe(hands)
            for _ in range(int(duration * 4)):
                scheduler.advance(0.25)
                assert timer.elapsed_seconds >= previous
                previous = timer.elapsed_seconds
        assert reports == []
        assert timer.elapsed_seconds == 8

    def test_finalize_callback_error_still_resets(self):
        """A failing report callback is logged and does not block the reset."""
        scheduler = FakeScheduler()

        def _boom(duration):
            raise RuntimeError("backend down")

        timer = PresenceTimer(scheduler, on_finalize=_boom)
        timer.observe(1)
        scheduler.advance(2)
        timer.observe(0)
        scheduler.advance(5)
        assert timer.state is PresenceState.IDLE
        assert timer.elapsed_seconds == 0

    def test_reset_cancels_pending_timers_without_reporting(self):
        """Tearing down mid-grace drops the episode."""
        scheduler, timer, reports = _make_timer()
        timer.observe(1)
        scheduler.advance(4)
        timer.observe(0)
        timer.reset()
        scheduler.advance(10)
        assert reports == []
        assert timer.snapshot() == TimerState()

    def test_custom_durations(self):
        """Tick and grace durations are configurable."""
        scheduler = FakeScheduler()
        reports = []
        timer = PresenceTimer(scheduler, on_finalize=reports.append, tick_secs=0.5, grace_secs=1.0)
        timer.observe(1)
        scheduler.advance(2)
        timer.observe(0)
        scheduler.advance(1)
        assert reports == [FinalizedDuration(seconds=4)]

    def test_invalid_durations_rejected(self):
        with pytest.raises(ValueError):
            PresenceTimer(FakeScheduler(), tick_secs=0)

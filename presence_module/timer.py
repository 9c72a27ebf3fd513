"""Presence timer: counts seconds while hands are visible.

The timer is driven by three sources that all run on one event loop thread:
per-frame samples (``observe``), a one-second tick scheduled only while
running, and a one-shot grace delay armed when presence is lost. The grace
delay debounces momentary detection dropouts; when it expires the accumulated
seconds are handed to ``on_finalize`` and the counter resets.

``scheduler`` is anything exposing the event loop's ``time()`` and
``call_at(when, callback)`` methods (an ``asyncio`` loop in production).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from presence_module.models import FinalizedDuration, PresenceState, TimerState
from utils.log_utils import log, log_error
from utils.settings_store import deep_log

DEFAULT_TICK_SECS = 1.0
DEFAULT_GRACE_SECS = 5.0


class PresenceTimer:
    def __init__(
        self,
        scheduler: Any,
        on_finalize: Callable[[FinalizedDuration], None] | None = None,
        *,
        tick_secs: float = DEFAULT_TICK_SECS,
        grace_secs: float = DEFAULT_GRACE_SECS,
    ) -> None:
        if tick_secs <= 0 or grace_secs < 0:
            raise ValueError("tick_secs must be > 0 and grace_secs >= 0")
        self._scheduler = scheduler
        self._on_finalize = on_finalize
        self.tick_secs = float(tick_secs)
        self.grace_secs = float(grace_secs)
        self._state = PresenceState.IDLE
        self._elapsed = 0
        self._tick_handle = None
        self._next_tick_at: float | None = None
        self._grace_handle = None

    @property
    def state(self) -> PresenceState:
        return self._state

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def running(self) -> bool:
        return self._state is PresenceState.RUNNING

    def snapshot(self) -> TimerState:
        return TimerState(elapsed_seconds=self._elapsed, running=self.running)

    def observe(self, hand_count: int) -> PresenceState:
        """Feed one frame's hand count and return the resulting state."""
        if hand_count >= 1:
            self._enter_running()
        elif self._state is PresenceState.RUNNING:
            self._leave_running()
        return self._state

    def reset(self) -> None:
        """Drop any pending timers and return to idle without reporting."""
        self._cancel_tick()
        self._cancel_grace()
        self._state = PresenceState.IDLE
        self._elapsed = 0

    close = reset

    def _enter_running(self) -> None:
        if self._state is PresenceState.RUNNING:
            return
        if self._state is PresenceState.GRACE:
            self._cancel_grace()
            log("PRESENCE", f"Presence resumed at {self._elapsed}s")
        self._state = PresenceState.RUNNING
        self._next_tick_at = self._scheduler.time() + self.tick_secs
        self._tick_handle = self._scheduler.call_at(self._next_tick_at, self._on_tick)

    def _leave_running(self) -> None:
        self._cancel_tick()
        if self._elapsed == 0:
            self._state = PresenceState.IDLE
            return
        self._state = PresenceState.GRACE
        self._grace_handle = self._scheduler.call_at(
            self._scheduler.time() + self.grace_secs, self._on_grace_expired
        )
        log("PRESENCE", f"Presence lost at {self._elapsed}s; waiting {self.grace_secs:g}s")

    def _on_tick(self) -> None:
        self._tick_handle = None
        if self._state is not PresenceState.RUNNING or self._next_tick_at is None:
            return
        self._elapsed += 1
        deep_log(f"[DEEP][PRESENCE] tick elapsed={self._elapsed}")
        # Anchor on the previous deadline so callback latency does not accumulate.
        self._next_tick_at += self.tick_secs
        self._tick_handle = self._scheduler.call_at(self._next_tick_at, self._on_tick)

    def _on_grace_expired(self) -> None:
        self._grace_handle = None
        if self._state is not PresenceState.GRACE:
            return
        duration = FinalizedDuration(seconds=self._elapsed)
        self._elapsed = 0
        self._state = PresenceState.IDLE
        log("PRESENCE", f"Episode finalized: {duration.seconds}s")
        if self._on_finalize is None:
            return
        try:
            self._on_finalize(duration)
        except Exception as exc:
            log_error("PRESENCE", "Finalize callback failed", exc)

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        self._next_tick_at = None

    def _cancel_grace(self) -> None:
        if self._grace_handle is not None:
            self._grace_handle.cancel()
            self._grace_handle = None

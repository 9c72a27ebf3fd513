"""Presence timer state machine and its display helpers.

``presence_module.session`` and ``presence_module.workflow`` pull in the
camera and stats stacks and are imported explicitly.
"""

from presence_module.labels import describe_hands, format_time
from presence_module.models import FinalizedDuration, PresenceSample, PresenceState, TimerState
from presence_module.timer import PresenceTimer

__all__ = [
    "FinalizedDuration",
    "PresenceSample",
    "PresenceState",
    "PresenceTimer",
    "TimerState",
    "describe_hands",
    "format_time",
]

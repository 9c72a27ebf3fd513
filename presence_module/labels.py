"""Display helpers for the camera status line."""

from __future__ import annotations

from presence_module.models import PresenceSample

NO_HANDS = "No Hands Detected"
BOTH_HANDS = "Both Hands Detected"
LEFT_HAND = "Left Hand Detected"
RIGHT_HAND = "Right Hand Detected"


def describe_hands(sample: PresenceSample | None) -> str:
    """Return the user-facing presence label for a sample.

    A single hand is shown with the opposite of the detector's handedness:
    the detector sees the raw camera frame while the user sees a mirrored
    preview.
    """
    if sample is None or sample.hand_count == 0:
        return NO_HANDS
    if sample.hand_count >= 2:
        return BOTH_HANDS
    handedness = sample.handedness[0] if sample.handedness else None
    return LEFT_HAND if handedness == "Right" else RIGHT_HAND


def format_time(seconds: int) -> str:
    """Format a second count as ``mm:ss``."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"

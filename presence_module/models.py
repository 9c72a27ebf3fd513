"""Value types shared by the presence timer, the detector and the session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PresenceState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    GRACE = "grace"


@dataclass(frozen=True)
class PresenceSample:
    """Per-frame detector output: how many hands, and their reported handedness."""

    hand_count: int
    handedness: tuple[str | None, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.hand_count < 0:
            raise ValueError(f"hand_count must be >= 0, got {self.hand_count}")

    @classmethod
    def from_labels(cls, labels) -> "PresenceSample":
        labels = tuple(labels)
        return cls(hand_count=len(labels), handedness=labels)


@dataclass(frozen=True)
class TimerState:
    elapsed_seconds: int = 0
    running: bool = False


@dataclass(frozen=True)
class FinalizedDuration:
    seconds: int

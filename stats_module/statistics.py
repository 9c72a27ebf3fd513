"""Aggregate statistics over recorded presence durations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from stats_module.client import TimeRecord

GOOD_THRESHOLD_SECS = 300


@dataclass(frozen=True)
class TimeStatistics:
    count: int = 0
    max_seconds: int = 0
    min_seconds: int = 0
    average_seconds: float = 0.0
    good_count: int = 0

    @property
    def not_good_count(self) -> int:
        return self.count - self.good_count

    @property
    def average_display(self) -> str:
        return f"{self.average_seconds:.2f}"

    def as_dict(self) -> dict:
        return {
            "count": self.count,
            "max": self.max_seconds,
            "min": self.min_seconds,
            "average": self.average_display,
            "good": self.good_count,
            "not_good": self.not_good_count,
        }


def compute_statistics(
    records: Iterable[TimeRecord], *, good_threshold: int = GOOD_THRESHOLD_SECS
) -> TimeStatistics:
    """Max, min, mean and the count of records strictly above ``good_threshold``."""
    seconds = [record.seconds for record in records]
    if not seconds:
        return TimeStatistics()
    return TimeStatistics(
        count=len(seconds),
        max_seconds=max(seconds),
        min_seconds=min(seconds),
        average_seconds=sum(seconds) / len(seconds),
        good_count=sum(1 for value in seconds if value > good_threshold),
    )


def format_record_date(value: datetime) -> str:
    """Render a record date as ``d/m/yyyy`` in local time."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return f"{value.day}/{value.month}/{value.year}"

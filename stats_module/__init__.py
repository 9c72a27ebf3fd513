"""Stats backend client, statistics and report delivery."""

from stats_module.client import StatsBackendError, StatsClient, TimeDataResponse, TimeRecord
from stats_module.reporter import StatsReporter
from stats_module.statistics import (
    GOOD_THRESHOLD_SECS,
    TimeStatistics,
    compute_statistics,
    format_record_date,
)

__all__ = [
    "GOOD_THRESHOLD_SECS",
    "StatsBackendError",
    "StatsClient",
    "StatsReporter",
    "TimeDataResponse",
    "TimeRecord",
    "TimeStatistics",
    "compute_statistics",
    "format_record_date",
]

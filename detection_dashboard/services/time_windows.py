# detection_dashboard/services/time_windows.py
"""
Time bucketing for the dashboard charts.

A timeframe keyword maps to a fixed list of buckets ending "now":
  hour  : 13 × 5 minutes, labelled "-60m" … "-0m"
  day   :  9 × 3 hours,   labelled with the wall-clock HH:MM of each edge
  week  :  7 × 1 day,     labelled MM/DD
  month :  4 × 1 week,    labelled "Week <ISO week>"

Each bucket is the half-open interval [edge - step, edge). Building buckets and
aggregating over them are separate functions so either side can be tested alone.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from detection_dashboard.models.detection_event import DetectionEvent, parse_timestamp


class Timeframe(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def parse_timeframe(value: Optional[str]) -> Timeframe:
    """Unknown or missing keywords fall back to `day`."""
    try:
        return Timeframe((value or "").strip().lower())
    except ValueError:
        return Timeframe.DAY


@dataclass(frozen=True)
class Bucket:
    start: datetime
    end: datetime
    label: str

    def contains(self, moment: Optional[datetime]) -> bool:
        return moment is not None and self.start <= moment < self.end


# timeframe → (number of steps back, step size, label for a bucket edge)
_LAYOUTS = {
    Timeframe.HOUR: (12, timedelta(minutes=5), lambda edge, offset: f"-{offset * 5}m"),
    # day buckets span the whole 3h step, not just its first hour
    Timeframe.DAY: (8, timedelta(hours=3), lambda edge, offset: edge.strftime("%H:%M")),
    Timeframe.WEEK: (6, timedelta(days=1), lambda edge, offset: edge.strftime("%m/%d")),
    Timeframe.MONTH: (3, timedelta(weeks=1), lambda edge, offset: f"Week {edge.isocalendar()[1]}"),
}


def build_buckets(timeframe, now: Optional[datetime] = None) -> list[Bucket]:
    timeframe = parse_timeframe(timeframe)
    now = now or datetime.now()
    steps, step, label_for = _LAYOUTS[timeframe]
    buckets = []
    for offset in range(steps, -1, -1):
        edge = now - step * offset
        buckets.append(Bucket(start=edge - step, end=edge, label=label_for(edge, offset)))
    return buckets


def _bucket_events(events: Iterable[DetectionEvent], buckets: list[Bucket]) -> list[list[DetectionEvent]]:
    # Parse each timestamp once; unparseable events land in no bucket
    stamped = [(parse_timestamp(event.timestamp), event) for event in events]
    return [[event for moment, event in stamped if bucket.contains(moment)] for bucket in buckets]


def count_per_bucket(events: Iterable[DetectionEvent], buckets: list[Bucket]) -> list[int]:
    return [len(matched) for matched in _bucket_events(events, buckets)]


def average_per_bucket(events: Iterable[DetectionEvent], buckets: list[Bucket],
                       baseline: float) -> list[float]:
    """Mean processing time per bucket; empty buckets report `baseline` instead of 0."""
    averages = []
    for matched in _bucket_events(events, buckets):
        if not matched:
            averages.append(float(baseline))
        else:
            averages.append(sum(e.processing_time_ms for e in matched) / len(matched))
    return averages


def _one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start(timeframe, now: datetime) -> datetime:
    """Lower bound of the statistics window for a timeframe."""
    timeframe = parse_timeframe(timeframe)
    if timeframe is Timeframe.HOUR:
        return now - timedelta(hours=1)
    if timeframe is Timeframe.WEEK:
        return now - timedelta(weeks=1)
    if timeframe is Timeframe.MONTH:
        return _one_month_before(now)
    return now - timedelta(days=1)

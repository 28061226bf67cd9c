"""Daily vote trend analysis."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, tzinfo

from evote_api.models import Vote

CHART_WINDOW_DAYS = 14

_MONTH_ABBREVIATIONS = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]


@dataclass
class DailyCount:
    """Votes cast on one calendar day."""

    day: date
    count: int


@dataclass
class TrendPoint:
    """One chart point."""

    day: date
    label: str
    historical: int


@dataclass
class TrendReport:
    """Result of a trend analysis run."""

    points: list[TrendPoint] = field(default_factory=list)
    upward: int = 0
    downward: int = 0
    stable: int = 0
    series: list[DailyCount] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.series)


def day_label(day: date) -> str:
    """Short Spanish chart label, e.g. ``"oct 19"``."""
    return f"{_MONTH_ABBREVIATIONS[day.month - 1]} {day.day:02d}"


def bucket_by_day(votes: list[Vote], tz: tzinfo) -> list[DailyCount]:
    """Count votes per local calendar day, oldest day first.

    Votes without a timestamp are skipped.
    """
    counts = Counter(v.voted_at.astimezone(tz).date() for v in votes if v.voted_at is not None)
    return [DailyCount(day=day, count=counts[day]) for day in sorted(counts)]


def analyze_trends(votes: list[Vote], tz: tzinfo, window: int = CHART_WINDOW_DAYS) -> TrendReport:
    """Bucket votes by day and classify day-over-day movement.

    Args:
        votes: All vote rows.
        tz: Timezone whose calendar days define the buckets.
        window: Number of most recent days to return as chart points.

    Returns:
        TrendReport with up/down/flat shares as integer-floor percentages
        over every consecutive pair of days in the full series.
    """
    series = bucket_by_day(votes, tz)
    if not series:
        return TrendReport()

    points = [TrendPoint(day=d.day, label=day_label(d.day), historical=d.count) for d in series[-window:]]

    upward = downward = stable = 0
    for prev, curr in zip(series, series[1:], strict=False):
        if curr.count > prev.count:
            upward += 1
        elif curr.count < prev.count:
            downward += 1
        else:
            stable += 1
    total = upward + downward + stable
    if total:
        upward, downward, stable = (upward * 100) // total, (downward * 100) // total, (stable * 100) // total

    return TrendReport(points=points, upward=upward, downward=downward, stable=stable, series=series)

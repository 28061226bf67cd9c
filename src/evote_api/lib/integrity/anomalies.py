"""Statistical anomaly signals over the full vote set.

Three independent signals are computed, each with its own severity
thresholds:

- duplicate: votes beyond the first per (voter, category)
- out_of_hours: votes cast outside the local working-hours window
- rapid_succession: consecutive votes by the same voter under five minutes apart
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import timedelta, tzinfo

from evote_api.lib.integrity.duplicates import count_duplicate_votes
from evote_api.models import Vote

WORKING_HOURS_START = 8
WORKING_HOURS_END = 18
RAPID_SUCCESSION_WINDOW = timedelta(minutes=5)

ANOMALY_DUPLICATE = "duplicate"
ANOMALY_OUT_OF_HOURS = "out_of_hours"
ANOMALY_RAPID_SUCCESSION = "rapid_succession"

# type -> (high threshold, medium threshold, pattern name, description)
_SIGNALS: dict[str, tuple[int, int, str, str]] = {
    ANOMALY_DUPLICATE: (
        10,
        5,
        "Votos duplicados",
        "Múltiples votos del mismo votante en la misma categoría",
    ),
    ANOMALY_OUT_OF_HOURS: (
        20,
        10,
        "Votaciones fuera de horario",
        "Votos registrados fuera del horario normal (8am-6pm)",
    ),
    ANOMALY_RAPID_SUCCESSION: (
        15,
        8,
        "Votación masiva en corto tiempo",
        "Múltiples votos desde la misma IP o DNI en menos de 5 minutos",
    ),
}


@dataclass
class Anomaly:
    """One triggered signal."""

    type: str
    count: int
    severity: str
    pattern: str
    description: str


@dataclass
class AnomalyReport:
    """Result of an anomaly detection run.

    ``votes`` holds the analyzed rows so callers can hand them to offline
    model training alongside the signals.
    """

    anomalies: list[Anomaly] = field(default_factory=list)
    total_votes: int = 0
    votes: list[Vote] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.anomalies)


def severity_for(count: int, high: int, medium: int) -> str:
    """Classify a count: above ``high`` is high, above ``medium`` is medium."""
    if count > high:
        return "high"
    if count > medium:
        return "medium"
    return "low"


def count_out_of_hours(
    votes: list[Vote],
    tz: tzinfo,
    start_hour: int = WORKING_HOURS_START,
    end_hour: int = WORKING_HOURS_END,
) -> int:
    """Count votes whose local hour falls outside ``[start_hour, end_hour)``."""
    count = 0
    for vote in votes:
        if vote.voted_at is None:
            continue
        hour = vote.voted_at.astimezone(tz).hour
        if hour < start_hour or hour >= end_hour:
            count += 1
    return count


def count_rapid_succession(votes: list[Vote], window: timedelta = RAPID_SUCCESSION_WINDOW) -> int:
    """Count consecutive same-voter vote pairs closer together than ``window``."""
    times_by_voter = defaultdict(list)
    for vote in votes:
        if vote.voter_dni is not None and vote.voted_at is not None:
            times_by_voter[vote.voter_dni].append(vote.voted_at)

    count = 0
    for times in times_by_voter.values():
        times.sort()
        count += sum(1 for prev, curr in zip(times, times[1:], strict=False) if curr - prev < window)
    return count


def detect_anomalies(votes: list[Vote], tz: tzinfo) -> AnomalyReport:
    """Compute all signals and report those with a non-zero count.

    Args:
        votes: All vote rows.
        tz: Timezone defining the working-hours window.

    Returns:
        AnomalyReport listing triggered signals in a fixed order.
    """
    counts = {
        ANOMALY_DUPLICATE: count_duplicate_votes(votes),
        ANOMALY_OUT_OF_HOURS: count_out_of_hours(votes, tz),
        ANOMALY_RAPID_SUCCESSION: count_rapid_succession(votes),
    }

    anomalies = []
    for anomaly_type, count in counts.items():
        if count <= 0:
            continue
        high, medium, pattern, description = _SIGNALS[anomaly_type]
        anomalies.append(
            Anomaly(
                type=anomaly_type,
                count=count,
                severity=severity_for(count, high, medium),
                pattern=pattern,
                description=description,
            )
        )
    return AnomalyReport(anomalies=anomalies, total_votes=len(votes), votes=list(votes))

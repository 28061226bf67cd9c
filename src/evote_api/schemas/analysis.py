"""Trend, anomaly and participation analysis schemas.

Each analysis endpoint returns ``{success, data, message}`` where ``data``
carries ``hasData`` and, when there is something to report, the payload.
"""

from datetime import date, datetime

from pydantic import Field

from evote_api.lib.integrity import AnomalyReport, ParticipationReport, TrendReport
from evote_api.schemas.common import CamelModel


class TrendPointSchema(CamelModel):
    """Chart point for one day."""

    day: date = Field(alias="date")
    label: str
    historical: int
    predicted: int | None = None
    is_future: bool = False


class DailyCountSchema(CamelModel):
    """Raw daily vote count."""

    day: date = Field(alias="date")
    count: int


class TrendAnalysisSchema(CamelModel):
    """Day-over-day movement as integer percentages."""

    upward: int
    downward: int
    stable: int


class TrendsData(CamelModel):
    """Trend analysis payload."""

    has_data: bool
    message: str | None = None
    trend_predictions: list[TrendPointSchema] = Field(default_factory=list)
    trend_analysis: TrendAnalysisSchema | None = None
    total_data_points: int = 0
    raw_votes_by_date: list[DailyCountSchema] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: TrendReport) -> "TrendsData":
        if not report.has_data:
            return cls(has_data=False, message="Not enough data to analyze trends")
        return cls(
            has_data=True,
            trend_predictions=[
                TrendPointSchema(day=p.day, label=p.label, historical=p.historical) for p in report.points
            ],
            trend_analysis=TrendAnalysisSchema(upward=report.upward, downward=report.downward, stable=report.stable),
            total_data_points=len(report.series),
            raw_votes_by_date=[DailyCountSchema(day=d.day, count=d.count) for d in report.series],
        )


class AnomalySchema(CamelModel):
    """One triggered anomaly signal."""

    type: str
    label: str
    count: int
    severity: str


class AnomalyPatternSchema(CamelModel):
    """Human-readable description of an anomaly signal."""

    pattern: str
    frequency: int
    description: str


class RawVoteSchema(CamelModel):
    """One analyzed vote row, as stored."""

    id: str | None = None
    voter_dni: str | None = None
    candidate_id: str | None = None
    category: str | None = None
    voted_at: datetime | None = None


class AnomaliesData(CamelModel):
    """Anomaly detection payload.

    ``rawVotes`` is only populated when at least one signal triggered.
    """

    has_data: bool
    message: str | None = None
    anomalies: list[AnomalySchema] = Field(default_factory=list)
    anomaly_patterns: list[AnomalyPatternSchema] = Field(default_factory=list)
    total_votes: int = 0
    raw_votes: list[RawVoteSchema] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: AnomalyReport) -> "AnomaliesData":
        if not report.has_data:
            return cls(has_data=False, message="No anomalies detected", total_votes=report.total_votes)
        return cls(
            has_data=True,
            anomalies=[
                AnomalySchema(type=a.type, label=a.pattern, count=a.count, severity=a.severity)
                for a in report.anomalies
            ],
            anomaly_patterns=[
                AnomalyPatternSchema(pattern=a.pattern, frequency=a.count, description=a.description)
                for a in report.anomalies
            ],
            total_votes=report.total_votes,
            raw_votes=[
                RawVoteSchema(
                    id=v.id,
                    voter_dni=v.voter_dni,
                    candidate_id=v.candidate_id,
                    category=v.category,
                    voted_at=v.voted_at,
                )
                for v in report.votes
            ],
        )


class RegionParticipationSchema(CamelModel):
    """Participation within one department."""

    predicted: float
    actual: float
    demographic: str = "Mixto"
    total: int
    voted: int


class ParticipationData(CamelModel):
    """Participation analysis payload."""

    has_data: bool
    message: str | None = None
    participation_by_region: dict[str, RegionParticipationSchema] = Field(default_factory=dict)
    participation_by_demographic: dict[str, float] = Field(default_factory=dict)
    total_voters: int = 0
    total_voted: int = 0

    @classmethod
    def from_report(cls, report: ParticipationReport) -> "ParticipationData":
        if not report.has_data:
            return cls(has_data=False, message="Not enough data to analyze participation")
        return cls(
            has_data=True,
            participation_by_region={
                name: RegionParticipationSchema(predicted=r.rate, actual=r.rate, total=r.total, voted=r.voted)
                for name, r in report.by_region.items()
            },
            participation_by_demographic=report.by_demographic,
            total_voters=report.total_voters,
            total_voted=report.total_voted,
        )


class TrendsResponse(CamelModel):
    success: bool = True
    data: TrendsData
    message: str | None = None


class AnomaliesResponse(CamelModel):
    success: bool = True
    data: AnomaliesData
    message: str | None = None


class ParticipationResponse(CamelModel):
    success: bool = True
    data: ParticipationData
    message: str | None = None

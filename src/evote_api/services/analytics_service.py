"""Analytics service: read-only trend, anomaly and participation runs."""

from datetime import tzinfo

from loguru import logger

from evote_api.core.single_flight import SingleFlight
from evote_api.lib.gateway import BaseGateway
from evote_api.lib.integrity import (
    AnomalyReport,
    ParticipationReport,
    TrendReport,
    analyze_participation,
    analyze_trends,
    detect_anomalies,
)
from evote_api.services.integrity_service import guarded


async def run_trend_analysis(gateway: BaseGateway, tz: tzinfo, *, guard: SingleFlight | None = None) -> TrendReport:
    """Bucket all votes by local day and classify the daily movement."""
    async with guarded(guard):
        report = analyze_trends(await gateway.list_votes(), tz)
        logger.info("Trend analysis over {} day(s)", len(report.series))
        return report


async def run_anomaly_detection(
    gateway: BaseGateway,
    tz: tzinfo,
    *,
    guard: SingleFlight | None = None,
) -> AnomalyReport:
    """Compute the duplicate, out-of-hours and rapid-succession signals."""
    async with guarded(guard):
        report = detect_anomalies(await gateway.list_votes(), tz)
        for anomaly in report.anomalies:
            logger.warning("Anomaly {}: {} occurrence(s), severity {}", anomaly.type, anomaly.count, anomaly.severity)
        return report


async def run_participation_analysis(
    gateway: BaseGateway,
    *,
    guard: SingleFlight | None = None,
) -> ParticipationReport:
    """Compute participation per department and per demographic bucket."""
    async with guarded(guard):
        report = analyze_participation(await gateway.list_voters(), await gateway.list_votes())
        logger.info(
            "Participation analysis: {} of {} voter(s) across {} department(s)",
            report.total_voted,
            report.total_voters,
            len(report.by_region),
        )
        return report

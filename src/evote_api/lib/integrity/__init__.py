"""Integrity library: pure audit algorithms over voter, candidate and vote records.

Nothing here touches the persistence gateway; the integrity and analytics
services load records, call these functions, and apply the results.
"""

from evote_api.lib.integrity.anomalies import (
    ANOMALY_DUPLICATE,
    ANOMALY_OUT_OF_HOURS,
    ANOMALY_RAPID_SUCCESSION,
    Anomaly,
    AnomalyReport,
    count_out_of_hours,
    count_rapid_succession,
    detect_anomalies,
    severity_for,
)
from evote_api.lib.integrity.duplicates import (
    KEEP_NEWEST,
    KEEP_OLDEST,
    count_duplicate_votes,
    group_votes,
    select_duplicates,
)
from evote_api.lib.integrity.identifiers import IdentifierFinding, find_invalid_identifiers
from evote_api.lib.integrity.normalizer import candidate_changes, normalize_text, voter_changes
from evote_api.lib.integrity.participation import (
    DEMOGRAPHIC_MULTIPLIERS,
    ParticipationReport,
    RegionParticipation,
    analyze_participation,
    round_one_decimal,
)
from evote_api.lib.integrity.rules import (
    DNI_PATTERN,
    REQUIRED_CANDIDATE_FIELDS,
    REQUIRED_VOTE_FIELDS,
    REQUIRED_VOTER_FIELDS,
    is_incomplete,
    is_valid_dni,
    missing_fields,
)
from evote_api.lib.integrity.trends import DailyCount, TrendPoint, TrendReport, analyze_trends, bucket_by_day

__all__ = [
    "ANOMALY_DUPLICATE",
    "ANOMALY_OUT_OF_HOURS",
    "ANOMALY_RAPID_SUCCESSION",
    "DEMOGRAPHIC_MULTIPLIERS",
    "DNI_PATTERN",
    "KEEP_NEWEST",
    "KEEP_OLDEST",
    "REQUIRED_CANDIDATE_FIELDS",
    "REQUIRED_VOTER_FIELDS",
    "REQUIRED_VOTE_FIELDS",
    "Anomaly",
    "AnomalyReport",
    "DailyCount",
    "IdentifierFinding",
    "ParticipationReport",
    "RegionParticipation",
    "TrendPoint",
    "TrendReport",
    "analyze_participation",
    "analyze_trends",
    "bucket_by_day",
    "candidate_changes",
    "count_duplicate_votes",
    "count_out_of_hours",
    "count_rapid_succession",
    "detect_anomalies",
    "find_invalid_identifiers",
    "group_votes",
    "is_incomplete",
    "is_valid_dni",
    "missing_fields",
    "normalize_text",
    "round_one_decimal",
    "select_duplicates",
    "severity_for",
    "voter_changes",
]

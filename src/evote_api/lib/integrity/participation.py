"""Participation rates by department and coarse demographic bucket.

No real demographic data is collected, so the demographic buckets are fixed
multiples of the overall rate. They are placeholders for dashboards, not a
statistical model.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from evote_api.models import Vote, Voter

DEMOGRAPHIC_MULTIPLIERS: dict[str, float] = {
    "18-30 años": 0.9,
    "31-50 años": 1.1,
    "51-70 años": 1.05,
    "70+ años": 0.85,
    "Urbano": 1.05,
    "Rural": 0.95,
}

REGION_DEMOGRAPHIC = "Mixto"


@dataclass
class RegionParticipation:
    """Participation within one department."""

    department: str
    total: int
    voted: int
    rate: float


@dataclass
class ParticipationReport:
    """Result of a participation analysis run."""

    by_region: dict[str, RegionParticipation] = field(default_factory=dict)
    by_demographic: dict[str, float] = field(default_factory=dict)
    total_voters: int = 0
    total_voted: int = 0

    @property
    def has_data(self) -> bool:
        return bool(self.by_region)


def round_one_decimal(value: float) -> float:
    """Round half-up to one decimal place (``12.25`` -> ``12.3``)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def analyze_participation(voters: list[Voter], votes: list[Vote]) -> ParticipationReport:
    """Join voters to votes by DNI and compute participation rates.

    A voter counts as having participated if any vote row carries their
    DNI, invalidated or not. Voters with no department are counted in the
    overall totals only.

    Args:
        voters: All voter rows.
        votes: All vote rows.

    Returns:
        ParticipationReport; rates are percentages rounded to one decimal.
    """
    voted_dnis = {v.voter_dni for v in votes if v.voter_dni is not None}

    totals: Counter[str] = Counter()
    voted: Counter[str] = Counter()
    for voter in voters:
        if not voter.department or not voter.dni:
            continue
        totals[voter.department] += 1
        if voter.dni in voted_dnis:
            voted[voter.department] += 1

    by_region = {
        department: RegionParticipation(
            department=department,
            total=total,
            voted=voted[department],
            rate=round_one_decimal(voted[department] * 100.0 / total),
        )
        for department, total in sorted(totals.items())
    }

    by_demographic: dict[str, float] = {}
    if voters:
        overall = len(voted_dnis) * 100.0 / len(voters)
        by_demographic = {
            bucket: round_one_decimal(overall * multiplier) for bucket, multiplier in DEMOGRAPHIC_MULTIPLIERS.items()
        }

    return ParticipationReport(
        by_region=by_region,
        by_demographic=by_demographic,
        total_voters=len(voters),
        total_voted=len(voted_dnis),
    )

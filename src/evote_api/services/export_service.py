"""Super-administrator data export service."""

from dataclasses import dataclass
from datetime import UTC, datetime

from evote_api.core.logging import audit_logger
from evote_api.lib.gateway import BaseGateway
from evote_api.models import Candidate, Voter


@dataclass
class DataExport:
    """Point-in-time snapshot for migration."""

    exported_at: datetime
    voters: list[Voter]
    candidates: list[Candidate]
    vote_count: int


async def export_all_data(gateway: BaseGateway) -> DataExport:
    """Snapshot all voters and candidates plus the total vote count.

    Individual vote rows are not exported.
    """
    voters = await gateway.list_voters()
    candidates = await gateway.list_candidates()
    votes = await gateway.list_votes()
    export = DataExport(
        exported_at=datetime.now(UTC),
        voters=voters,
        candidates=candidates,
        vote_count=len(votes),
    )
    audit_logger("superadmin.export", vote_count=export.vote_count).info(
        "Exported {} voter(s), {} candidate(s), {} vote(s)",
        len(voters),
        len(candidates),
        export.vote_count,
    )
    return export

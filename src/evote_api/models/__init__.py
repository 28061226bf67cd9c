"""Record models exchanged with the persistence gateway."""

from evote_api.models.base import Category, RecordModel
from evote_api.models.candidate import Candidate
from evote_api.models.vote import Vote
from evote_api.models.voter import Voter

__all__ = [
    "Candidate",
    "Category",
    "RecordModel",
    "Vote",
    "Voter",
]

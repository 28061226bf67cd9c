"""Unit tests for voter, vote and candidate schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from evote_api.models import Candidate, Voter
from evote_api.schemas.candidate import CandidateResponse
from evote_api.schemas.vote import VoteRequest
from evote_api.schemas.voter import VoterResponse


class TestVoterResponse:
    def test_from_voter(self) -> None:
        voter = Voter(dni="12345678", full_name="Ana Diaz", birth_date=date(1990, 1, 2), has_voted=True)
        dumped = VoterResponse.from_voter(voter).model_dump(mode="json", by_alias=True)
        assert dumped["fullName"] == "Ana Diaz"
        assert dumped["birthDate"] == "1990-01-02"
        assert dumped["hasVoted"] is True
        assert "createdAt" not in dumped


class TestCandidateResponse:
    def test_category_serialized_as_string(self) -> None:
        candidate = Candidate(id=7, name="Rosa", category="REGIONAL", vote_count=None)
        response = CandidateResponse.from_candidate(candidate)
        assert response.id == "7"
        assert response.category == "regional"
        assert response.vote_count == 0

    def test_unknown_category_becomes_none(self) -> None:
        candidate = Candidate(id="x", category="municipal")
        assert CandidateResponse.from_candidate(candidate).category is None


class TestVoteRequest:
    """Tests for ballot request validation."""

    def test_camel_case_payload(self) -> None:
        request = VoteRequest.model_validate(
            {
                "voterDni": "12345678",
                "selections": [{"candidateId": "p1", "candidateName": "Rosa", "category": "presidencial"}],
            }
        )
        assert request.selections[0].candidate_id == "p1"

    def test_candidate_name_optional(self) -> None:
        request = VoteRequest.model_validate(
            {"voterDni": "12345678", "selections": [{"candidateId": "p1", "category": "regional"}]}
        )
        assert request.selections[0].candidate_name is None

    def test_missing_selections_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VoteRequest.model_validate({"voterDni": "12345678"})

    def test_blank_candidate_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VoteRequest.model_validate({"voterDni": "12345678", "selections": [{"candidateId": "", "category": "x"}]})

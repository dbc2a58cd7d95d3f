"""Unit tests for candidate roster storage."""

import pytest
from bson import ObjectId

from ballot_api import crud
from ballot_api.config import CANDIDATES_COLLECTION_NAME
from ballot_api.exceptions import NotFoundError
from ballot_api.models import CandidateIn, CandidateUpdate


class TestCreateCandidate:
    def test_starts_with_no_votes(self, db):
        created = crud.create_candidate(db, CandidateIn(name="Jane Doe", party="Green", age=45))

        assert created["name"] == "Jane Doe"
        assert created["party"] == "Green"
        assert created["age"] == 45
        assert created["votes"] == []
        assert created["voteCount"] == 0
        assert db[CANDIDATES_COLLECTION_NAME].count_documents({"_id": ObjectId(created["id"])}) == 1

    def test_vote_fields_cannot_be_supplied(self, db):
        candidate = CandidateIn.model_validate(
            {"name": "Jane Doe", "party": "Green", "voteCount": 99, "votes": [{"user": "x"}]}
        )

        created = crud.create_candidate(db, candidate)

        assert created["voteCount"] == 0
        assert created["votes"] == []


class TestUpdateCandidate:
    def test_partial_update(self, db, make_candidate):
        candidate_id = make_candidate(age=40)

        updated = crud.update_candidate(db, candidate_id, CandidateUpdate(party="Blue"))

        assert updated["party"] == "Blue"
        assert updated["name"] == "Jane Doe"
        assert updated["age"] == 40

    def test_empty_patch_returns_current_record(self, db, make_candidate):
        candidate_id = make_candidate()

        updated = crud.update_candidate(db, candidate_id, CandidateUpdate())

        assert updated["id"] == candidate_id
        assert updated["party"] == "Green"

    def test_update_does_not_touch_votes(self, db, make_candidate):
        voter = ObjectId()
        candidate_id = make_candidate(votes=[{"user": voter}], voteCount=1)

        updated = crud.update_candidate(db, candidate_id, CandidateUpdate(name="Janet Doe"))

        assert updated["voteCount"] == 1
        assert updated["votes"][0]["user"] == str(voter)

    @pytest.mark.parametrize("candidate_id", [str(ObjectId()), "bogus"])
    def test_missing_candidate(self, db, candidate_id):
        with pytest.raises(NotFoundError):
            crud.update_candidate(db, candidate_id, CandidateUpdate(name="Nobody"))


class TestDeleteCandidate:
    def test_returns_deleted_record(self, db, make_candidate):
        candidate_id = make_candidate()

        deleted = crud.delete_candidate(db, candidate_id)

        assert deleted["id"] == candidate_id
        assert db[CANDIDATES_COLLECTION_NAME].count_documents({}) == 0

    def test_missing_candidate(self, db):
        with pytest.raises(NotFoundError):
            crud.delete_candidate(db, str(ObjectId()))


def test_list_candidates_projects_name_and_party(db, make_candidate):
    make_candidate(votes=[{"user": ObjectId()}], voteCount=1, age=50)
    make_candidate(name="John Roe", party="Blue")

    assert crud.list_candidates(db) == [
        {"name": "Jane Doe", "party": "Green"},
        {"name": "John Roe", "party": "Blue"},
    ]

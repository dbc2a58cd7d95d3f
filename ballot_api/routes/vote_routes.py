from typing import List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from ballot_api import voting_service
from ballot_api.database import get_database
from ballot_api.models import CurrentUser, TallyEntry
from ballot_api.security import get_token_subject, require_admin

vote_router = APIRouter(prefix="/vote", tags=["Vote"])


@vote_router.get("/count", response_model=List[TallyEntry])
def get_vote_count(db: Database = Depends(get_database)):
    """Parties ranked by votes received, highest first."""
    return voting_service.tally(db)


# Declared before /{candidate_id} so "reconcile" is not taken for an id
@vote_router.post("/reconcile")
def reconcile_vote_counts(
    admin: CurrentUser = Depends(require_admin),
    db: Database = Depends(get_database),
):
    return voting_service.reconcile_vote_counts(db)


@vote_router.post("/{candidate_id}")
def cast_vote(
    candidate_id: str,
    user_id: str = Depends(get_token_subject),
    db: Database = Depends(get_database),
):
    """Casts the caller's single vote for a candidate."""
    return voting_service.cast_vote(db, candidate_id, user_id)

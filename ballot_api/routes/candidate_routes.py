from typing import List

from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from ballot_api import crud
from ballot_api.database import get_database
from ballot_api.models import CandidateIn, CandidateOut, CandidatePublic, CandidateUpdate, CurrentUser
from ballot_api.security import require_admin

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_candidate(
    candidate: CandidateIn,
    admin: CurrentUser = Depends(require_admin),
    db: Database = Depends(get_database),
):
    return {"response": CandidateOut(**crud.create_candidate(db, candidate))}


@router.put("/{candidate_id}", response_model=CandidateOut)
def update_candidate(
    candidate_id: str,
    patch: CandidateUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: Database = Depends(get_database),
):
    return crud.update_candidate(db, candidate_id, patch)


@router.delete("/{candidate_id}", response_model=CandidateOut)
def delete_candidate(
    candidate_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Database = Depends(get_database),
):
    return crud.delete_candidate(db, candidate_id)


@router.get("", response_model=List[CandidatePublic])
def list_candidates(db: Database = Depends(get_database)):
    """Public roster: name and party only."""
    return crud.list_candidates(db)

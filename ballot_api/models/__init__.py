from ballot_api.models.candidate_model import (
    CandidateIn,
    CandidateOut,
    CandidatePublic,
    CandidateUpdate,
    TallyEntry,
    VoteRecord,
)
from ballot_api.models.user_model import CurrentUser, Role

__all__ = [
    "CandidateIn",
    "CandidateOut",
    "CandidatePublic",
    "CandidateUpdate",
    "CurrentUser",
    "Role",
    "TallyEntry",
    "VoteRecord",
]

"""
Vote casting and tallying.

A user's ``hasVoted`` flag is the single source of truth for "this user has
voted". Casting claims that flag with a conditional write before touching
the candidate, so two concurrent requests for the same user cannot both get
past the claim. The candidate side is one ``$push`` + ``$inc`` update, which
keeps ``voteCount == len(votes)`` without reading the document back first.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ballot_api.config import CANDIDATES_COLLECTION_NAME, USERS_COLLECTION_NAME
from ballot_api.crud import get_candidate, get_user
from ballot_api.exceptions import AlreadyVotedError, ForbiddenError, InternalError, NotFoundError
from ballot_api.models import Role

logger = logging.getLogger(__name__)

VOTE_RECORDED_MESSAGE = "Vote recorded successfully"


def _check_eligibility(user: Dict[str, Any]) -> None:
    if user.get("hasVoted"):
        raise AlreadyVotedError()
    if user.get("role") == Role.ADMIN.value:
        raise ForbiddenError("Admin is not allowed to vote")


def _claim_user(db: Database, user_id: ObjectId) -> None:
    """Flip hasVoted false -> true, or explain why it could not be flipped."""
    users = db[USERS_COLLECTION_NAME]
    claimed = users.find_one_and_update(
        {"_id": user_id, "hasVoted": {"$ne": True}, "role": {"$ne": Role.ADMIN.value}},
        {"$set": {"hasVoted": True}},
    )
    if claimed is not None:
        return

    # Lost a race with another request; re-read to report the right error
    latest = users.find_one({"_id": user_id})
    if latest is None:
        raise NotFoundError("user")
    _check_eligibility(latest)
    raise AlreadyVotedError()


def _release_user(db: Database, user_id: ObjectId) -> None:
    try:
        result = db[USERS_COLLECTION_NAME].update_one(
            {"_id": user_id, "hasVoted": True},
            {"$set": {"hasVoted": False}},
        )
    except PyMongoError:
        logger.exception(f"Could not release vote claim for user {user_id}")
        return
    if result.modified_count:
        logger.warning(f"Released vote claim for user {user_id}")
    else:
        logger.error(f"Vote claim for user {user_id} was not held; nothing released")


def cast_vote(db: Database, candidate_id: str, user_id: str) -> Dict[str, str]:
    candidate = get_candidate(db, candidate_id)
    if not candidate:
        raise NotFoundError("candidate")

    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("user")

    try:
        _check_eligibility(user)
    except (AlreadyVotedError, ForbiddenError) as e:
        logger.info(f"Vote by user {user_id} rejected: {e.message}")
        raise

    _claim_user(db, user["_id"])

    vote = {"user": user["_id"], "votedAt": datetime.now(timezone.utc)}
    try:
        updated = db[CANDIDATES_COLLECTION_NAME].find_one_and_update(
            {"_id": candidate["_id"]},
            {"$push": {"votes": vote}, "$inc": {"voteCount": 1}},
            return_document=ReturnDocument.AFTER,
        )
    except PyMongoError:
        logger.exception(f"Failed to record vote for candidate {candidate_id}")
        _release_user(db, user["_id"])
        raise InternalError()

    if updated is None:
        # Candidate deleted between lookup and update
        _release_user(db, user["_id"])
        raise NotFoundError("candidate")

    logger.info(f"User {user_id} voted for candidate {candidate_id} (count now {updated.get('voteCount')})")
    return {"message": VOTE_RECORDED_MESSAGE}


def tally(db: Database) -> List[Dict[str, Any]]:
    """Vote counts per candidate, highest first; equal counts keep creation order."""
    cursor = db[CANDIDATES_COLLECTION_NAME].find(
        {}, {"party": 1, "voteCount": 1}
    ).sort([("voteCount", DESCENDING), ("_id", ASCENDING)])
    return [{"party": c.get("party"), "count": c.get("voteCount", 0)} for c in cursor]


def reconcile_vote_counts(db: Database) -> Dict[str, int]:
    """
    Re-derive every candidate's voteCount from the length of its votes list.

    Each correction is conditional on the count and list length observed
    during the scan, so a vote landing mid-scan is never overwritten.
    """
    candidates = db[CANDIDATES_COLLECTION_NAME]
    checked = 0
    corrected = 0
    for candidate in candidates.find({}, {"votes": 1, "voteCount": 1}):
        checked += 1
        actual = len(candidate.get("votes", []))
        stored = candidate.get("voteCount")
        if stored == actual:
            continue

        votes_filter = {"$size": actual} if "votes" in candidate else {"$exists": False}
        result = candidates.update_one(
            {"_id": candidate["_id"], "voteCount": stored, "votes": votes_filter},
            {"$set": {"voteCount": actual}},
        )
        if result.modified_count:
            corrected += 1
            logger.warning(f"Candidate {candidate['_id']} voteCount corrected {stored} -> {actual}")

    logger.info(f"Reconciled vote counts: checked={checked} corrected={corrected}")
    return {"checked": checked, "corrected": corrected}

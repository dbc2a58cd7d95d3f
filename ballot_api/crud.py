import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.database import Database

from ballot_api.config import CANDIDATES_COLLECTION_NAME, USERS_COLLECTION_NAME
from ballot_api.exceptions import NotFoundError
from ballot_api.models import CandidateIn, CandidateUpdate

logger = logging.getLogger(__name__)


def to_object_id(value: str, entity_type: str) -> ObjectId:
    # A malformed id can never match a stored document
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(entity_type)


def serialize_candidate(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "party": doc.get("party"),
        "age": doc.get("age"),
        "votes": [
            {"user": str(v.get("user")), "votedAt": v.get("votedAt")}
            for v in doc.get("votes", [])
        ],
        "voteCount": doc.get("voteCount", 0),
    }


def get_candidate(db: Database, candidate_id: str) -> Optional[Dict[str, Any]]:
    return db[CANDIDATES_COLLECTION_NAME].find_one({"_id": to_object_id(candidate_id, "candidate")})


def get_user(db: Database, user_id: str) -> Optional[Dict[str, Any]]:
    return db[USERS_COLLECTION_NAME].find_one({"_id": to_object_id(user_id, "user")})


# Create a candidate; vote data always starts empty
def create_candidate(db: Database, candidate: CandidateIn) -> Dict[str, Any]:
    collection = db[CANDIDATES_COLLECTION_NAME]
    data = candidate.model_dump(exclude_none=True)
    data["votes"] = []
    data["voteCount"] = 0
    result = collection.insert_one(data)
    created = collection.find_one({"_id": result.inserted_id})
    logger.info(f"Candidate {result.inserted_id} created ({created.get('name')}, {created.get('party')})")
    return serialize_candidate(created)


def update_candidate(db: Database, candidate_id: str, patch: CandidateUpdate) -> Dict[str, Any]:
    collection = db[CANDIDATES_COLLECTION_NAME]
    oid = to_object_id(candidate_id, "candidate")
    changes = patch.model_dump(exclude_unset=True)

    if not changes:
        updated = collection.find_one({"_id": oid})
    else:
        updated = collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
    if not updated:
        raise NotFoundError("candidate")

    logger.info(f"Candidate {candidate_id} updated: {sorted(changes)}")
    return serialize_candidate(updated)


def delete_candidate(db: Database, candidate_id: str) -> Dict[str, Any]:
    oid = to_object_id(candidate_id, "candidate")
    deleted = db[CANDIDATES_COLLECTION_NAME].find_one_and_delete({"_id": oid})
    if not deleted:
        raise NotFoundError("candidate")
    logger.info(f"Candidate {candidate_id} deleted")
    return serialize_candidate(deleted)


def list_candidates(db: Database) -> List[Dict[str, Any]]:
    cursor = db[CANDIDATES_COLLECTION_NAME].find({}, {"name": 1, "party": 1, "_id": 0})
    return [{"name": c.get("name"), "party": c.get("party")} for c in cursor]

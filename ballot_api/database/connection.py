import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from ballot_api.config import (
    CANDIDATES_COLLECTION_NAME,
    MONGO_DB,
    MONGO_URI,
)

logger = logging.getLogger(__name__)


class MongoConnector:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super(MongoConnector, cls).__new__(cls)
            try:
                instance.client = MongoClient(MONGO_URI)
                instance.db = instance.client[MONGO_DB]
                ensure_indexes(instance.db)
                instance.client.server_info()
                logger.info(f"Connected to MongoDB: {MONGO_DB}")
            except Exception as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise
            cls._instance = instance
        return cls._instance

    @classmethod
    def close(cls):
        if cls._instance is not None:
            cls._instance.client.close()
            cls._instance = None
            logger.info("MongoDB connection closed")


def ensure_indexes(db: Database) -> None:
    # Tally reads sort on these two keys
    db[CANDIDATES_COLLECTION_NAME].create_index([("voteCount", DESCENDING), ("_id", ASCENDING)])


def get_database() -> Database:
    """FastAPI dependency returning the shared database handle."""
    return MongoConnector().db

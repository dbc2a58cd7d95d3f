from ballot_api.database.connection import MongoConnector, ensure_indexes, get_database

__all__ = ["MongoConnector", "ensure_indexes", "get_database"]

"""Shared fixtures: an in-memory MongoDB, a wired TestClient and record factories."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from ballot_api.config import CANDIDATES_COLLECTION_NAME, USERS_COLLECTION_NAME
from ballot_api.database import get_database
from ballot_api.main import app
from ballot_api.security import create_access_token


@pytest.fixture
def db():
    """Fresh mongomock database per test."""
    client = mongomock.MongoClient()
    yield client["ballot_test"]
    client.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user and return its id as a string."""

    def _make_user(role="voter", has_voted=False, **fields):
        doc = {"role": role, "hasVoted": has_voted, **fields}
        return str(db[USERS_COLLECTION_NAME].insert_one(doc).inserted_id)

    return _make_user


@pytest.fixture
def make_candidate(db):
    """Insert a candidate with no votes and return its id as a string."""

    def _make_candidate(name="Jane Doe", party="Green", **fields):
        doc = {"name": name, "party": party, "votes": [], "voteCount": 0, **fields}
        return str(db[CANDIDATES_COLLECTION_NAME].insert_one(doc).inserted_id)

    return _make_candidate


@pytest.fixture
def auth_header():
    def _auth_header(user_id):
        return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}

    return _auth_header

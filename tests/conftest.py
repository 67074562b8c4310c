"""Pytest fixtures for the vote API.

The store runs on mongomock, so no MongoDB server is needed. The app is
built with an injected store, which makes the lifespan skip connecting.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Generator

import mongomock
import pytest
from fastapi.testclient import TestClient

from vote_api import config
from vote_api.main import create_app
from vote_api.security import hash_password
from vote_api.storage_mongo import VoteStore


ADMIN_PASSWORD = "correct horse battery staple"


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    # bcrypt is slow on purpose; hash once per session
    return hash_password(ADMIN_PASSWORD)


@pytest.fixture(autouse=True)
def admin_credentials(monkeypatch, admin_password_hash):
    """Configure the admin pair with a real bcrypt hash for every test."""
    monkeypatch.setattr(config, "ADMIN_USERNAME", "admin")
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", admin_password_hash)
    return {"username": "admin", "password": ADMIN_PASSWORD}


@pytest.fixture
def mongo_client() -> Generator[mongomock.MongoClient, None, None]:
    client = mongomock.MongoClient()
    yield client
    client.close()


@pytest.fixture
def store(mongo_client) -> VoteStore:
    """Empty votes store with its indexes in place."""
    vote_store = VoteStore(mongo_client["test_voting"]["votes"])
    vote_store.ensure_indexes()
    return vote_store


@pytest.fixture
def client(store: VoteStore) -> Generator[TestClient, None, None]:
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {config.ADMIN_TOKEN}"}


@pytest.fixture
def insert_vote(store: VoteStore) -> Callable[..., dict]:
    """Insert a vote directly, with a controllable createdAt.

    Each call without `created_at` is one minute newer than the previous one.
    """
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    calls = {"n": 0}

    def _insert(matricule: str, choice: str = "for", opinion: str = "", name: str = "",
                created_at: datetime = None) -> dict:
        calls["n"] += 1
        when = created_at or base + timedelta(minutes=calls["n"])
        return store.insert_if_absent({
            "name": name,
            "matricule": matricule,
            "choice": choice,
            "opinion": opinion,
            "createdAt": when,
            "updatedAt": when,
        })

    return _insert

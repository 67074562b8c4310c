import logging
import time
from typing import Callable, Optional

from fastapi import Request
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure

from vote_api import config
from vote_api.storage_mongo import VoteStore

logger = logging.getLogger(__name__)


def create_client(uri: str = config.MONGODB_URI) -> MongoClient:
    return MongoClient(
        uri,
        serverSelectionTimeoutMS=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        socketTimeoutMS=config.MONGO_SOCKET_TIMEOUT_MS,
        connectTimeoutMS=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        heartbeatFrequencyMS=config.MONGO_HEARTBEAT_FREQUENCY_MS,
        retryWrites=True,
        retryReads=True,
        tz_aware=True,
    )


def connect_with_retry(
    uri: str = config.MONGODB_URI,
    delay: float = config.MONGO_RETRY_DELAY,
    client_factory: Callable[[str], MongoClient] = create_client,
    sleep: Callable[[float], None] = time.sleep,
    max_attempts: Optional[int] = None,
) -> MongoClient:
    """
    Connect to MongoDB, retrying every `delay` seconds until the server answers a ping.

    There is no backoff growth and, unless `max_attempts` is given, no retry limit.
    Only connection failures are retried; a bad URI or other configuration
    error is raised at once.
    """
    attempt = 0
    while True:
        attempt += 1
        client = None
        try:
            client = client_factory(uri)
            client.admin.command("ping")
            logger.info(f"Connected to MongoDB after {attempt} attempt(s)")
            return client
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection attempt {attempt} failed: {e}")
            if client is not None:
                client.close()
            if max_attempts is not None and attempt >= max_attempts:
                raise
            sleep(delay)


def get_votes_collection(client: MongoClient, db_name: str = config.MONGO_DB) -> Collection:
    return client[db_name][config.VOTES_COLLECTION]


def get_store(request: Request) -> VoteStore:
    """FastAPI dependency returning the store created at startup."""
    return request.app.state.store

# storage_mongo.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

logger = logging.getLogger(__name__)

# Newest first; _id breaks createdAt ties in insertion order
NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


class DuplicateVoteError(Exception):
    """Raised when the unique matricule index rejects a write."""

    def __init__(self, matricule: Optional[str]):
        super().__init__(f"A vote with matricule {matricule!r} already exists")
        self.matricule = matricule


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VoteStore:
    def __init__(self, collection: Collection):
        """Wrap an already-connected votes collection; the caller owns the client."""
        self.collection = collection

    def ensure_indexes(self):
        # Unique index on matricule is what actually prevents double voting
        self.collection.create_index([("matricule", ASCENDING)], unique=True)
        self.collection.create_index([("createdAt", DESCENDING)])
        logger.info(f"Indexes ensured on collection {self.collection.name}")

    def insert_if_absent(self, vote: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a vote document.

        Args:
            vote: document without _id

        Returns:
            The stored document including its _id

        Raises:
            DuplicateVoteError: a vote with the same matricule already exists
        """
        document = dict(vote)
        try:
            result = self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning(f"Duplicate key on insert for matricule {vote.get('matricule')}")
            raise DuplicateVoteError(vote.get("matricule"))
        document["_id"] = result.inserted_id
        return document

    def find_all(self, projection: Optional[Dict[str, int]] = None, limit: int = 0) -> List[Dict[str, Any]]:
        cursor = self.collection.find({}, projection).sort(NEWEST_FIRST)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def find_one(self, matricule: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"matricule": matricule})

    def update_by_id(self, vote_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply a partial update with $set and return the document after the update.

        Raises:
            bson.errors.InvalidId: vote_id is not a valid ObjectId
            DuplicateVoteError: the patch moves matricule onto another vote's value
        """
        changes = dict(patch)
        changes["updatedAt"] = utcnow()
        try:
            return self.collection.find_one_and_update(
                {"_id": ObjectId(vote_id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateVoteError(patch.get("matricule"))

    def delete_by_id(self, vote_id: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one_and_delete({"_id": ObjectId(vote_id)})

    def count(self) -> int:
        return self.collection.count_documents({})

    def aggregate_counts_by_choice(self) -> Dict[Any, int]:
        pipeline = [{"$group": {"_id": "$choice", "count": {"$sum": 1}}}]
        return {row["_id"]: row["count"] for row in self.collection.aggregate(pipeline)}

    def ping(self) -> bool:
        try:
            self.collection.database.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False

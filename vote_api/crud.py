import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from bson.errors import InvalidId

from vote_api.config import LATEST_VOTES_LIMIT, VOTE_CHOICES
from vote_api.errors import Conflict, InvalidInput, NotFound
from vote_api.models.vote_model import Vote
from vote_api.schemas import ChoiceStats, StatsOut
from vote_api.storage_mongo import DuplicateVoteError, VoteStore, utcnow

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = {"name": 1, "matricule": 1, "choice": 1, "opinion": 1, "createdAt": 1}
# Fields an update may never overwrite
IMMUTABLE_FIELDS = ("_id", "id", "createdAt")


def serialize_vote(doc: Dict[str, Any]) -> Dict[str, Any]:
    vote = dict(doc)
    if "_id" in vote:
        vote["id"] = str(vote.pop("_id"))
    return vote


def format_percentage(count: int, total: int) -> str:
    """count / total * 100 with exactly two decimals, rounded half-up."""
    if not total:
        return "0.00"
    ratio = Decimal(count) * 100 / Decimal(total)
    return str(ratio.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# Submit a vote; checks run in a fixed order and only the first failure is reported
def create_vote(store: VoteStore, data: Vote) -> Dict[str, Any]:
    if not data.matricule or not data.choice:
        raise InvalidInput("Missing required fields", "Please provide matricule and choice")

    if data.choice not in VOTE_CHOICES:
        raise InvalidInput("Invalid choice", 'Choice must be either "for" or "against"')

    if data.choice == "against" and not data.opinion:
        raise InvalidInput("Opinion required", "Please provide an opinion when voting against")

    if store.find_one(data.matricule) is not None:
        logger.warning(f"Duplicate vote attempt for matricule {data.matricule}")
        raise Conflict("User has already voted", "A vote with this matricule already exists")

    now = utcnow()
    vote = {
        "name": data.name or "",
        "matricule": data.matricule,
        "choice": data.choice,
        "opinion": data.opinion or "",
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        created = store.insert_if_absent(vote)
    except DuplicateVoteError:
        # Lost the race against a concurrent submission for the same matricule
        raise Conflict("User has already voted", "A vote with this matricule already exists")

    logger.info(f"Vote recorded for matricule {data.matricule}: {data.choice}")
    return serialize_vote(created)


def get_stats(store: VoteStore) -> Dict[str, Any]:
    # total comes from the same aggregation as the counts so percentages always add up
    counts = store.aggregate_counts_by_choice()
    total = sum(counts.values())
    stats = {choice: ChoiceStats() for choice in VOTE_CHOICES}
    if total == 0:
        return StatsOut(total=0, stats=stats, latestVotes=[]).model_dump()

    for choice in VOTE_CHOICES:
        count = counts.get(choice, 0)
        stats[choice] = ChoiceStats(count=count, percentage=format_percentage(count, total))

    latest = store.find_all(projection=PUBLIC_FIELDS, limit=LATEST_VOTES_LIMIT)
    return StatsOut(
        total=total,
        stats=stats,
        latestVotes=[serialize_vote(doc) for doc in latest],
    ).model_dump()


# All votes, full record, newest first (admin)
def list_votes(store: VoteStore) -> List[Dict[str, Any]]:
    return [serialize_vote(doc) for doc in store.find_all()]


def list_public_votes(store: VoteStore) -> List[Dict[str, Any]]:
    projection = dict(PUBLIC_FIELDS, _id=0)
    return store.find_all(projection=projection)


def update_vote(store: VoteStore, vote_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    changes = {key: value for key, value in patch.items() if key not in IMMUTABLE_FIELDS}
    try:
        updated = store.update_by_id(vote_id, changes)
    except InvalidId:
        raise InvalidInput("Invalid vote ID format", f"{vote_id!r} is not a valid vote id")
    except DuplicateVoteError as e:
        raise Conflict("User has already voted", f"A vote with matricule {e.matricule!r} already exists")

    if updated is None:
        raise NotFound("Vote not found")
    logger.info(f"Vote {vote_id} updated: {sorted(changes)}")
    return serialize_vote(updated)


def delete_vote(store: VoteStore, vote_id: str) -> Dict[str, Any]:
    try:
        deleted = store.delete_by_id(vote_id)
    except InvalidId:
        raise InvalidInput("Invalid vote ID format", f"{vote_id!r} is not a valid vote id")

    if deleted is None:
        raise NotFound("Vote not found")
    logger.info(f"Vote {vote_id} deleted")
    return serialize_vote(deleted)

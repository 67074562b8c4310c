import logging

from fastapi import APIRouter, Depends, status
from pymongo.errors import PyMongoError

from vote_api import crud
from vote_api.database.connection import get_store
from vote_api.errors import store_failure
from vote_api.models.vote_model import Vote
from vote_api.storage_mongo import VoteStore

logger = logging.getLogger(__name__)

vote_router = APIRouter(prefix="/api", tags=["Vote"])


@vote_router.post("/vote", status_code=status.HTTP_201_CREATED)
def cast_vote(vote: Vote, store: VoteStore = Depends(get_store)):
    """
    Record a single vote for a matricule.

    Request body:
    {
      "name": "optional display name",
      "matricule": "<unique voter id>",
      "choice": "for" | "against",
      "opinion": "required when voting against"
    }
    """
    try:
        created = crud.create_vote(store, vote)
    except PyMongoError as e:
        logger.error(f"Error in /api/vote: {e}")
        raise store_failure("Error creating vote", e)
    return {"message": "Vote created successfully", "data": created}


@vote_router.get("/stats")
def get_stats(store: VoteStore = Depends(get_store)):
    try:
        stats = crud.get_stats(store)
    except PyMongoError as e:
        logger.error(f"Error in /api/stats: {e}")
        raise store_failure("Error fetching statistics", e)
    return {"message": "Statistics retrieved successfully", "data": stats}


@vote_router.get("/public/votes")
def get_public_votes(store: VoteStore = Depends(get_store)):
    try:
        votes = crud.list_public_votes(store)
    except PyMongoError as e:
        logger.error(f"Error in /api/public/votes: {e}")
        raise store_failure("Error fetching public votes", e)
    return {"message": "Public votes retrieved successfully", "data": votes}

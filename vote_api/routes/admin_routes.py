import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pymongo.errors import PyMongoError

from vote_api import crud
from vote_api.database.connection import get_store
from vote_api.errors import store_failure
from vote_api.schemas import AdminLogin
from vote_api.security import authenticate_admin, require_admin
from vote_api.storage_mongo import VoteStore

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/api", tags=["Admin"])


@admin_router.post("/admin/login")
def admin_login(credentials: AdminLogin):
    token = authenticate_admin(credentials.username, credentials.password)
    return {"message": "Login successful", "data": {"token": token}}


@admin_router.get("/votes", dependencies=[Depends(require_admin)])
def get_all_votes(store: VoteStore = Depends(get_store)):
    try:
        votes = crud.list_votes(store)
    except PyMongoError as e:
        logger.error(f"Error in GET /api/votes: {e}")
        raise store_failure("Error fetching votes", e)
    return {"message": "Votes retrieved successfully", "data": votes}


@admin_router.put("/votes/{vote_id}", dependencies=[Depends(require_admin)])
def update_vote(
    vote_id: str,
    patch: Dict[str, Any] = Body(...),
    store: VoteStore = Depends(get_store),
):
    """Overwrite whichever fields the patch supplies; id and createdAt are kept."""
    try:
        vote = crud.update_vote(store, vote_id, patch)
    except PyMongoError as e:
        logger.error(f"Error updating vote {vote_id}: {e}")
        raise store_failure("Error updating vote", e)
    return {"message": "Vote updated successfully", "data": vote}


@admin_router.delete("/votes/{vote_id}", dependencies=[Depends(require_admin)])
def delete_vote(vote_id: str, store: VoteStore = Depends(get_store)):
    try:
        vote = crud.delete_vote(store, vote_id)
    except PyMongoError as e:
        logger.error(f"Error deleting vote {vote_id}: {e}")
        raise store_failure("Error deleting vote", e)
    return {"message": "Vote deleted successfully", "data": vote}

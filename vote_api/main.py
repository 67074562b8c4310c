# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from vote_api import config
from vote_api.database.connection import connect_with_retry, get_votes_collection
from vote_api.errors import VoteServiceError
from vote_api.routes.admin_routes import admin_router
from vote_api.routes.vote_routes import vote_router
from vote_api.storage_mongo import VoteStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the MongoDB client on startup and close it on shutdown."""
    client = None
    if app.state.store is None:
        logger.info(f"Connecting to MongoDB database {config.MONGO_DB}...")
        client = await run_in_threadpool(connect_with_retry)
        app.state.store = VoteStore(get_votes_collection(client))
        await run_in_threadpool(app.state.store.ensure_indexes)
    logger.info("Vote API started")

    yield

    if client is not None:
        client.close()
        app.state.store = None
        logger.info("MongoDB connection closed")


async def vote_service_error_handler(request: Request, exc: VoteServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [err.get("msg", str(err)) for err in exc.errors()]
    return JSONResponse(status_code=400, content={"message": "Validation error", "error": errors})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Something went wrong!"})


def create_app(store: Optional[VoteStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When `store` is given it is used as-is and no connection is opened at
    startup; otherwise the lifespan connects using the environment settings.
    """
    app = FastAPI(title="Vote API", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Length", "Content-Type"],
    )

    app.add_exception_handler(VoteServiceError, vote_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(vote_router)
    app.include_router(admin_router)

    @app.get("/health", tags=["Health"])
    def health_check():
        healthy = app.state.store is not None and app.state.store.ping()
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={"status": "healthy" if healthy else "unhealthy", "database": "MongoDB"},
        )

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the Vote API"}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(
        "vote_api.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
        log_level=config.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()

import traceback
from typing import Any, Optional

from vote_api import config


class VoteServiceError(Exception):
    """Base error carrying the HTTP status and the JSON body fields."""

    status_code = 500

    def __init__(self, message: str, error: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class InvalidInput(VoteServiceError):
    status_code = 400


class Unauthorized(VoteServiceError):
    status_code = 401


class Forbidden(VoteServiceError):
    status_code = 403


class NotFound(VoteServiceError):
    status_code = 404


class Conflict(VoteServiceError):
    status_code = 409


class StoreFailure(VoteServiceError):
    status_code = 500

    def __init__(self, message: str, error: Optional[Any] = None, details: Optional[str] = None):
        super().__init__(message, error)
        self.details = details

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.details is not None:
            body["details"] = self.details
        return body


def store_failure(message: str, exc: Exception) -> StoreFailure:
    """Wrap a driver exception; the traceback is only exposed in development."""
    details = None
    if config.DEBUG:
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return StoreFailure(message, str(exc), details)

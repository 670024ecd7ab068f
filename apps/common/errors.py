from __future__ import annotations

import functools
import logging
from typing import Callable, Iterable, TypeVar

from django.db import DatabaseError, IntegrityError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


class ServiceError(Exception):
    """Base class for every failure a data access function reports.

    `status` is the HTTP status a JSON view answers with, `code` a stable
    machine-readable tag and `retryable` tells the caller whether repeating
    the same call can succeed without changing the input.
    """

    status = 400
    code = "error"
    retryable = False

    def __init__(self, message: str = "", *, errors: Iterable[str] | None = None):
        self.errors = list(errors or [])
        if not message:
            message = ", ".join(self.errors) or self.default_message()
        super().__init__(message)
        self.message = message

    @classmethod
    def default_message(cls) -> str:
        return "Operation failed"

    def as_dict(self) -> dict:
        data = {"code": self.code, "message": self.message, "retryable": self.retryable}
        if self.errors:
            data["errors"] = self.errors
        return data


class InvalidInput(ServiceError):
    status = 422
    code = "invalid"

    @classmethod
    def default_message(cls) -> str:
        return "Invalid input"


class NotAuthenticated(ServiceError):
    status = 401
    code = "not_authenticated"

    @classmethod
    def default_message(cls) -> str:
        return "Authentication required"


class Forbidden(ServiceError):
    status = 403
    code = "forbidden"

    @classmethod
    def default_message(cls) -> str:
        return "Not allowed"


class NotFound(ServiceError):
    status = 404
    code = "not_found"

    @classmethod
    def default_message(cls) -> str:
        return "Not found"


class Conflict(ServiceError):
    status = 409
    code = "conflict"

    @classmethod
    def default_message(cls) -> str:
        return "Conflicting update"


class InvalidTransition(Conflict):
    code = "invalid_transition"


class Unavailable(ServiceError):
    status = 503
    code = "unavailable"
    retryable = True

    @classmethod
    def default_message(cls) -> str:
        return "Storage temporarily unavailable"


def translate_db_errors(func: F) -> F:
    """Map database exceptions raised inside a service call to ServiceErrors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError as exc:
            logger.warning("%s rejected by constraint: %s", func.__qualname__, exc)
            raise Conflict("Constraint violated") from exc
        except DatabaseError as exc:
            logger.error("%s failed on storage: %s", func.__qualname__, exc)
            raise Unavailable() from exc

    return wrapper  # type: ignore[return-value]

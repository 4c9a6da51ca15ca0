"""
Error types shared by the service and store layers.

Every error carries a ready-to-display, already localized ``message``
and the HTTP status the transport layer should answer with.  The
handlers registered by ``register_exception_handlers`` turn them into
``{"message": ...}`` JSON bodies.

Not-found conditions deliberately answer with 400 rather than 404 so
that all client errors of the lists API share one status code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class ListsError(Exception):
    """Base class for errors raised by the lists service and store."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ListsError):
    """Bad or missing client input (invalid id, invalid name)."""


class NotFound(ListsError):
    """A requested list does not exist."""


class StoreError(ListsError):
    """The persistence layer failed (connectivity, constraints, SQL errors)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def lists_error_handler(request: Request, exc: ListsError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the lists error handler to ``app``."""
    app.add_exception_handler(ListsError, lists_error_handler)

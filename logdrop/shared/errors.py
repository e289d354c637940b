"""
API Errors Module

This module defines the error kinds raised by request handlers and the
FastAPI exception handler that renders them as JSON.

Features:
- NotFound (404)
- BadRequest (400)
- InternalError (500)
- JSON error bodies

Error Body:
    {"error": "<category prefix>: <message>"}

Dependencies:
- FastAPI for request/response types
- logging for tracking

Author: Logdrop Development Team
"""

from fastapi import Request
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Base class for errors surfaced to API clients.

    Attributes:
        status_code (int): HTTP status returned to the client
        prefix (str): Category-specific text placed before the message
        message (str): Free-form description of what went wrong
    """

    status_code = 500
    prefix = "Something went wrong. Probably not your fault"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> str:
        """Full human-readable error text."""
        if not self.message:
            return f"{self.prefix}."
        return f"{self.prefix}: {self.message}"


class NotFoundError(ApiError):
    """Requested resource does not exist."""

    status_code = 404
    prefix = "No resources could be found"


class BadRequestError(ApiError):
    """Client-supplied data is malformed or incomplete."""

    status_code = 400
    prefix = "There is something wrong with your request"


class InternalError(ApiError):
    """Local failure unrelated to client input."""

    status_code = 500
    prefix = "Something went wrong. Probably not your fault"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """
    Render an ApiError as a JSON response.

    Args:
        request: The request that failed
        exc: The raised error

    Returns:
        JSONResponse: Error body with the matching status code
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail}
    )

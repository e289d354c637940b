"""
Security Middleware Module

This module provides middleware for adding HTTP security headers to
every response, including archive downloads.

Features:
- Content Type Options
- Frame Options
- Referrer Policy
- Cache Control
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    # Prevent MIME type sniffing of uploaded log content
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Referrer-Policy': 'no-referrer',
    # Archives are built on demand and must not be served stale
    'Cache-Control': 'no-store',
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware for adding security headers to all responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Add security headers to response.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            Response with security headers
        """
        response = await call_next(request)

        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)

        return response

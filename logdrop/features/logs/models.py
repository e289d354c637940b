"""
Log Models Module

Response models for the log upload and download endpoints.

Dependencies:
- pydantic for data validation

Author: Logdrop Development Team
"""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """
    Upload acknowledgement.

    Attributes:
        status (str): Always "success"
        message (str): Human-readable confirmation
    """
    status: str = "success"
    message: str = "File uploaded successfully"


class ErrorResponse(BaseModel):
    """Error body returned for every non-2xx response."""
    error: str

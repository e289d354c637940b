"""
Health Routes Module

Liveness endpoint used by load balancers and container orchestration.

Author: Logdrop Development Team
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "Server is running :)"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Report that the server is up."""
    return HealthResponse()

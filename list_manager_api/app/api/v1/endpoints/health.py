"""
Health endpoint for API v1.

A liveness probe for load balancers and container orchestrators.  It
does not touch the database.
"""

from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("/", response_model=Dict[str, str])
async def health() -> Dict[str, str]:
    return {"status": "ok"}

"""API v1 routes."""

from fastapi import APIRouter

from proapoio.api.v1 import proposals

api_router = APIRouter()

# Include all route modules
api_router.include_router(proposals.router, prefix="/propostas", tags=["Proposals"])

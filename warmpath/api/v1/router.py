from fastapi import APIRouter

from warmpath.api.v1.endpoints import network, relationships

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(network.router, prefix="/network", tags=["Network"])
api_router.include_router(relationships.router, prefix="/relationships", tags=["Relationships"])

__all__ = ["api_router"]

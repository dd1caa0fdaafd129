"""
Main API router that includes all endpoint routers
"""

from fastapi import APIRouter

from creator_api.api.api_v1.endpoints import account, api_key, generate

# Create main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(generate.router, prefix="/generate-content", tags=["generation"])
api_router.include_router(api_key.router, prefix="/handle-api-key", tags=["credentials"])
api_router.include_router(account.router, tags=["account"])

"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from registry_identity.api.v1.endpoints import health, me, users

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(me.router)
api_router.include_router(users.router)

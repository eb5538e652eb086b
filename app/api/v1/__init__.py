"""
API v1 Router

Organization-scoped endpoints are prefixed with /orgs/{orgName}.
"""

from fastapi import APIRouter

from . import members, users
from .organizations import router_global as orgs_global_router
from .organizations import router_scoped as orgs_scoped_router

router = APIRouter()

# Organization routes (non-org-scoped: list, create)
router.include_router(orgs_global_router)

# Organization routes (org-scoped: get, update, delete)
router.include_router(orgs_scoped_router, prefix="/orgs/{orgName}", tags=["Organizations"])

router.include_router(members.router, prefix="/orgs/{orgName}/members", tags=["Members"])
router.include_router(users.router, prefix="/users", tags=["Users"])


@router.get("/", tags=["API"])
async def api_root():
    """API root — returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/orgs",
            "/orgs/{orgName}",
            "/orgs/{orgName}/members",
            "/users",
        ],
    }

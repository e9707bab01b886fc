# File: outreach_cms/api/v1/api.py
from fastapi import APIRouter

from outreach_cms.api.v1.endpoints import auth, events, health, partners, team_members, users

# Create main API router
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# Admin collections
api_router.include_router(
    events.router,
    prefix="/admin/events",
    tags=["events"]
)

api_router.include_router(
    partners.router,
    prefix="/admin/partners",
    tags=["partners"]
)

api_router.include_router(
    team_members.router,
    prefix="/admin/team-members",
    tags=["team-members"]
)

api_router.include_router(
    users.router,
    prefix="/admin/users",
    tags=["users"]
)

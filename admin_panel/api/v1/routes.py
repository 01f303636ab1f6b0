"""
API v1 router. Feature routers are mounted here and the whole tree is
served under /api/v1 by admin_panel.main.
"""

from fastapi import APIRouter

from admin_panel.api.v1 import auth, profiles, users

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(profiles.router)


@api_router.get("/status", tags=["api"])
def status() -> dict[str, str]:
    """Lightweight API status endpoint."""
    return {"service": "admin-panel", "status": "ok"}

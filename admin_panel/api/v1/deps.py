"""
Reusable dependencies: service lookup, acting-user resolution, permission
gates and rate limiting.
"""

from __future__ import annotations

import time
from typing import Optional

import redis
from fastapi import Depends, Header, HTTPException, Request, status

from admin_panel.core.errors import ForbiddenError, UnauthorizedError
from admin_panel.core.logging import get_logger
from admin_panel.core.redis_client import get_redis_client
from admin_panel.models.entities import Permission
from admin_panel.services.auth import AuthService, Session
from admin_panel.services.profiles import ProfileService
from admin_panel.services.users import UserService

logger = get_logger(__name__)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service


def get_current_actor(
    x_user_id: Optional[str] = Header(default=None),
    auth: AuthService = Depends(get_auth_service),
) -> Session:
    """Resolve the acting user named by the ``X-User-Id`` header."""
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header")
    return auth.resolve_actor(x_user_id)


def deny(request: Request, action: str, actor: Session) -> ForbiddenError:
    """Record a denied action and build the error to raise."""
    request.app.state.metrics.forbidden.labels(action=action).inc()
    logger.warning("Denied %s for user %s (%s)", action, actor.user.id, actor.profile.name)
    return ForbiddenError(f"Profile {actor.profile.name} is not allowed to {action}")


def require_permission(permission: Permission):
    """Return a dependency enforcing a catalog permission for the acting user."""

    def _dep(request: Request, actor: Session = Depends(get_current_actor)) -> Session:
        if not actor.has_permission(permission):
            raise deny(request, permission.value.lower(), actor)
        return actor

    return _dep


def rate_limit(request: Request, actor: Session = Depends(get_current_actor)) -> None:
    """Simple per-actor fixed-window rate limiter.

    Uses Redis when REDIS_URL is set, otherwise an in-process counter per
    app instance. A limit of 0 disables the check.
    """
    settings = request.app.state.settings
    limit = settings.rate_limit_per_minute
    if limit <= 0:
        return None

    window = int(time.time() // 60)
    key = f"ratelimit:{actor.user.id}:{window}"
    r = get_redis_client(settings.redis_url)
    if r is not None:
        try:
            count = r.incr(key)
            if count == 1:
                r.expire(key, 60)
            if count > limit:
                raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="rate_limited")
            return None
        except HTTPException:
            raise
        except (redis.RedisError, OSError) as exc:
            logger.warning("Redis unavailable for rate limiting, using in-process counter: %s", exc)

    # Only the current window is kept in process.
    store = getattr(request.app.state, "_rate_store", None)
    if store is None or getattr(request.app.state, "_rate_window", None) != window:
        store = {}
        request.app.state._rate_store = store
        request.app.state._rate_window = window
    count = store.get(key, 0) + 1
    store[key] = count
    if count > limit:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="rate_limited")

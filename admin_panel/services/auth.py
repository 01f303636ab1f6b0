"""
Email-only login and actor resolution.

There is no password check: a login identifies an active user by email and
returns the user's profile and permission list. The HTTP layer then names
the acting user by id on every request and ``resolve_actor`` re-applies the
same checks.
"""

from __future__ import annotations

from dataclasses import dataclass

from admin_panel.core.errors import UnauthorizedError
from admin_panel.core.logging import get_logger
from admin_panel.core.rbac import permissions_for
from admin_panel.core.store import EntityStore
from admin_panel.models.entities import Permission, Profile, User

logger = get_logger(__name__)

INVALID_LOGIN = "Invalid email or password"


@dataclass(frozen=True)
class Session:
    user: User
    profile: Profile
    permissions: frozenset[Permission]

    def has_permission(self, permission: Permission) -> bool:
        return permission in self.permissions


class AuthService:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def login(self, email: str) -> Session:
        user = self._store.find_user_by_email(email)
        if user is None:
            logger.info("Login rejected for unknown email")
            raise UnauthorizedError(INVALID_LOGIN)
        return self._open_session(user)

    def resolve_actor(self, user_id: str) -> Session:
        user = self._store.find_user_by_id(user_id)
        if user is None:
            raise UnauthorizedError("Unknown user")
        return self._open_session(user)

    def _open_session(self, user: User) -> Session:
        if not user.is_active:
            logger.info("Rejected inactive user %s", user.id)
            raise UnauthorizedError("Inactive user. Contact an administrator.")
        profile = self._store.find_profile_by_id(user.profile_id)
        if profile is None:
            raise UnauthorizedError("Profile not found")
        return Session(user=user, profile=profile, permissions=permissions_for(profile.name))

"""Profile (role record) management."""

from __future__ import annotations

from typing import Optional

from admin_panel.core.errors import ConflictError, InvariantViolationError, NotFoundError
from admin_panel.core.logging import get_logger
from admin_panel.core.store import EntityStore
from admin_panel.models.entities import Profile, Role

logger = get_logger(__name__)


class ProfileService:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def list(self) -> list[Profile]:
        return self._store.all_profiles()

    def find(self, profile_id: str) -> Optional[Profile]:
        return self._store.find_profile_by_id(profile_id)

    def get(self, profile_id: str) -> Profile:
        profile = self._store.find_profile_by_id(profile_id)
        if profile is None:
            raise NotFoundError(f"Profile with id {profile_id} not found")
        return profile

    def create(self, name: str) -> Profile:
        with self._store.lock:
            if self._store.name_exists(name):
                raise ConflictError(f"Profile named {name} already exists")
            profile = self._store.create_profile(name)
        logger.info("Created profile %s (%s)", profile.id, profile.name)
        return profile

    def update(self, profile_id: str, name: str | None = None) -> Profile:
        """Rename a profile.

        Renaming the administrator profile while it still has active members
        would empty the administrator set, so it is rejected.
        """
        with self._store.lock:
            current = self.get(profile_id)
            if not name or name == current.name:
                return current
            if self._store.name_exists(name, exclude_id=profile_id):
                raise ConflictError(f"Profile named {name} already exists")
            if current.role is Role.ADMINISTRADOR and Role.from_name(name) is not Role.ADMINISTRADOR:
                members = self._store.find_users_by_profile(profile_id)
                if any(user.is_active for user in members):
                    logger.warning("Rejected rename of administrator profile %s", profile_id)
                    raise InvariantViolationError(
                        "Cannot rename the administrator profile while it has active users"
                    )
            profile = self._store.update_profile(profile_id, name)
        logger.info("Renamed profile %s to %s", profile_id, name)
        return profile

    def delete(self, profile_id: str) -> None:
        with self._store.lock:
            self.get(profile_id)
            if self._store.find_users_by_profile(profile_id):
                raise ConflictError(f"Profile with id {profile_id} is still assigned to users")
            self._store.delete_profile(profile_id)
        logger.info("Deleted profile %s", profile_id)

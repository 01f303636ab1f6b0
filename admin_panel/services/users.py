"""
User management with the administrator invariant.

At least one active user must keep the Administrador profile. Every mutation
that could shrink that set (deactivation, deletion, moving to another
profile) checks the remaining active administrators while holding the store
lock, so two concurrent requests cannot both pass the check and jointly
remove the last one.
"""

from __future__ import annotations

from typing import Optional

from admin_panel.core.errors import (
    BusinessRuleError,
    ConflictError,
    InvalidReferenceError,
    InvariantViolationError,
    NotFoundError,
)
from admin_panel.core.logging import get_logger
from admin_panel.core.store import EntityStore
from admin_panel.models.entities import Role, User, UserCreate, UserUpdate
from admin_panel.services.query import ListResult, Pagination, UserFilters, list_users

logger = get_logger(__name__)


class UserService:
    def __init__(self, store: EntityStore, *, reject_inactive_delete: bool = True) -> None:
        self._store = store
        self._reject_inactive_delete = reject_inactive_delete

    def list(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> ListResult:
        return list_users(self._store, filters, pagination)

    def get(self, user_id: str) -> User:
        user = self._store.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def create(self, data: UserCreate) -> User:
        with self._store.lock:
            if not self._store.profile_exists(data.profile_id):
                raise InvalidReferenceError(f"Profile with id {data.profile_id} not found")
            if self._store.email_exists(data.email):
                raise ConflictError(f"Email {data.email} is already in use")
            user = self._store.create_user(data)
        logger.info("Created user %s with profile %s", user.id, user.profile_id)
        return user

    def update(self, user_id: str, changes: UserUpdate) -> User:
        with self._store.lock:
            current = self.get(user_id)
            if changes.profile_id is not None and not self._store.profile_exists(changes.profile_id):
                raise InvalidReferenceError(f"Profile with id {changes.profile_id} not found")
            if changes.email is not None and self._store.email_exists(changes.email, exclude_id=user_id):
                raise ConflictError(f"Email {changes.email} is already in use")

            removes_admin = changes.is_active is False or (
                changes.profile_id is not None and not self._is_admin_profile(changes.profile_id)
            )
            if removes_admin:
                self.guard_admin_invariant(current)

            user = self._store.update_user(user_id, changes)
        logger.info("Updated user %s", user_id)
        return user

    def delete(self, user_id: str) -> None:
        with self._store.lock:
            current = self.get(user_id)
            if self._reject_inactive_delete and not current.is_active:
                raise BusinessRuleError("Inactive users cannot be deleted")
            self.guard_admin_invariant(current)
            self._store.delete_user(user_id)
        logger.info("Deleted user %s", user_id)

    def activate(self, user_id: str) -> User:
        return self.update(user_id, UserUpdate(is_active=True))

    def deactivate(self, user_id: str) -> User:
        return self.update(user_id, UserUpdate(is_active=False))

    def guard_admin_invariant(self, target: User) -> None:
        """Reject removing ``target`` from the active administrators if it is the last one.

        Callers must hold ``store.lock``.
        """
        if not target.is_active or not self._is_admin_profile(target.profile_id):
            return
        others = [
            user
            for user in self._store.all_users()
            if user.id != target.id and user.is_active and self._is_admin_profile(user.profile_id)
        ]
        if not others:
            logger.warning("Rejected change to last active administrator %s", target.id)
            raise InvariantViolationError("At least one active administrator must remain")

    def _is_admin_profile(self, profile_id: str) -> bool:
        profile = self._store.find_profile_by_id(profile_id)
        return profile is not None and profile.role is Role.ADMINISTRADOR

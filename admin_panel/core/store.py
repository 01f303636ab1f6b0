"""
In-memory entity store for users and profiles.

Rows live in insertion-ordered dicts keyed by id, with a monotonic counter per
entity kind. Entities are frozen dataclasses, so lookups hand out values that
callers cannot mutate behind the store's back.

The store owns a re-entrant lock. Single calls are atomic on their own;
services hold ``store.lock`` across a whole read-check-write sequence so the
administrator count and the write see the same snapshot.
"""

from __future__ import annotations

import dataclasses
import threading
from typing import ContextManager, Optional, Protocol

from admin_panel.models.entities import Profile, User, UserCreate, UserUpdate


class EntityStore(Protocol):
    lock: ContextManager

    def all_users(self) -> list[User]: ...
    def find_user_by_id(self, user_id: str) -> Optional[User]: ...
    def find_user_by_email(self, email: str) -> Optional[User]: ...
    def find_users_by_profile(self, profile_id: str) -> list[User]: ...
    def search_users(self, term: str) -> list[User]: ...
    def create_user(self, data: UserCreate) -> User: ...
    def update_user(self, user_id: str, changes: UserUpdate) -> User: ...
    def delete_user(self, user_id: str) -> bool: ...
    def email_exists(self, email: str, exclude_id: Optional[str] = None) -> bool: ...

    def all_profiles(self) -> list[Profile]: ...
    def find_profile_by_id(self, profile_id: str) -> Optional[Profile]: ...
    def find_profile_by_name(self, name: str) -> Optional[Profile]: ...
    def create_profile(self, name: str) -> Profile: ...
    def update_profile(self, profile_id: str, name: str) -> Profile: ...
    def delete_profile(self, profile_id: str) -> bool: ...
    def profile_exists(self, profile_id: str) -> bool: ...
    def name_exists(self, name: str, exclude_id: Optional[str] = None) -> bool: ...


def matches_search(user: User, term: str) -> bool:
    """Case-insensitive substring test on first/last name, email and full name."""
    needle = term.lower()
    return (
        needle in user.first_name.lower()
        or needle in user.last_name.lower()
        or needle in user.email.lower()
        or needle in user.full_name.lower()
    )


class InMemoryEntityStore:
    """Reference ``EntityStore`` backed by process memory."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._users: dict[str, User] = {}
        self._profiles: dict[str, Profile] = {}
        self._next_user_id = 1
        self._next_profile_id = 1

    # Users

    def all_users(self) -> list[User]:
        with self.lock:
            return list(self._users.values())

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self.lock:
            return self._users.get(user_id)

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.lower()
        with self.lock:
            for user in self._users.values():
                if user.email.lower() == wanted:
                    return user
        return None

    def find_users_by_profile(self, profile_id: str) -> list[User]:
        with self.lock:
            return [user for user in self._users.values() if user.profile_id == profile_id]

    def search_users(self, term: str) -> list[User]:
        with self.lock:
            return [user for user in self._users.values() if matches_search(user, term)]

    def create_user(self, data: UserCreate) -> User:
        with self.lock:
            user = User(
                id=f"user-{self._next_user_id}",
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                profile_id=data.profile_id,
                is_active=True,
            )
            self._next_user_id += 1
            self._users[user.id] = user
            return user

    def update_user(self, user_id: str, changes: UserUpdate) -> User:
        with self.lock:
            current = self._users.get(user_id)
            if current is None:
                raise KeyError(f"User with id {user_id} not found")
            fields = {
                name: value
                for name, value in dataclasses.asdict(changes).items()
                if value is not None
            }
            updated = dataclasses.replace(current, **fields)
            self._users[user_id] = updated
            return updated

    def delete_user(self, user_id: str) -> bool:
        with self.lock:
            return self._users.pop(user_id, None) is not None

    def email_exists(self, email: str, exclude_id: Optional[str] = None) -> bool:
        wanted = email.lower()
        with self.lock:
            return any(
                user.email.lower() == wanted and user.id != exclude_id
                for user in self._users.values()
            )

    # Profiles

    def all_profiles(self) -> list[Profile]:
        with self.lock:
            return list(self._profiles.values())

    def find_profile_by_id(self, profile_id: str) -> Optional[Profile]:
        with self.lock:
            return self._profiles.get(profile_id)

    def find_profile_by_name(self, name: str) -> Optional[Profile]:
        wanted = name.lower()
        with self.lock:
            for profile in self._profiles.values():
                if profile.name.lower() == wanted:
                    return profile
        return None

    def create_profile(self, name: str) -> Profile:
        with self.lock:
            profile = Profile(id=f"profile-{self._next_profile_id}", name=name)
            self._next_profile_id += 1
            self._profiles[profile.id] = profile
            return profile

    def update_profile(self, profile_id: str, name: str) -> Profile:
        with self.lock:
            if profile_id not in self._profiles:
                raise KeyError(f"Profile with id {profile_id} not found")
            updated = Profile(id=profile_id, name=name)
            self._profiles[profile_id] = updated
            return updated

    def delete_profile(self, profile_id: str) -> bool:
        with self.lock:
            return self._profiles.pop(profile_id, None) is not None

    def profile_exists(self, profile_id: str) -> bool:
        with self.lock:
            return profile_id in self._profiles

    def name_exists(self, name: str, exclude_id: Optional[str] = None) -> bool:
        wanted = name.lower()
        with self.lock:
            return any(
                profile.name.lower() == wanted and profile.id != exclude_id
                for profile in self._profiles.values()
            )

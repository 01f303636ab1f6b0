import dataclasses

import pytest
from fastapi.testclient import TestClient

from admin_panel.core.config import get_application_settings
from admin_panel.core.store import InMemoryEntityStore
from admin_panel.main import create_app
from admin_panel.models.entities import Role, UserCreate
from admin_panel.services.profiles import ProfileService
from admin_panel.services.seed import seed_store
from admin_panel.services.users import UserService

# Seeded ids: profiles are created in Role order, then one user per profile.
ADMIN_ID = "user-1"
EDITOR_ID = "user-2"
GUEST_ID = "user-3"


def as_user(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def profiles(store):
    """Create the three role profiles in an empty store, keyed by Role."""
    return {role: store.create_profile(role.value) for role in Role}


@pytest.fixture
def users(store):
    return UserService(store)


@pytest.fixture
def profile_service(store):
    return ProfileService(store)


@pytest.fixture
def make_user(users, profiles):
    counter = iter(range(1, 10_000))

    def _make(role=Role.VISITANTE, first_name="Test", last_name="User", email=None, active=True):
        email = email or f"user{next(counter)}@example.com"
        user = users.create(
            UserCreate(first_name=first_name, last_name=last_name, email=email, profile_id=profiles[role].id)
        )
        if not active:
            user = users.deactivate(user.id)
        return user

    return _make


@pytest.fixture
def settings():
    return dataclasses.replace(get_application_settings(), rate_limit_per_minute=0, redis_url=None)


@pytest.fixture
def seeded_store():
    store = InMemoryEntityStore()
    seed_store(store)
    return store


@pytest.fixture
def client(seeded_store, settings):
    return TestClient(create_app(store=seeded_store, settings=settings))

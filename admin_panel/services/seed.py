"""Initial profiles and users for a fresh in-memory store."""

from __future__ import annotations

from admin_panel.core.logging import get_logger
from admin_panel.core.store import EntityStore
from admin_panel.models.entities import Role, UserCreate

logger = get_logger(__name__)

SEED_USERS = [
    (Role.ADMINISTRADOR, "João", "Silva", "joao.silva@example.com"),
    (Role.EDITOR, "Maria", "Santos", "maria.santos@example.com"),
    (Role.VISITANTE, "Pedro", "Oliveira", "pedro.oliveira@example.com"),
]


def seed_store(store: EntityStore) -> None:
    """Create the default profiles and one user per profile, skipping existing rows."""
    with store.lock:
        for role in Role:
            if store.find_profile_by_name(role.value) is None:
                store.create_profile(role.value)

        for role, first_name, last_name, email in SEED_USERS:
            profile = store.find_profile_by_name(role.value)
            if profile is None or store.email_exists(email):
                continue
            store.create_user(
                UserCreate(first_name=first_name, last_name=last_name, email=email, profile_id=profile.id)
            )
    logger.info("Seeded store with %d profiles and %d users", len(store.all_profiles()), len(store.all_users()))

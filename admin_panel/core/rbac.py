"""
Role-based access rules.

Defines the static profile-to-permission table and the row-level gates that
decide whether an acting profile may edit or toggle a given user, or assign a
profile to one. The table is the single source for both the login response
and the server-side checks.
"""

from __future__ import annotations

from typing import Optional

from admin_panel.models.entities import Permission, Profile, Role, User


# Profile name to permission mapping. Not persisted; no runtime mutation.
PROFILE_PERMISSIONS: dict[str, frozenset[Permission]] = {
    Role.ADMINISTRADOR.value: frozenset(Permission),
    Role.EDITOR.value: frozenset(
        {
            Permission.VIEW_USERS,
            Permission.CREATE_USERS,
            Permission.EDIT_USERS,
            Permission.ACTIVATE_USERS,
        }
    ),
    Role.VISITANTE.value: frozenset({Permission.VIEW_USERS}),
}


def permissions_for(profile_name: Optional[str]) -> frozenset[Permission]:
    """Return the permissions granted to a profile name; empty when unknown."""
    if profile_name is None:
        return frozenset()
    return PROFILE_PERMISSIONS.get(profile_name, frozenset())


def has_permission(profile_name: Optional[str], permission: Permission) -> bool:
    return permission in permissions_for(profile_name)


def can_edit_user(
    acting_profile: Optional[Profile],
    target_user: Optional[User],
    target_profile: Optional[Profile],
    has_edit_capability: bool,
) -> bool:
    """Decide whether the acting profile may edit (or delete) the target user.

    Editors never touch administrators. ``target_user`` is accepted so callers
    pass the full row; the decision depends only on the profiles.
    """
    if not has_edit_capability:
        return False
    if acting_profile is None or target_profile is None:
        return False
    if acting_profile.role is Role.EDITOR and target_profile.role is Role.ADMINISTRADOR:
        return False
    return True


def can_toggle_status(
    acting_profile: Optional[Profile],
    target_profile: Optional[Profile],
    has_activate_capability: bool,
) -> bool:
    """Decide whether the acting profile may activate/deactivate the target.

    Editors may only toggle guests. The administrator invariant is enforced
    separately by the mutation itself.
    """
    if not has_activate_capability:
        return False
    if acting_profile is None or target_profile is None:
        return False
    if acting_profile.role is Role.EDITOR:
        return target_profile.role is Role.VISITANTE
    return True


def can_assign_profile(acting_profile: Optional[Profile], new_profile: Optional[Profile]) -> bool:
    """Only administrators may hand out the Administrador profile."""
    if acting_profile is None:
        return False
    if new_profile is not None and new_profile.role is Role.ADMINISTRADOR:
        return acting_profile.role is Role.ADMINISTRADOR
    return True

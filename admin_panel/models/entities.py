"""Domain entities and enumerations."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class Role(str, enum.Enum):
    """Profile names that carry authorization semantics."""

    ADMINISTRADOR = "Administrador"
    EDITOR = "Editor"
    VISITANTE = "Visitante"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["Role"]:
        for role in cls:
            if role.value == name:
                return role
        return None


class Permission(str, enum.Enum):
    VIEW_USERS = "VIEW_USERS"
    CREATE_USERS = "CREATE_USERS"
    EDIT_USERS = "EDIT_USERS"
    DELETE_USERS = "DELETE_USERS"
    ACTIVATE_USERS = "ACTIVATE_USERS"
    VIEW_PROFILES = "VIEW_PROFILES"
    MANAGE_PROFILES = "MANAGE_PROFILES"


@dataclass(frozen=True, slots=True)
class Profile:
    id: str
    name: str

    @property
    def role(self) -> Optional[Role]:
        return Role.from_name(self.name)


@dataclass(frozen=True, slots=True)
class User:
    id: str
    first_name: str
    last_name: str
    email: str
    profile_id: str
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class UserCreate:
    first_name: str
    last_name: str
    email: str
    profile_id: str


@dataclass(frozen=True)
class UserUpdate:
    """Partial update; ``None`` means "leave unchanged"."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    profile_id: Optional[str] = None
    is_active: Optional[bool] = None


__all__ = ["Permission", "Profile", "Role", "User", "UserCreate", "UserUpdate"]

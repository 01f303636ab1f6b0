"""
Pydantic request/response models. JSON field names are camelCase.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from admin_panel.models.entities import Permission, Profile, User, UserCreate, UserUpdate
from admin_panel.services.query import Paged


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _strip_required(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


class ProfileOut(CamelModel):
    id: str
    name: str

    @classmethod
    def of(cls, profile: Profile) -> "ProfileOut":
        return cls(id=profile.id, name=profile.name)


class ProfileIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v)


class ProfileUpdateIn(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _strip_required(v)


class UserOut(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    is_active: bool
    profile_id: str

    @classmethod
    def of(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            is_active=user.is_active,
            profile_id=user.profile_id,
        )


class UserIn(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    profile_id: str = Field(..., min_length=1)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v: str) -> str:
        return _strip_required(v)

    def to_domain(self) -> UserCreate:
        return UserCreate(
            first_name=self.first_name,
            last_name=self.last_name,
            email=str(self.email),
            profile_id=self.profile_id,
        )


class UserUpdateIn(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    profile_id: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _strip_required(v)

    def to_domain(self) -> UserUpdate:
        return UserUpdate(
            first_name=self.first_name,
            last_name=self.last_name,
            email=None if self.email is None else str(self.email),
            profile_id=self.profile_id,
            is_active=self.is_active,
        )


class PagedUsersOut(CamelModel):
    data: list[UserOut]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def of(cls, result: Paged) -> "PagedUsersOut":
        return cls(
            data=[UserOut.of(user) for user in result.data],
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        )


class LoginIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _strip_required(v)


class SessionOut(BaseModel):
    user: UserOut
    profile: ProfileOut
    permissions: list[Permission]

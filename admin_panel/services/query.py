"""
User listing: filtering, pagination and sorting.

``list_users`` returns a tagged result so callers branch explicitly:

    result = list_users(store, filters, pagination)
    if isinstance(result, Paged):
        ...  # envelope with totals
    else:
        ...  # plain rows

Sorting is a separate stage applied to whichever rows the caller ends up
displaying; it never changes totals.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from admin_panel.core.store import EntityStore, matches_search
from admin_panel.models.entities import Profile, User

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class UserFilters:
    profile_id: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class Pagination:
    page: Optional[int] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class Unpaged:
    items: list[User]


@dataclass(frozen=True)
class Paged:
    data: list[User]
    total: int
    page: int
    limit: int
    total_pages: int


ListResult = Union[Unpaged, Paged]


class SortField(str, enum.Enum):
    NAME = "name"
    EMAIL = "email"
    PROFILE = "profile"
    STATUS = "status"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


def _filter_users(store: EntityStore, filters: Optional[UserFilters]) -> list[User]:
    profile_id = filters.profile_id if filters else None
    search = filters.search if filters else None

    if profile_id and search:
        return [user for user in store.find_users_by_profile(profile_id) if matches_search(user, search)]
    if profile_id:
        return store.find_users_by_profile(profile_id)
    if search:
        return store.search_users(search)
    return store.all_users()


def paginate(users: list[User], page: int, limit: int) -> Paged:
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))
    start = (page - 1) * limit
    total = len(users)
    return Paged(
        data=users[start : start + limit],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


def list_users(
    store: EntityStore,
    filters: Optional[UserFilters] = None,
    pagination: Optional[Pagination] = None,
) -> ListResult:
    """Filter the user collection, then paginate when both page and limit are given."""
    with store.lock:
        users = _filter_users(store, filters)

    if pagination is not None and pagination.page is not None and pagination.limit is not None:
        return paginate(users, pagination.page, pagination.limit)
    return Unpaged(items=users)


def _sort_key(field: SortField, profile_names: dict[str, str]):
    if field is SortField.NAME:
        return lambda user: user.full_name.lower()
    if field is SortField.EMAIL:
        return lambda user: user.email.lower()
    if field is SortField.PROFILE:
        return lambda user: profile_names.get(user.profile_id, "").lower()
    return lambda user: 1 if user.is_active else 0


def sort_users(
    users: Iterable[User],
    field: SortField,
    direction: SortDirection = SortDirection.ASC,
    profiles: Iterable[Profile] = (),
) -> list[User]:
    """Stable sort in either direction; equal keys keep their relative order."""
    profile_names = {profile.id: profile.name for profile in profiles}
    return sorted(
        users,
        key=_sort_key(SortField(field), profile_names),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )


@dataclass
class SortState:
    """Column-header sort selection.

    Selecting the active field again flips the direction; selecting a new
    field starts ascending.
    """

    field: Optional[SortField] = None
    direction: SortDirection = SortDirection.ASC

    def select(self, field: SortField) -> None:
        field = SortField(field)
        if self.field is field:
            self.direction = SortDirection.DESC if self.direction is SortDirection.ASC else SortDirection.ASC
        else:
            self.field = field
            self.direction = SortDirection.ASC

    def apply(self, users: Iterable[User], profiles: Iterable[Profile] = ()) -> list[User]:
        if self.field is None:
            return list(users)
        return sort_users(users, self.field, self.direction, profiles)

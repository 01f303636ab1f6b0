"""
User endpoints.

Catalog permissions gate each route; row-level rules (editors vs.
administrators, editors toggling only guests, only administrators handing out
the Administrador profile) are checked before the service runs. The
administrator invariant is enforced by the service regardless of who calls it.
"""

from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request, Response, status

from admin_panel.api.v1.deps import (
    deny,
    get_profile_service,
    get_user_service,
    rate_limit,
    require_permission,
)
from admin_panel.api.v1.schemas import PagedUsersOut, UserIn, UserOut, UserUpdateIn
from admin_panel.core.rbac import can_assign_profile, can_edit_user, can_toggle_status
from admin_panel.models.entities import Permission, User
from admin_panel.services.auth import Session
from admin_panel.services.profiles import ProfileService
from admin_panel.services.query import Paged, Pagination, SortDirection, SortField, UserFilters, sort_users
from admin_panel.services.users import UserService


router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(rate_limit)])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _check_edit(
    request: Request,
    actor: Session,
    target: User,
    profiles: ProfileService,
    *,
    action: str,
    capability: Permission,
) -> None:
    if not can_edit_user(actor.profile, target, profiles.find(target.profile_id), actor.has_permission(capability)):
        raise deny(request, action, actor)


def _check_toggle(request: Request, actor: Session, target: User, profiles: ProfileService) -> None:
    allowed = can_toggle_status(
        actor.profile,
        profiles.find(target.profile_id),
        actor.has_permission(Permission.ACTIVATE_USERS),
    )
    if not allowed:
        raise deny(request, "toggle_user_status", actor)


def _check_assign(request: Request, actor: Session, profile_id: Optional[str], profiles: ProfileService) -> None:
    # Unknown ids fall through to the service, which reports an invalid reference.
    if profile_id is None:
        return
    if not can_assign_profile(actor.profile, profiles.find(profile_id)):
        raise deny(request, "assign_profile", actor)


@router.get("", response_model=Union[list[UserOut], PagedUsersOut])
def list_users(
    profile_id: Optional[str] = Query(None, alias="profileId"),
    search: Optional[str] = Query(None),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    sort: Optional[SortField] = Query(None),
    order: SortDirection = Query(SortDirection.ASC),
    users: UserService = Depends(get_user_service),
    profiles: ProfileService = Depends(get_profile_service),
    _actor: Session = Depends(require_permission(Permission.VIEW_USERS)),
) -> Union[list[UserOut], PagedUsersOut]:
    """List users, optionally filtered, paginated and sorted.

    Pagination is requested when either ``page`` or ``limit`` is present; the
    response is then an envelope instead of a plain array.
    """
    filters = UserFilters(profile_id=profile_id or None, search=search or None)
    pagination = None
    if page is not None or limit is not None:
        pagination = Pagination(
            page=page if page is not None else DEFAULT_PAGE,
            limit=limit if limit is not None else DEFAULT_LIMIT,
        )

    result = users.list(filters, pagination)
    rows = result.data if isinstance(result, Paged) else result.items
    if sort is not None:
        rows = sort_users(rows, sort, order, profiles.list())

    if isinstance(result, Paged):
        return PagedUsersOut.of(
            Paged(
                data=rows,
                total=result.total,
                page=result.page,
                limit=result.limit,
                total_pages=result.total_pages,
            )
        )
    return [UserOut.of(user) for user in rows]


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
    _actor: Session = Depends(require_permission(Permission.VIEW_USERS)),
) -> UserOut:
    return UserOut.of(users.get(user_id))


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserIn,
    request: Request,
    users: UserService = Depends(get_user_service),
    profiles: ProfileService = Depends(get_profile_service),
    actor: Session = Depends(require_permission(Permission.CREATE_USERS)),
) -> UserOut:
    _check_assign(request, actor, payload.profile_id, profiles)
    return UserOut.of(users.create(payload.to_domain()))


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdateIn,
    request: Request,
    users: UserService = Depends(get_user_service),
    profiles: ProfileService = Depends(get_profile_service),
    actor: Session = Depends(require_permission(Permission.EDIT_USERS)),
) -> UserOut:
    target = users.get(user_id)
    _check_edit(request, actor, target, profiles, action="edit_user", capability=Permission.EDIT_USERS)
    if payload.is_active is not None and payload.is_active != target.is_active:
        _check_toggle(request, actor, target, profiles)
    _check_assign(request, actor, payload.profile_id, profiles)
    return UserOut.of(users.update(user_id, payload.to_domain()))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    request: Request,
    users: UserService = Depends(get_user_service),
    profiles: ProfileService = Depends(get_profile_service),
    actor: Session = Depends(require_permission(Permission.DELETE_USERS)),
) -> Response:
    target = users.get(user_id)
    _check_edit(request, actor, target, profiles, action="delete_user", capability=Permission.DELETE_USERS)
    users.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{user_id}/activate", response_model=UserOut)
def activate_user(
    user_id: str,
    request: Request,
    users: UserService = Depends(get_user_service),
    profiles: ProfileService = Depends(get_profile_service),
    actor: Session = Depends(require_permission(Permission.ACTIVATE_USERS)),
) -> UserOut:
    _check_toggle(request, actor, users.get(user_id), profiles)
    return UserOut.of(users.activate(user_id))


@router.put("/{user_id}/deactivate", response_model=UserOut)
def deactivate_user(
    user_id: str,
    request: Request,
    users: UserService = Depends(get_user_service),
    profiles: ProfileService = Depends(get_profile_service),
    actor: Session = Depends(require_permission(Permission.ACTIVATE_USERS)),
) -> UserOut:
    _check_toggle(request, actor, users.get(user_id), profiles)
    return UserOut.of(users.deactivate(user_id))

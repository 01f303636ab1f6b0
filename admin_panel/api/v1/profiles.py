"""
Profile endpoints. Reads are open to any active actor so user lists can show
profile names; changes require MANAGE_PROFILES.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from admin_panel.api.v1.deps import get_current_actor, get_profile_service, rate_limit, require_permission
from admin_panel.api.v1.schemas import ProfileIn, ProfileOut, ProfileUpdateIn
from admin_panel.models.entities import Permission
from admin_panel.services.auth import Session
from admin_panel.services.profiles import ProfileService


router = APIRouter(prefix="/profiles", tags=["profiles"], dependencies=[Depends(rate_limit)])

manage_profiles = require_permission(Permission.MANAGE_PROFILES)


@router.get("", response_model=list[ProfileOut])
def list_profiles(
    profiles: ProfileService = Depends(get_profile_service),
    _actor: Session = Depends(get_current_actor),
) -> list[ProfileOut]:
    return [ProfileOut.of(profile) for profile in profiles.list()]


@router.get("/{profile_id}", response_model=ProfileOut)
def get_profile(
    profile_id: str,
    profiles: ProfileService = Depends(get_profile_service),
    _actor: Session = Depends(get_current_actor),
) -> ProfileOut:
    return ProfileOut.of(profiles.get(profile_id))


@router.post("", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: ProfileIn,
    profiles: ProfileService = Depends(get_profile_service),
    _actor: Session = Depends(manage_profiles),
) -> ProfileOut:
    return ProfileOut.of(profiles.create(payload.name))


@router.put("/{profile_id}", response_model=ProfileOut)
def update_profile(
    profile_id: str,
    payload: ProfileUpdateIn,
    profiles: ProfileService = Depends(get_profile_service),
    _actor: Session = Depends(manage_profiles),
) -> ProfileOut:
    return ProfileOut.of(profiles.update(profile_id, payload.name))


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(
    profile_id: str,
    profiles: ProfileService = Depends(get_profile_service),
    _actor: Session = Depends(manage_profiles),
) -> Response:
    profiles.delete(profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

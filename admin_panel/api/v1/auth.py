"""
Authentication endpoints:
 - email-only login returning the user, profile and permission list
 - current actor lookup

Notes:
 - No password is verified; the email identifies the user.
 - Clients send the returned user id as ``X-User-Id`` on later requests.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from admin_panel.api.v1.deps import get_auth_service, get_current_actor
from admin_panel.api.v1.schemas import LoginIn, ProfileOut, SessionOut, UserOut
from admin_panel.services.auth import AuthService, Session


router = APIRouter(prefix="/auth", tags=["auth"])


def _session_out(session: Session) -> SessionOut:
    return SessionOut(
        user=UserOut.of(session.user),
        profile=ProfileOut.of(session.profile),
        permissions=sorted(session.permissions, key=lambda p: p.value),
    )


@router.post("/login", response_model=SessionOut)
def login(payload: LoginIn, auth: AuthService = Depends(get_auth_service)) -> SessionOut:
    return _session_out(auth.login(payload.email))


@router.get("/me", response_model=SessionOut)
def me(actor: Session = Depends(get_current_actor)) -> SessionOut:
    """Return the acting user's session, re-checked against the store."""
    return _session_out(actor)

import pytest

from admin_panel.core.errors import UnauthorizedError
from admin_panel.models.entities import Permission, Role, UserCreate
from admin_panel.services.auth import AuthService

from conftest import ADMIN_ID, GUEST_ID, as_user


@pytest.fixture
def auth(store):
    return AuthService(store)


def test_login_is_case_insensitive(auth, make_user):
    joao = make_user(Role.ADMINISTRADOR, "João", "Silva", "joao@example.com")

    upper = auth.login("JOAO@EXAMPLE.COM")
    lower = auth.login("joao@example.com")
    assert upper == lower
    assert upper.user.id == joao.id
    assert upper.profile.role is Role.ADMINISTRADOR
    assert upper.permissions == frozenset(Permission)


def test_login_rejects_inactive_and_unknown(auth, make_user):
    make_user(email="gone@example.com", active=False)

    with pytest.raises(UnauthorizedError):
        auth.login("gone@example.com")
    with pytest.raises(UnauthorizedError):
        auth.login("nobody@example.com")


def test_login_rejects_dangling_profile(store, auth):
    profile = store.create_profile("Temp")
    user = store.create_user(UserCreate(first_name="A", last_name="B", email="a@example.com", profile_id=profile.id))
    store.delete_profile(profile.id)

    with pytest.raises(UnauthorizedError):
        auth.login(user.email)


def test_resolve_actor(auth, make_user):
    guest = make_user()
    session = auth.resolve_actor(guest.id)
    assert session.permissions == {Permission.VIEW_USERS}
    assert session.has_permission(Permission.VIEW_USERS)
    assert not session.has_permission(Permission.EDIT_USERS)

    with pytest.raises(UnauthorizedError):
        auth.resolve_actor("user-404")


def test_login_and_me_flow(client):
    resp = client.post("/api/v1/auth/login", json={"email": "Joao.Silva@Example.com"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["user"]["id"] == ADMIN_ID
    assert body["profile"] == {"id": "profile-1", "name": "Administrador"}
    assert "MANAGE_PROFILES" in body["permissions"]

    me = client.get("/api/v1/auth/me", headers=as_user(body["user"]["id"]))
    assert me.status_code == 200, me.text
    assert me.json()["user"]["email"] == "joao.silva@example.com"


def test_login_failures_are_401(client):
    unknown = client.post("/api/v1/auth/login", json={"email": "ghost@example.com"})
    assert unknown.status_code == 401

    client.put(f"/api/v1/users/{GUEST_ID}/deactivate", headers=as_user(ADMIN_ID))
    inactive = client.post("/api/v1/auth/login", json={"email": "pedro.oliveira@example.com"})
    assert inactive.status_code == 401


def test_requests_without_actor_are_401(client):
    assert client.get("/api/v1/users").status_code == 401
    assert client.get("/api/v1/users", headers=as_user("user-99")).status_code == 401
    assert client.get("/api/v1/profiles").status_code == 401

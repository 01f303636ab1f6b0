import threading

import pytest

from admin_panel.core.errors import (
    BusinessRuleError,
    ConflictError,
    InvalidReferenceError,
    InvariantViolationError,
    NotFoundError,
)
from admin_panel.models.entities import Role, UserCreate, UserUpdate
from admin_panel.services.users import UserService

from conftest import ADMIN_ID, EDITOR_ID, GUEST_ID, as_user


def test_create_defaults_to_active(make_user):
    user = make_user(first_name="Ana", last_name="Lima", email="ana@example.com")
    assert user.id == "user-1"
    assert user.is_active


def test_create_with_unknown_profile_is_invalid_reference(users, profiles):
    with pytest.raises(InvalidReferenceError):
        users.create(UserCreate(first_name="A", last_name="B", email="a@example.com", profile_id="profile-99"))


def test_create_with_duplicate_email_is_conflict(users, make_user, profiles):
    make_user(email="joao@example.com")
    with pytest.raises(ConflictError):
        users.create(
            UserCreate(first_name="J", last_name="S", email="JOAO@example.com", profile_id=profiles[Role.EDITOR].id)
        )


def test_update_validates_changed_fields(users, make_user):
    first = make_user(email="first@example.com")
    second = make_user(email="second@example.com")

    with pytest.raises(NotFoundError):
        users.update("user-404", UserUpdate(first_name="X"))
    with pytest.raises(InvalidReferenceError):
        users.update(second.id, UserUpdate(profile_id="profile-404"))
    with pytest.raises(ConflictError):
        users.update(second.id, UserUpdate(email="FIRST@example.com"))

    # Keeping one's own email is not a conflict.
    same = users.update(first.id, UserUpdate(email="first@example.com", last_name="Changed"))
    assert same.last_name == "Changed"
    assert same.first_name == "Test"


def test_last_admin_cannot_be_deactivated_deleted_or_reassigned(users, make_user, profiles):
    admin = make_user(role=Role.ADMINISTRADOR)

    with pytest.raises(InvariantViolationError):
        users.deactivate(admin.id)
    with pytest.raises(InvariantViolationError):
        users.delete(admin.id)
    with pytest.raises(InvariantViolationError):
        users.update(admin.id, UserUpdate(profile_id=profiles[Role.EDITOR].id))

    still = users.get(admin.id)
    assert still.is_active
    assert still.profile_id == profiles[Role.ADMINISTRADOR].id


def test_inactive_admin_does_not_count(users, make_user, profiles):
    admin = make_user(role=Role.ADMINISTRADOR)
    other = make_user(role=Role.ADMINISTRADOR)
    users.deactivate(other.id)

    with pytest.raises(InvariantViolationError):
        users.deactivate(admin.id)


def test_admin_changes_allowed_with_second_active_admin(users, make_user, profiles):
    admin = make_user(role=Role.ADMINISTRADOR)
    make_user(role=Role.ADMINISTRADOR)

    moved = users.update(admin.id, UserUpdate(profile_id=profiles[Role.EDITOR].id))
    assert moved.profile_id == profiles[Role.EDITOR].id


def test_admin_can_be_deleted_with_second_active_admin(users, store, make_user):
    admin = make_user(role=Role.ADMINISTRADOR)
    other = make_user(role=Role.ADMINISTRADOR)

    users.delete(admin.id)
    assert store.find_user_by_id(admin.id) is None
    with pytest.raises(NotFoundError):
        users.get(admin.id)
    assert users.get(other.id).is_active

    with pytest.raises(InvariantViolationError):
        users.delete(other.id)


def test_admin_edits_that_keep_the_role_are_allowed(users, make_user, profiles):
    admin = make_user(role=Role.ADMINISTRADOR)
    updated = users.update(admin.id, UserUpdate(first_name="Root", profile_id=profiles[Role.ADMINISTRADOR].id))
    assert updated.first_name == "Root"
    assert users.activate(admin.id).is_active


def test_delete_rejects_inactive_user(users, make_user):
    user = make_user(active=False)
    with pytest.raises(BusinessRuleError):
        users.delete(user.id)
    assert users.get(user.id).is_active is False


def test_delete_inactive_user_allowed_when_policy_disabled(store, make_user):
    user = make_user(active=False)
    lenient = UserService(store, reject_inactive_delete=False)
    lenient.delete(user.id)
    assert store.find_user_by_id(user.id) is None


def test_delete_unknown_user(users):
    with pytest.raises(NotFoundError):
        users.delete("user-404")


def test_admin_invariant_end_to_end(users, profiles):
    admin_profile = profiles[Role.ADMINISTRADOR].id
    joao = users.create(
        UserCreate(first_name="João", last_name="Silva", email="joao@example.com", profile_id=admin_profile)
    )
    with pytest.raises(InvariantViolationError):
        users.deactivate(joao.id)

    maria = users.create(
        UserCreate(first_name="Maria", last_name="Santos", email="maria@example.com", profile_id=admin_profile)
    )
    assert users.deactivate(joao.id).is_active is False
    assert users.get(maria.id).is_active

    with pytest.raises(InvariantViolationError):
        users.deactivate(maria.id)


def test_concurrent_deactivations_keep_one_admin(users, make_user):
    admins = [make_user(role=Role.ADMINISTRADOR) for _ in range(2)]
    barrier = threading.Barrier(len(admins))
    outcomes = []

    def deactivate(user_id):
        barrier.wait()
        try:
            users.deactivate(user_id)
            outcomes.append("ok")
        except InvariantViolationError:
            outcomes.append("rejected")

    threads = [threading.Thread(target=deactivate, args=(admin.id,)) for admin in admins]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["ok", "rejected"]
    assert sum(users.get(admin.id).is_active for admin in admins) == 1


def test_api_user_crud(client):
    created = client.post(
        "/api/v1/users",
        json={"firstName": "Ana", "lastName": "Lima", "email": "ana@example.com", "profileId": "profile-3"},
        headers=as_user(EDITOR_ID),
    )
    assert created.status_code == 201, created.text
    body = created.json()
    assert body == {
        "id": "user-4",
        "firstName": "Ana",
        "lastName": "Lima",
        "email": "ana@example.com",
        "isActive": True,
        "profileId": "profile-3",
    }

    fetched = client.get("/api/v1/users/user-4", headers=as_user(GUEST_ID))
    assert fetched.status_code == 200
    assert fetched.json()["email"] == "ana@example.com"

    deleted = client.delete("/api/v1/users/user-4", headers=as_user(ADMIN_ID))
    assert deleted.status_code == 204
    assert client.get("/api/v1/users/user-4", headers=as_user(ADMIN_ID)).status_code == 404


def test_api_error_status_mapping(client):
    invalid_ref = client.post(
        "/api/v1/users",
        json={"firstName": "Ana", "lastName": "Lima", "email": "ana@example.com", "profileId": "profile-9"},
        headers=as_user(ADMIN_ID),
    )
    assert invalid_ref.status_code == 400

    duplicate = client.post(
        "/api/v1/users",
        json={"firstName": "J", "lastName": "S", "email": "joao.silva@example.com", "profileId": "profile-1"},
        headers=as_user(ADMIN_ID),
    )
    assert duplicate.status_code == 400
    assert "already in use" in duplicate.json()["detail"]

    last_admin = client.put(f"/api/v1/users/{ADMIN_ID}/deactivate", headers=as_user(ADMIN_ID))
    assert last_admin.status_code == 400

    missing = client.put("/api/v1/users/user-99/activate", headers=as_user(ADMIN_ID))
    assert missing.status_code == 404


def test_api_validation_errors_are_400(client):
    resp = client.post(
        "/api/v1/users",
        json={"firstName": "", "lastName": "Lima", "email": "not-an-email", "profileId": "profile-3"},
        headers=as_user(ADMIN_ID),
    )
    assert resp.status_code == 400
    assert "email" in resp.json()


def test_api_update_rejects_blank_names(client):
    blank = client.put(f"/api/v1/users/{GUEST_ID}", json={"firstName": "   "}, headers=as_user(ADMIN_ID))
    assert blank.status_code == 400
    assert "firstName" in blank.json()

    padded = client.put(f"/api/v1/users/{GUEST_ID}", json={"lastName": "  Costa "}, headers=as_user(ADMIN_ID))
    assert padded.status_code == 200
    assert padded.json()["lastName"] == "Costa"
    assert padded.json()["firstName"] == "Pedro"

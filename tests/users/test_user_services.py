from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from conftest import identity_of
from src.timesheet_portal.timesheet_portal.core.enums import Role
from src.timesheet_portal.timesheet_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateUsernameError,
    ValidationError,
)


def test_login_returns_token_for_identity(container, jsmith):
    result = container.auth_service.login("jsmith", "user123")

    assert result.identity.user_id == jsmith.user_id
    assert result.identity.role == Role.USER
    assert container.tokens.verify(result.token) == result.identity


def test_wrong_password_and_unknown_user_look_the_same(container, jsmith):
    with pytest.raises(AuthenticationError) as wrong_pw:
        container.auth_service.login("jsmith", "nope")
    with pytest.raises(AuthenticationError) as unknown:
        container.auth_service.login("ghost", "nope")

    assert str(wrong_pw.value) == str(unknown.value)
    assert wrong_pw.value.status_code == unknown.value.status_code == 401


def test_login_is_case_sensitive(container, jsmith):
    with pytest.raises(AuthenticationError):
        container.auth_service.login("JSmith", "user123")


def test_login_requires_both_fields(container):
    with pytest.raises(ValidationError):
        container.auth_service.login("jsmith", "")
    with pytest.raises(ValidationError):
        container.auth_service.login(None, "user123")


def test_login_with_placeholder_hash_fails_cleanly(container, users_repo):
    users_repo.create_user(username="legacy", password_hash="CHANGE_ME", role=Role.USER)
    with pytest.raises(AuthenticationError):
        container.auth_service.login("legacy", "anything")


def test_admin_registers_user_with_hashed_password(container, admin, users_repo):
    user = container.user_service.register(identity_of(admin), username="alice", password="pw1")

    assert user.role == Role.USER
    stored = users_repo.get_by_username("alice")
    assert stored.password_hash != "pw1"
    assert check_password_hash(stored.password_hash, "pw1")


def test_register_accepts_lowercase_role(container, admin):
    user = container.user_service.register(identity_of(admin), username="boss", password="pw", role="admin")
    assert user.role == Role.ADMIN


def test_register_rejects_unknown_role(container, admin):
    with pytest.raises(ValidationError):
        container.user_service.register(identity_of(admin), username="x", password="pw", role="OWNER")


def test_register_duplicate_username(container, admin, jsmith):
    with pytest.raises(DuplicateUsernameError):
        container.user_service.register(identity_of(admin), username="jsmith", password="pw")


def test_register_requires_admin(container, jsmith):
    with pytest.raises(AuthorizationError):
        container.user_service.register(identity_of(jsmith), username="eve", password="pw")


def test_list_users_in_id_order(container, admin, jsmith, mjohnson):
    users = container.user_service.list_users(identity_of(admin))
    assert [u.username for u in users] == ["admin", "jsmith", "mjohnson"]
    assert "password_hash" not in users[0].to_public()

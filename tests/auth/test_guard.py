from __future__ import annotations

from dataclasses import replace

import pytest

from src.storefront.storefront.auth.guard import AuthGuard, extract_token
from src.storefront.storefront.core.enums import Role
from src.storefront.storefront.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError

from tests.fakes import InMemoryUsers


@pytest.fixture
def guard(store, tokens):
    return AuthGuard(InMemoryUsers(store), tokens)


def test_authenticate_rereads_user_so_role_changes_apply(store, tokens, guard):
    ann = store.add_user()
    token = tokens.issue_access(ann)
    store.users[ann.user_id] = replace(ann, role=Role.ADMIN)

    user = guard.authenticate(token)

    assert user.role == Role.ADMIN


def test_authenticate_deleted_user_is_not_found(store, tokens, guard):
    ann = store.add_user()
    token = tokens.issue_access(ann)
    del store.users[ann.user_id]

    with pytest.raises(NotFoundError):
        guard.authenticate(token)


def test_authenticate_without_token_fails(guard):
    with pytest.raises(AuthenticationError):
        guard.authenticate(None)


def test_authorize_checks_role_membership(store, guard):
    ann = store.add_user()
    boss = store.add_user(name="Boss", email="boss@x.com", role=Role.ADMIN)

    assert guard.authorize(boss, {Role.ADMIN}) is boss
    assert guard.authorize(ann, {Role.USER, Role.ADMIN}) is ann
    with pytest.raises(AuthorizationError):
        guard.authorize(ann, {Role.ADMIN})


def test_authorize_without_user_is_unauthenticated(guard):
    with pytest.raises(AuthenticationError):
        guard.authorize(None, {Role.USER})


def test_refresh_issues_new_access_token(store, tokens, guard):
    ann = store.add_user()

    result = guard.refresh(tokens.issue_refresh(ann))

    assert result.user.user_id == ann.user_id
    assert tokens.decode_access(result.access_token).user_id == ann.user_id


def test_refresh_rejects_missing_or_access_token(store, tokens, guard):
    ann = store.add_user()

    with pytest.raises(AuthenticationError, match="not found"):
        guard.refresh(None)
    with pytest.raises(AuthenticationError, match="Invalid refresh token"):
        guard.refresh(tokens.issue_access(ann))


def test_extract_token_prefers_bearer_header():
    assert extract_token({"Authorization": "Bearer abc"}, {"token": "cookie"}) == "abc"
    assert extract_token({}, {"token": "cookie"}) == "cookie"
    assert extract_token({"Authorization": "Bearer "}, {}) is None
    assert extract_token({}, {}) is None

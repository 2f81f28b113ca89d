"""Tests for the in-memory user store."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from user_service.api.models import UserCredentials
from user_service.api.store import InMemoryUserStore
from user_service.exceptions import InvalidCredentialsError, UserAlreadyExistsError


def _creds(username="alice", password="s3cret"):
    return UserCredentials(username=username, password=password)


def test_create_and_authenticate():
    store = InMemoryUserStore()
    store.create(_creds())

    assert store.authenticate(_creds()).username == "alice"


def test_duplicate_username_raises():
    store = InMemoryUserStore()
    store.create(_creds())

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        store.create(_creds(password="different"))

    assert exc_info.value.details["username"] == "alice"


@pytest.mark.parametrize("username,password", [("alice", "wrong"), ("nobody", "s3cret")])
def test_bad_credentials_raise(username, password):
    store = InMemoryUserStore()
    store.create(_creds())

    with pytest.raises(InvalidCredentialsError):
        store.authenticate(_creds(username, password))


def test_concurrent_registration_keeps_usernames_unique():
    store = InMemoryUserStore()

    def register(_):
        try:
            store.create(_creds())
            return True
        except UserAlreadyExistsError:
            return False

    with ThreadPoolExecutor(max_workers=20) as pool:
        results = list(pool.map(register, range(50)))

    assert results.count(True) == 1
    assert [user.username for user in store.list_users()] == ["alice"]


def test_error_serializes_code_message_and_details():
    error = UserAlreadyExistsError(username="alice")

    assert error.to_dict() == {
        "error_code": "USER_ALREADY_EXISTS",
        "message": "User already exists",
        "details": {"username": "alice"},
    }
    assert str(error) == "USER_ALREADY_EXISTS: User already exists"

"""Tests for the YAML user store."""

import os

import pytest
import yaml

from chatrelay.config import get_settings
from chatrelay.models.user import (
    UserAlreadyExistsError,
    create_user,
    get_all_users,
    get_user_by_email,
    get_user_by_username,
    user_exists,
)
from chatrelay.utils.auth import hash_password, verify_password


def test_create_and_find_user():
    user = create_user("alice", "alice@example.com", hash_password("secret"))

    assert user.display_name == "alice"
    found = get_user_by_username("alice")
    assert found == user
    assert get_user_by_email("ALICE@example.com") == user
    assert user_exists("alice")
    assert not user_exists("bob")
    assert verify_password("secret", found.hashed_password)
    assert not verify_password("wrong", found.hashed_password)


def test_users_are_persisted_to_yaml():
    create_user("alice", "alice@example.com", hash_password("secret"), "Alice")

    user_file = get_settings().user_file
    assert os.path.exists(user_file)
    with open(user_file, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    assert data["alice"]["display_name"] == "Alice"
    assert data["alice"]["hashed_password"] != "secret"


def test_duplicate_username_and_email_rejected():
    create_user("alice", "alice@example.com", hash_password("secret"))

    with pytest.raises(UserAlreadyExistsError) as exc:
        create_user("alice", "new@example.com", hash_password("secret"))
    assert exc.value.field == "username"

    with pytest.raises(UserAlreadyExistsError) as exc:
        create_user("alicia", "Alice@Example.com", hash_password("secret"))
    assert exc.value.field == "email"

    assert [u.username for u in get_all_users()] == ["alice"]


def test_empty_store():
    assert get_all_users() == []
    assert get_user_by_username("anyone") is None
    assert get_user_by_email("anyone@example.com") is None

"""Tests for academy/user/repository.py."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from academy.core.exceptions import StoreError
from academy.user.exceptions import UserConflictError, UserNotFoundError
from academy.user.models import User, UserRole


def test_create_generates_id_and_defaults_role(repository):
    user = repository.create(email="new@example.com", name="New Student")

    assert user.id
    assert user.role == UserRole.MEMBER
    assert user.created_at is not None
    assert repository.find_by_id(user.id) is user


def test_create_duplicate_email_raises_conflict(repository, make_user):
    make_user(id="u1", email="dup@example.com")

    with pytest.raises(UserConflictError):
        repository.create(id="u2", email="dup@example.com")

    assert repository.find_by_id("u2") is None


def test_create_wraps_other_database_errors(repository, session):
    with (
        patch.object(
            session, "commit", side_effect=OperationalError("INSERT", {}, Exception())
        ),
        pytest.raises(StoreError),
    ):
        repository.create(id="u1", email="x@example.com")


def test_find_by_email(repository, make_user):
    make_user(id="u1", email="a@example.com")

    assert repository.find_by_email("a@example.com").id == "u1"
    assert repository.find_by_email("b@example.com") is None


def test_find_by_email_ignores_case(repository, make_user):
    make_user(id="u1", email="Ada@Example.com")

    assert repository.find_by_email("ada@example.com").id == "u1"
    assert repository.find_by_email("ADA@EXAMPLE.COM").id == "u1"


def test_create_stores_email_lowercased(repository):
    user = repository.create(id="u1", email="Ada@Example.com")

    assert user.email == "ada@example.com"


def test_find_many_ignores_unknown_ids(repository, make_user):
    make_user(id="u1")
    make_user(id="u2")

    found = repository.find_many(["u1", "u2", "missing"])

    assert {u.id for u in found} == {"u1", "u2"}
    assert repository.find_many([]) == []


def test_list_student_names_dedupes_and_sorts(repository, make_user):
    make_user(id="u1", name="Zoe Parent", student_name="Zoe")
    make_user(id="u2", name="Adam", student_name=None)
    make_user(id="u3", name="Zoe", student_name="Zoe")
    make_user(id="u4", name=None, student_name=None)

    assert repository.list_student_names() == ["Adam", "Zoe", "Zoe Parent"]


def test_update_id_keeps_other_columns(repository, make_user, session):
    make_user(
        id="old1",
        email="a@example.com",
        name="Ada",
        student_name="Little Ada",
        role=UserRole.COACH,
    )

    user = repository.update_id("old1", "new1")

    assert user.id == "new1"
    assert user.email == "a@example.com"
    assert user.student_name == "Little Ada"
    assert user.role == UserRole.COACH
    assert session.get(User, "old1") is None


def test_update_id_to_taken_id_raises_conflict(repository, make_user, session):
    make_user(id="old1", email="a@example.com")
    make_user(id="taken", email="b@example.com")
    session.expunge_all()

    with pytest.raises(UserConflictError):
        repository.update_id("old1", "taken")

    assert repository.find_by_id("old1").email == "a@example.com"
    assert repository.find_by_id("taken").email == "b@example.com"


def test_update_id_unknown_user(repository):
    with pytest.raises(UserNotFoundError):
        repository.update_id("missing", "new1")


def test_update_role(repository, make_user):
    make_user(id="u1")

    user = repository.update_role("u1", UserRole.ADMIN)

    assert user.role == UserRole.ADMIN
    assert user.is_admin
    assert user.is_staff


def test_update_role_with_profile_fields(repository, make_user):
    make_user(id="u1", name="Before", student_name="Kid")

    user = repository.update_role(
        "u1", UserRole.COACH, name="After", student_name=None
    )

    assert user.role == UserRole.COACH
    assert user.name == "After"
    assert user.student_name is None


def test_update_role_failed_commit_leaves_row_unchanged(
    repository, make_user, session
):
    make_user(id="u1", name="Before")

    with (
        patch.object(
            session, "commit", side_effect=OperationalError("UPDATE", {}, Exception())
        ),
        pytest.raises(StoreError),
    ):
        repository.update_role("u1", UserRole.ADMIN, name="After")

    user = repository.find_by_id("u1")
    assert user.name == "Before"
    assert user.role == UserRole.MEMBER


def test_update_role_unknown_user(repository):
    with pytest.raises(UserNotFoundError):
        repository.update_role("missing", UserRole.ADMIN)


def test_update_profile_sets_given_fields(repository, make_user):
    user = make_user(id="u1", name="Before", student_name="Kid")

    updated = repository.update_profile(user, name="After", student_name=None)

    assert updated.name == "After"
    assert updated.student_name is None

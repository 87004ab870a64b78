"""
Tests for user_service: hashing, uniqueness, avatars and deletion.
"""

import io
import os

import pytest
from werkzeug.datastructures import FileStorage

from helpdesk import uploads
from helpdesk.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from helpdesk.models.user import User
from helpdesk.schemas.user import CreateUserRequest, UpdateUserRequest
from helpdesk.services import user_service


def _create_request(division_id, **overrides):
    fields = {
        "name": "Jane Staff",
        "email": "Jane@Example.com",
        "password": "secret123",
        "phone": "555-0100",
        "role": "STAFF",
        "division_id": division_id,
    }
    fields.update(overrides)
    return CreateUserRequest(**fields)


class TestPasswords:
    def test_hash_and_verify(self, app):
        hashed = user_service.hash_password("secret123")
        assert hashed != "secret123"
        assert user_service.verify_password(hashed, "secret123")
        assert not user_service.verify_password(hashed, "wrong-password")

    def test_malformed_hash_fails_verification(self, app):
        assert not user_service.verify_password("not-a-bcrypt-hash", "secret123")


class TestCreateUser:
    def test_creates_user_without_exposing_password(self, db, make_division):
        division = make_division("Finance")
        result = user_service.create(_create_request(division.id))

        assert result["email"] == "jane@example.com"
        assert result["divisionName"] == "Finance"
        assert "password" not in result

        stored = db.session.get(User, result["id"])
        assert user_service.verify_password(stored.password, "secret123")

    def test_duplicate_email_ignores_case(self, make_division, make_user):
        division = make_division()
        make_user(email="jane@example.com", division=division)
        with pytest.raises(AlreadyExistsError) as exc_info:
            user_service.create(_create_request(division.id, email="JANE@example.com"))
        assert exc_info.value.message == "User with this email already exists"

    def test_inactive_division(self, make_division):
        division = make_division(is_active=False)
        with pytest.raises(ValidationError) as exc_info:
            user_service.create(_create_request(division.id))
        assert exc_info.value.details == {"divisionId": "Division is not active"}

    def test_missing_division(self, app):
        with pytest.raises(NotFoundError, match="Division not found"):
            user_service.create(_create_request(77))

    def test_validation_reports_each_field(self, make_division):
        request = _create_request(
            make_division().id, email="nope", password="123", role="ROOT"
        )
        with pytest.raises(ValidationError) as exc_info:
            user_service.create(request)
        assert set(exc_info.value.details) == {"email", "password", "role"}

    def test_password_over_bcrypt_limit(self, make_division):
        with pytest.raises(ValidationError) as exc_info:
            user_service.create(_create_request(make_division().id, password="p" * 73))
        assert "password" in exc_info.value.details


class TestUpdateUser:
    def test_update_keeps_active_flag_when_omitted(self, make_user):
        user = make_user(is_active=False)
        result = user_service.update(
            user.id,
            UpdateUserRequest(
                name="Jane Updated", role="IT", division_id=user.division_id
            ),
        )
        assert result["name"] == "Jane Updated"
        assert result["role"] == "IT"
        assert result["isActive"] is False

    def test_blank_phone_is_cleared(self, make_user):
        user = make_user()
        result = user_service.update(
            user.id,
            UpdateUserRequest(
                name="Jane", phone="   ", role="STAFF", division_id=user.division_id
            ),
        )
        assert result["phone"] is None


class TestAvatar:
    def test_replacing_avatar_removes_old_file(self, make_user, upload_root):
        user = make_user()
        first = uploads.save_avatar_image(
            FileStorage(io.BytesIO(b"one"), filename="a.png")
        )
        user_service.update_avatar(user.id, first)

        second = uploads.save_avatar_image(
            FileStorage(io.BytesIO(b"two"), filename="b.webp")
        )
        result = user_service.update_avatar(user.id, second)

        assert result["avatarUrl"] == f"http://testserver{second}"
        assert not os.path.exists(uploads.resolve_path(first))
        assert os.path.exists(uploads.resolve_path(second))

    def test_missing_user(self, app):
        with pytest.raises(NotFoundError):
            user_service.update_avatar(123, "/uploads/image/avatar/x.png")


class TestDeleteUser:
    def test_delete_removes_avatar(self, db, make_user):
        url = uploads.save_avatar_image(
            FileStorage(io.BytesIO(b"img"), filename="me.jpg")
        )
        user = make_user(avatar_url=url)
        user_service.delete(user.id)
        assert db.session.get(User, user.id) is None
        assert not os.path.exists(uploads.resolve_path(url))

    def test_refused_while_referenced(self, make_user, make_ticket):
        user = make_user()
        make_ticket(created_by=user)
        with pytest.raises(ConflictError):
            user_service.delete(user.id)


class TestValidateForAssignment:
    def test_inactive_user_reports_field(self, make_user):
        user = make_user(is_active=False)
        with pytest.raises(ValidationError) as exc_info:
            user_service.validate_for_assignment(user.id, "assignedTo")
        assert exc_info.value.details == {"assignedTo": "User is not active"}

"""
Unit Tests for Form and Auth Schemas
Tests for: defaults, field validation, camelCase aliases
"""
import pytest
from pydantic import ValidationError

from formflow.schemas.auth import SignupRequest
from formflow.schemas.private_user import PrivateLoginRequest
from formflow.schemas.form import FormCreate, FormUpdate, FormField
from formflow.schemas.user import User, UserResponse


class TestFormCreate:
    """Test form creation payloads"""

    def test_defaults(self):
        form = FormCreate(title="Survey", fields=[])

        assert form.status == "Active"
        assert form.visibility == "public"
        assert form.output_formats == ["thank_you"]
        assert form.confirmation_style == "table"
        assert form.allow_editing is True

    def test_accepts_camel_case(self):
        form = FormCreate.model_validate({
            "title": "Survey",
            "fields": [],
            "outputFormats": ["whatsapp", "pdf"],
            "allowEditing": False,
        })

        assert form.output_formats == ["whatsapp", "pdf"]
        assert form.allow_editing is False

    def test_duplicate_field_ids(self):
        with pytest.raises(ValidationError):
            FormCreate(title="Survey", fields=[
                {"id": "a", "type": "text", "label": "One"},
                {"id": "a", "type": "text", "label": "Two"},
            ])

    def test_unknown_output_format(self):
        with pytest.raises(ValidationError):
            FormCreate(title="Survey", fields=[], output_formats=["fax"])

    def test_title_length(self):
        with pytest.raises(ValidationError):
            FormCreate(title="x" * 501, fields=[])

    def test_update_tracks_only_sent_fields(self):
        update = FormUpdate.model_validate({"visibility": "private"})

        assert update.model_dump(exclude_unset=True) == {"visibility": "private"}


class TestFormField:

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            FormField(id="", type="text", label="Name")

    def test_all_field_types(self):
        for field_type in ("text", "number", "email", "textarea", "checkbox", "select", "radio", "date"):
            assert FormField(id="f", type=field_type, label="L").type == field_type


class TestUserSchemas:

    def test_sanitized_user_drops_secrets(self):
        user = User(id="u1", email="a@example.com", password_hash="hash", reset_otp="123456")

        dumped = UserResponse.model_validate(user.model_dump()).model_dump(by_alias=True)

        assert "passwordHash" not in dumped
        assert "resetOtp" not in dumped
        assert dumped["emailVerified"] is False

    def test_signup_requires_valid_email(self):
        with pytest.raises(ValidationError):
            SignupRequest(email="nope", password="secret123")

    def test_private_login_uses_user_id_alias(self):
        request = PrivateLoginRequest.model_validate({"userId": "front-desk", "password": "x"})

        assert request.user_id == "front-desk"

"""
Unit Tests for Output Service
Tests for: value formatting, WhatsApp templates, share links
"""
import pytest
from urllib.parse import unquote

from formflow.core.exceptions import ValidationError
from formflow.schemas.form import Form
from formflow.schemas.response import FormResponse
from formflow.services.output_service import (
    format_value,
    render_whatsapp_message,
    build_whatsapp_link,
    build_whatsapp_share,
    public_form_url,
)


def build_form(**overrides) -> Form:
    data = {
        "id": "form-1",
        "user_id": "user-1",
        "title": "Workshop Signup",
        "output_formats": ["thank_you", "whatsapp"],
    }
    data.update(overrides)
    return Form(**data)


class TestFormatValue:
    """Test rendering of response values"""

    def test_booleans(self):
        assert format_value(True) == "Yes"
        assert format_value(False) == "No"

    def test_none_is_empty(self):
        assert format_value(None) == ""

    def test_lists_joined(self):
        assert format_value(["a", "b", True]) == "a, b, Yes"

    def test_numbers(self):
        assert format_value(42) == "42"


class TestWhatsappMessage:
    """Test message rendering"""

    def test_template_placeholders(self):
        form = build_form(whatsapp_format="Name: {{Name}}\nSeats: {{ Seats }}\nVeg: {{Veg}}")

        message = render_whatsapp_message(form, {"Name": "Anil", "Seats": 2, "Veg": False})

        assert message == "Name: Anil\nSeats: 2\nVeg: No"

    def test_unknown_placeholder_renders_empty(self):
        form = build_form(whatsapp_format="Hi {{Nickname}}!")

        assert render_whatsapp_message(form, {"Name": "Anil"}) == "Hi !"

    def test_default_message(self):
        form = build_form(whatsapp_format=None)

        message = render_whatsapp_message(form, {"name": "Anil", "id": "r1", "submittedAt": "x", "agree": True})

        assert message == (
            'I just filled out the "Workshop Signup" form:\n\n'
            "Name: Anil\n"
            "Agree: Yes\n\n"
            f"You can fill it too: {public_form_url('form-1')}"
        )


class TestWhatsappLink:
    """Test wa.me links"""

    def test_phone_digits_only(self):
        link = build_whatsapp_link("hi", "+1 (555) 010-9999")

        assert link == "https://wa.me/15550109999?text=hi"

    def test_message_is_fully_encoded(self):
        message = "a&b=c / d\nnext"

        link = build_whatsapp_link(message)

        encoded = link.split("text=", 1)[1]
        assert "&" not in encoded and "/" not in encoded and "\n" not in encoded
        assert unquote(encoded) == message

    def test_share_requires_whatsapp_output(self):
        form = build_form(output_formats=["thank_you"])
        response = FormResponse(id="r1", form_id="form-1", data={})

        with pytest.raises(ValidationError):
            build_whatsapp_share(form, response)

    def test_share(self):
        form = build_form(whatsapp_format="{{Name}}")
        response = FormResponse(id="r1", form_id="form-1", data={"Name": "Anil"})

        share = build_whatsapp_share(form, response, phone="919000000000")

        assert share.message == "Anil"
        assert share.link == "https://wa.me/919000000000?text=Anil"

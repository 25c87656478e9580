"""
Output Service - text outputs built from a submitted response

Only the WhatsApp share message lives here; spreadsheet, Word and PDF exports are
rendered by the web client.
"""

import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from formflow.core.config import settings
from formflow.core.exceptions import ValidationError
from formflow.schemas.common import OutputFormat
from formflow.schemas.form import Form
from formflow.schemas.response import FormResponse, WhatsappShare

PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")
HIDDEN_KEYS = {"id", "submittedAt"}


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(format_value(v) for v in value)
    return str(value)


def public_form_url(form_id: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/s/{form_id}"


def render_whatsapp_message(form: Form, data: Dict[str, Any]) -> str:
    """
    Fill the form's WhatsApp template, or fall back to a summary message.

    Template placeholders are {{Label}}; labels with no value render empty.
    """
    if form.whatsapp_format:
        return PLACEHOLDER.sub(lambda m: format_value(data.get(m.group(1))), form.whatsapp_format)

    summary = "\n".join(
        f"{key[:1].upper()}{key[1:]}: {format_value(value)}"
        for key, value in data.items()
        if key not in HIDDEN_KEYS
    )
    return (
        f'I just filled out the "{form.title}" form:\n\n'
        f"{summary}\n\n"
        f"You can fill it too: {public_form_url(form.id)}"
    )


def build_whatsapp_link(message: str, phone: Optional[str] = None) -> str:
    """wa.me deep link; without a phone number WhatsApp asks for the recipient"""
    digits = re.sub(r"\D", "", phone or "")
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def build_whatsapp_share(form: Form, response: FormResponse, phone: Optional[str] = None) -> WhatsappShare:
    if OutputFormat.WHATSAPP.value not in form.output_formats:
        raise ValidationError("WhatsApp output is not enabled for this form", field="outputFormats")

    message = render_whatsapp_message(form, response.data)
    return WhatsappShare(message=message, link=build_whatsapp_link(message, phone))

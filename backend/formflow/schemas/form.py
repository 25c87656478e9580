from pydantic import Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from formflow.schemas.common import (
    CamelModel,
    FieldType,
    FormStatus,
    Visibility,
    OutputFormat,
    ConfirmationStyle,
)


class FormField(CamelModel):
    id: str = Field(..., min_length=1)
    type: FieldType
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None


def check_unique_field_ids(fields: Optional[List[FormField]]) -> Optional[List[FormField]]:
    if fields is None:
        return fields
    seen = set()
    for field in fields:
        if field.id in seen:
            raise ValueError(f"Duplicate field id: {field.id}")
        seen.add(field.id)
    return fields


class Form(CamelModel):
    """Stored form record"""
    id: str
    user_id: str
    title: str
    status: FormStatus = FormStatus.ACTIVE
    visibility: Visibility = Visibility.PUBLIC
    fields: List[FormField] = Field(default_factory=list)
    output_formats: List[OutputFormat] = Field(default_factory=lambda: [OutputFormat.THANK_YOU])
    confirmation_style: ConfirmationStyle = ConfirmationStyle.TABLE
    confirmation_text: Optional[str] = None
    table_config: Optional[Dict[str, Any]] = None
    grid_config: Optional[Dict[str, Any]] = None
    whatsapp_format: Optional[str] = None
    allow_editing: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class FormCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    fields: List[FormField]
    status: FormStatus = FormStatus.ACTIVE
    visibility: Visibility = Visibility.PUBLIC
    output_formats: List[OutputFormat] = Field(default_factory=lambda: [OutputFormat.THANK_YOU])
    confirmation_style: ConfirmationStyle = ConfirmationStyle.TABLE
    confirmation_text: Optional[str] = None
    table_config: Optional[Dict[str, Any]] = None
    grid_config: Optional[Dict[str, Any]] = None
    whatsapp_format: Optional[str] = None
    allow_editing: bool = True

    @field_validator("fields")
    @classmethod
    def validate_field_ids(cls, v):
        return check_unique_field_ids(v)


class FormUpdate(CamelModel):
    """Partial update; only fields present in the request body change"""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    fields: Optional[List[FormField]] = None
    status: Optional[FormStatus] = None
    visibility: Optional[Visibility] = None
    output_formats: Optional[List[OutputFormat]] = None
    confirmation_style: Optional[ConfirmationStyle] = None
    confirmation_text: Optional[str] = None
    table_config: Optional[Dict[str, Any]] = None
    grid_config: Optional[Dict[str, Any]] = None
    whatsapp_format: Optional[str] = None
    allow_editing: Optional[bool] = None

    @field_validator("fields")
    @classmethod
    def validate_field_ids(cls, v):
        return check_unique_field_ids(v)


class FormStats(CamelModel):
    response_count: int

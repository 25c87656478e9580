from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import enum


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire and in the document store"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
        validate_default=True,
    )


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class FormStatus(str, enum.Enum):
    ACTIVE = "Active"
    DRAFT = "Draft"
    ARCHIVED = "Archived"


class Visibility(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class FieldType(str, enum.Enum):
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    SELECT = "select"
    RADIO = "radio"
    DATE = "date"


class OutputFormat(str, enum.Enum):
    THANK_YOU = "thank_you"
    WHATSAPP = "whatsapp"
    EXCEL = "excel"
    DOCX = "docx"
    PDF = "pdf"


class ConfirmationStyle(str, enum.Enum):
    TABLE = "table"
    PARAGRAPH = "paragraph"


class MessageResponse(CamelModel):
    message: str

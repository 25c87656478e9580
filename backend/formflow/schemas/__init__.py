# Pydantic schemas
from formflow.schemas.common import (
    CamelModel,
    UserStatus,
    FormStatus,
    Visibility,
    FieldType,
    OutputFormat,
    ConfirmationStyle,
    MessageResponse,
)
from formflow.schemas.user import (
    User,
    UserResponse,
    LoginResponse,
    ProfileUpdate,
    UserMetrics,
    TotalResponses,
)
from formflow.schemas.form import Form, FormField, FormCreate, FormUpdate, FormStats
from formflow.schemas.response import FormResponse, ResponseCreate, ResponseUpdate, WhatsappShare
from formflow.schemas.private_user import (
    PrivateUser,
    PrivateUserCreate,
    PrivateUserAccessUpdate,
    PrivateUserResponse,
    PrivateLoginRequest,
    PrivateLoginResponse,
)

__all__ = [
    "CamelModel",
    "UserStatus",
    "FormStatus",
    "Visibility",
    "FieldType",
    "OutputFormat",
    "ConfirmationStyle",
    "MessageResponse",
    "User",
    "UserResponse",
    "LoginResponse",
    "ProfileUpdate",
    "UserMetrics",
    "TotalResponses",
    "Form",
    "FormField",
    "FormCreate",
    "FormUpdate",
    "FormStats",
    "FormResponse",
    "ResponseCreate",
    "ResponseUpdate",
    "WhatsappShare",
    "PrivateUser",
    "PrivateUserCreate",
    "PrivateUserAccessUpdate",
    "PrivateUserResponse",
    "PrivateLoginRequest",
    "PrivateLoginResponse",
]

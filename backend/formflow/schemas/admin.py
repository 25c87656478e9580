from pydantic import Field
from typing import Optional

from formflow.schemas.common import CamelModel, UserStatus
from formflow.schemas.user import UserResponse


class AdminLoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminLoginResponse(CamelModel):
    session_token: str


class AdminUserSummary(UserResponse):
    forms_count: int
    storage_used_kb: float


class AdminUserUpdate(CamelModel):
    status: Optional[UserStatus] = None
    form_limit: Optional[int] = Field(None, ge=0)
    storage_limit: Optional[int] = Field(None, ge=0)


class PlatformStats(CamelModel):
    total_users: int
    total_forms: int
    total_responses: int

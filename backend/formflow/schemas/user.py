from pydantic import Field
from typing import Optional
from datetime import datetime

from formflow.schemas.common import CamelModel, UserStatus


class User(CamelModel):
    """Stored user record, credentials and one-time secrets included"""
    id: str
    email: str
    password_hash: str

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    photo: Optional[str] = None

    status: UserStatus = UserStatus.ACTIVE

    email_verified: bool = False
    verification_token: Optional[str] = None
    verification_token_expiry: Optional[datetime] = None

    reset_otp: Optional[str] = None
    reset_otp_expiry: Optional[datetime] = None
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[datetime] = None

    total_forms: int = 0
    total_responses: int = 0
    form_limit: int = 10
    storage_limit: int = 10240

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class UserResponse(CamelModel):
    """User as returned to clients: no password hash, tokens or OTP"""
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    photo: Optional[str] = None
    status: UserStatus
    email_verified: bool
    total_forms: int = 0
    total_responses: int = 0
    form_limit: int
    storage_limit: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class LoginResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    photo: Optional[str] = None


class UserMetrics(CamelModel):
    total_forms: int
    total_responses: int
    form_limit: int
    storage_limit: int
    storage_used_kb: float


class TotalResponses(CamelModel):
    total_responses: int

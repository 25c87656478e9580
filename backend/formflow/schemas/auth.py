from pydantic import EmailStr, Field
from typing import Optional

from formflow.schemas.common import CamelModel


class SignupRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class EmailRequest(CamelModel):
    email: EmailStr


class VerifyEmailRequest(CamelModel):
    token: str = Field(..., min_length=1)


class VerifyOtpRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1)


class ResetPasswordRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    reset_token: str = Field(..., min_length=1)
    new_password: str


class ForgotPasswordResponse(CamelModel):
    message: str
    user_id: str


class VerifyOtpResponse(CamelModel):
    message: str
    reset_token: str

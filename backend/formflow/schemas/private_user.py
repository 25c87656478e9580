from pydantic import EmailStr, Field
from typing import List
from datetime import datetime

from formflow.schemas.common import CamelModel


class PrivateUser(CamelModel):
    """Stored private-form credential"""
    id: str
    user_id: str
    name: str
    email: str
    password_hash: str
    accessible_forms: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class PrivateUserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)
    accessible_forms: List[str] = Field(default_factory=list)


class PrivateUserAccessUpdate(CamelModel):
    form_ids: List[str] = Field(default_factory=list)


class PrivateUserResponse(CamelModel):
    id: str
    user_id: str
    name: str
    email: str
    accessible_forms: List[str]
    created_at: datetime


class PrivateLoginRequest(CamelModel):
    # The web client sends the login name as "userId"
    user_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PrivateLoginResponse(CamelModel):
    id: str
    name: str
    email: str
    accessible_forms: List[str]
    session_token: str

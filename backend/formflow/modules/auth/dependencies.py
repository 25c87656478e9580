from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from formflow.core.config import settings
from formflow.core.exceptions import UnauthorizedError, ForbiddenError, FormNotFoundError
from formflow.core.logging_config import set_user_id
from formflow.core.security import (
    decode_token,
    ACCESS_TOKEN_TYPE,
    PRIVATE_SESSION_TYPE,
    ADMIN_SESSION_TYPE,
)
from formflow.schemas.common import Visibility
from formflow.schemas.form import Form
from formflow.schemas.private_user import PrivateUser
from formflow.schemas.user import User
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage

security = HTTPBearer(auto_error=False)


def resolve_user_id(
    credentials: Optional[HTTPAuthorizationCredentials],
    user_id_header: Optional[str],
) -> Optional[str]:
    """Bearer token first; the x-user-id header only when enabled"""
    if credentials:
        payload = decode_token(credentials.credentials, ACCESS_TOKEN_TYPE)
        return payload["sub"]
    if settings.ALLOW_USER_ID_HEADER and user_id_header:
        return user_id_header
    return None


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_user_id: Optional[str] = Header(None, alias="x-user-id"),
) -> str:
    """Identity of the calling form owner"""
    user_id = resolve_user_id(credentials, x_user_id)
    if not user_id:
        raise UnauthorizedError()
    set_user_id(user_id)
    return user_id


async def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_user_id: Optional[str] = Header(None, alias="x-user-id"),
) -> Optional[str]:
    """Identity if one was presented and is valid, otherwise None"""
    try:
        user_id = resolve_user_id(credentials, x_user_id)
    except UnauthorizedError:
        return None
    if user_id:
        set_user_id(user_id)
    return user_id


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage),
) -> User:
    """Get current authenticated user record"""
    user = await storage.get_user(user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user


# ==================== Private-user sessions ====================

async def get_optional_private_user(
    x_private_session: Optional[str] = Header(None, alias="x-private-session"),
    storage: BaseStorage = Depends(get_storage),
) -> Optional[PrivateUser]:
    """Private user behind the x-private-session token, if any"""
    if not x_private_session:
        return None
    try:
        payload = decode_token(x_private_session, PRIVATE_SESSION_TYPE)
    except UnauthorizedError:
        return None
    return await storage.get_private_user(payload["sub"])


async def get_current_private_user(
    private_user: Optional[PrivateUser] = Depends(get_optional_private_user),
) -> PrivateUser:
    if not private_user:
        raise UnauthorizedError("Private session required")
    return private_user


# ==================== Admin sessions ====================

async def get_current_admin(
    x_admin_session: Optional[str] = Header(None, alias="x-admin-session"),
) -> str:
    """Admin username from the x-admin-session token"""
    if not x_admin_session:
        raise UnauthorizedError("Admin session required")
    payload = decode_token(x_admin_session, ADMIN_SESSION_TYPE)
    return payload["sub"]


# ==================== Form access ====================

def ensure_form_owner(form: Form, user_id: str) -> None:
    if form.user_id != user_id:
        raise ForbiddenError("You do not have access to this form")


async def get_owned_form(storage: BaseStorage, form_id: str, user_id: str) -> Form:
    """
    Load a form the caller owns.

    Not-found is checked before ownership, so a missing form is 404 for everyone.
    """
    form = await storage.get_form(form_id)
    if not form:
        raise FormNotFoundError(form_id)
    ensure_form_owner(form, user_id)
    return form


def can_view_form(
    form: Form,
    user_id: Optional[str],
    private_user: Optional[PrivateUser],
) -> bool:
    """Public forms are open; private forms need the owner or a granted private user"""
    if form.visibility != Visibility.PRIVATE.value:
        return True
    if user_id and user_id == form.user_id:
        return True
    if private_user and private_user.user_id == form.user_id:
        return form.id in private_user.accessible_forms
    return False

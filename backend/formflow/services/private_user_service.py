"""
Private User Service

Form owners create named credentials that unlock their private forms for specific
respondents. A private user's access list may only name forms the owner owns.
"""

from typing import List, Tuple

from formflow.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    PrivateUserNotFoundError,
    ValidationError,
)
from formflow.core.logging_config import logger
from formflow.core.security import (
    verify_password,
    get_password_hash,
    create_private_session_token,
)
from formflow.schemas.private_user import PrivateUser, PrivateUserCreate
from formflow.storage.base import BaseStorage


class PrivateUserService:

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    async def _check_form_ids(self, owner_id: str, form_ids: List[str]) -> List[str]:
        owned = {form.id for form in await self.storage.get_forms_by_user_id(owner_id)}
        unknown = [form_id for form_id in form_ids if form_id not in owned]
        if unknown:
            raise ValidationError(
                f"Forms not owned by you: {', '.join(unknown)}",
                field="formIds",
            )
        # Keep order, drop repeats
        return list(dict.fromkeys(form_ids))

    async def get_owned(self, private_user_id: str, owner_id: str) -> PrivateUser:
        private_user = await self.storage.get_private_user(private_user_id)
        if not private_user:
            raise PrivateUserNotFoundError(private_user_id)
        if private_user.user_id != owner_id:
            raise ForbiddenError()
        return private_user

    async def create(self, owner_id: str, data: PrivateUserCreate) -> PrivateUser:
        if await self.storage.get_private_user_by_name(data.name):
            raise ConflictError("A private user with this name already exists")

        form_ids = await self._check_form_ids(owner_id, data.accessible_forms)
        private_user = await self.storage.create_private_user({
            "user_id": owner_id,
            "name": data.name,
            "email": data.email,
            "password_hash": get_password_hash(data.password),
            "accessible_forms": form_ids,
        })
        logger.info(f"Created private user {private_user.id} for owner {owner_id}")
        return private_user

    async def list_for_owner(self, owner_id: str) -> List[PrivateUser]:
        return await self.storage.get_private_users_by_user_id(owner_id)

    async def update_access(self, private_user_id: str, owner_id: str, form_ids: List[str]) -> PrivateUser:
        await self.get_owned(private_user_id, owner_id)
        form_ids = await self._check_form_ids(owner_id, form_ids)
        updated = await self.storage.update_private_user_access(private_user_id, form_ids)
        if not updated:
            raise PrivateUserNotFoundError(private_user_id)
        return updated

    async def delete(self, private_user_id: str, owner_id: str) -> None:
        await self.get_owned(private_user_id, owner_id)
        await self.storage.delete_private_user(private_user_id)

    async def login(self, name: str, password: str) -> Tuple[PrivateUser, str]:
        """Authenticate by login name; returns the private user and a session token"""
        private_user = await self.storage.get_private_user_by_name(name)
        if not private_user or not verify_password(password, private_user.password_hash):
            logger.log_auth_event("private_login", False, reason="invalid_credentials", login_name=name)
            raise InvalidCredentialsError()

        logger.log_auth_event("private_login", True, user_email=private_user.email)
        token = create_private_session_token(private_user.id, private_user.user_id)
        return private_user, token

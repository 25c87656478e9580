"""
Admin Service - platform administration

Admins sign in with the ADMIN_USERNAME / ADMIN_PASSWORD pair from settings and
receive a short-lived admin session token. They can list users with usage,
suspend or reactivate accounts, set per-user limits and view platform totals.
"""

from typing import List

from formflow.core.config import settings
from formflow.core.exceptions import UnauthorizedError, UserNotFoundError, ValidationError
from formflow.core.logging_config import logger
from formflow.core.security import constant_time_equals, create_admin_session_token
from formflow.modules.auth.usage_limits import get_storage_used_kb
from formflow.schemas.admin import AdminUserSummary, AdminUserUpdate, PlatformStats
from formflow.schemas.user import User, UserResponse
from formflow.storage.base import BaseStorage


class AdminService:

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def login(self, username: str, password: str) -> str:
        if not settings.ADMIN_PASSWORD:
            logger.log_auth_event("admin_login", False, reason="admin_password_not_configured")
            raise UnauthorizedError("Admin login is not configured")

        username_ok = constant_time_equals(username, settings.ADMIN_USERNAME)
        password_ok = constant_time_equals(password, settings.ADMIN_PASSWORD)
        if not (username_ok and password_ok):
            logger.log_auth_event("admin_login", False, reason="invalid_credentials")
            raise UnauthorizedError("Invalid admin credentials")

        logger.log_auth_event("admin_login", True, admin=username)
        return create_admin_session_token(username)

    async def _summarize(self, user: User) -> AdminUserSummary:
        forms = await self.storage.get_forms_by_user_id(user.id)
        sanitized = UserResponse.model_validate(user.model_dump())
        return AdminUserSummary(
            **sanitized.model_dump(),
            forms_count=len(forms),
            storage_used_kb=await get_storage_used_kb(user.id, self.storage),
        )

    async def list_users(self) -> List[AdminUserSummary]:
        return [await self._summarize(user) for user in await self.storage.get_all_users()]

    async def update_user_settings(self, user_id: str, data: AdminUserUpdate) -> User:
        if not await self.storage.get_user(user_id):
            raise UserNotFoundError(user_id)

        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationError("Nothing to update")

        user = await self.storage.update_user(user_id, updates)
        logger.info(
            f"Admin updated user {user_id}: {', '.join(sorted(updates))}",
            extra={"event_type": "admin_update", **updates},
        )
        return user

    async def platform_stats(self) -> PlatformStats:
        users = await self.storage.get_all_users()
        total_forms = 0
        total_responses = 0
        for user in users:
            forms = await self.storage.get_forms_by_user_id(user.id)
            total_forms += len(forms)
            total_responses += await self.storage.get_response_count_by_form_ids([f.id for f in forms])
        return PlatformStats(
            total_users=len(users),
            total_forms=total_forms,
            total_responses=total_responses,
        )

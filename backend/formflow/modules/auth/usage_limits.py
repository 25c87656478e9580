"""
Usage Limits Module
===================
Tracks a user's usage against the limits an administrator assigned and enforces
write access.

- Suspended accounts may read their forms and responses but not create or edit forms.
- form_limit caps how many forms a user may own; only creation is blocked.
- storage_limit is advisory: usage is reported next to it, never enforced.
"""

import json
from dataclasses import dataclass
from typing import Optional

from formflow.core.exceptions import AccountSuspendedError, FormLimitExceededError
from formflow.core.logging_config import logger
from formflow.schemas.common import UserStatus
from formflow.schemas.user import User, UserMetrics
from formflow.storage.base import BaseStorage


@dataclass
class UsageLimitCheck:
    """Result of a usage limit check"""
    allowed: bool
    reason: Optional[str] = None
    message: Optional[str] = None  # e.g. "You can create 2 more forms"
    current_usage: int = 0
    limit: Optional[int] = None


def is_suspended(user: User) -> bool:
    return user.status == UserStatus.SUSPENDED.value


def ensure_not_suspended(user: User) -> None:
    """Raise if the account is read-only"""
    if is_suspended(user):
        logger.warning(f"Blocked write by suspended user {user.id}")
        raise AccountSuspendedError()


async def check_form_limit(user: User, storage: BaseStorage) -> UsageLimitCheck:
    """Check if user can create another form (counted live, not from cached metrics)"""
    forms = await storage.get_forms_by_user_id(user.id)
    current_count = len(forms)

    if current_count >= user.form_limit:
        return UsageLimitCheck(
            allowed=False,
            reason=f"Form limit reached ({current_count}/{user.form_limit})",
            current_usage=current_count,
            limit=user.form_limit,
        )

    return UsageLimitCheck(
        allowed=True,
        current_usage=current_count,
        limit=user.form_limit,
        message=f"You can create {user.form_limit - current_count} more form(s)",
    )


async def enforce_form_creation(user: User, storage: BaseStorage) -> UsageLimitCheck:
    """Suspension gate, then form quota"""
    ensure_not_suspended(user)

    check = await check_form_limit(user, storage)
    if not check.allowed:
        logger.warning(
            f"Form limit reached for user {user.id}",
            extra={"current": check.current_usage, "limit": check.limit},
        )
        raise FormLimitExceededError(check.current_usage, check.limit)
    return check


async def get_storage_used_kb(user_id: str, storage: BaseStorage) -> float:
    """Approximate footprint: serialized size of the user's forms and their responses"""
    total_bytes = 0
    for form in await storage.get_forms_by_user_id(user_id):
        total_bytes += len(json.dumps(form.model_dump(mode="json", by_alias=True)))
        for response in await storage.get_responses_by_form_id(form.id):
            total_bytes += len(json.dumps(response.model_dump(mode="json", by_alias=True)))
    return round(total_bytes / 1024, 2)


async def get_user_metrics(user: User, storage: BaseStorage) -> UserMetrics:
    """Refresh the cached totals and report them next to the user's limits"""
    refreshed = await storage.update_user_metrics(user.id) or user
    return UserMetrics(
        total_forms=refreshed.total_forms,
        total_responses=refreshed.total_responses,
        form_limit=refreshed.form_limit,
        storage_limit=refreshed.storage_limit,
        storage_used_kb=await get_storage_used_kb(user.id, storage),
    )

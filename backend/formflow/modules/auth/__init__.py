# Authentication and access control module

from formflow.modules.auth.dependencies import (
    get_current_user_id,
    get_optional_user_id,
    get_current_user,
    get_optional_private_user,
    get_current_private_user,
    get_current_admin,
    ensure_form_owner,
    get_owned_form,
    can_view_form,
)

from formflow.modules.auth.usage_limits import (
    UsageLimitCheck,
    is_suspended,
    ensure_not_suspended,
    check_form_limit,
    enforce_form_creation,
    get_storage_used_kb,
    get_user_metrics,
)

__all__ = [
    "get_current_user_id",
    "get_optional_user_id",
    "get_current_user",
    "get_optional_private_user",
    "get_current_private_user",
    "get_current_admin",
    "ensure_form_owner",
    "get_owned_form",
    "can_view_form",
    "UsageLimitCheck",
    "is_suspended",
    "ensure_not_suspended",
    "check_form_limit",
    "enforce_form_creation",
    "get_storage_used_kb",
    "get_user_metrics",
]

"""
Auth Service
============
Account lifecycle for form owners.

    UNVERIFIED --verify_email--> VERIFIED --login--> session token
    VERIFIED --forgot_password--> OTP_ISSUED --verify_otp--> RESET_TOKEN_ISSUED
    RESET_TOKEN_ISSUED --reset_password--> VERIFIED (new password)

Email delivery is best-effort; a failed send never fails the request.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

from formflow.core.config import settings
from formflow.core.exceptions import (
    ConflictError,
    ValidationError,
    InvalidCredentialsError,
    EmailNotVerifiedError,
    InvalidTokenError,
    TokenExpiredError,
    InvalidOtpError,
    UserNotFoundError,
)
from formflow.core.logging_config import logger
from formflow.core.security import (
    verify_password,
    get_password_hash,
    generate_verification_token,
    generate_reset_token,
    generate_otp,
    constant_time_equals,
    create_access_token,
)
from formflow.schemas.auth import SignupRequest
from formflow.schemas.common import UserStatus
from formflow.schemas.user import User, ProfileUpdate
from formflow.services.email_service import email_service
from formflow.storage.base import BaseStorage


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_expired(expiry: Optional[datetime]) -> bool:
    return expiry is None or datetime.utcnow() > expiry


class AuthService:
    """Signup, verification, login and password reset for form owners"""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def _check_password(self, password: str) -> None:
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

    async def _get_user_or_404(self, user_id: str) -> User:
        user = await self.storage.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    # ========== Signup & verification ==========

    async def signup(self, data: SignupRequest) -> User:
        self._check_password(data.password)

        email = normalize_email(data.email)

        if await self.storage.get_user_by_email(email):
            logger.log_auth_event("signup", False, user_email=email, reason="email_exists")
            raise ConflictError("Email already registered")

        token = generate_verification_token()
        user = await self.storage.create_user({
            "email": email,
            "password_hash": get_password_hash(data.password),
            "first_name": data.first_name or email.split("@")[0],
            "last_name": data.last_name,
            "status": UserStatus.ACTIVE,
            "email_verified": False,
            "verification_token": token,
            "verification_token_expiry": datetime.utcnow() + timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS),
            "form_limit": settings.DEFAULT_FORM_LIMIT,
            "storage_limit": settings.DEFAULT_STORAGE_LIMIT_KB,
        })

        logger.log_auth_event("signup", True, user_email=email, user_id=user.id)
        await email_service.send_verification_email(email, user.first_name, token)
        return user

    async def resend_verification(self, email: str) -> None:
        """Issue a fresh verification token; silent for unknown or verified accounts"""
        email = normalize_email(email)
        user = await self.storage.get_user_by_email(email)
        if not user or user.email_verified:
            return

        token = generate_verification_token()
        await self.storage.update_user(user.id, {
            "verification_token": token,
            "verification_token_expiry": datetime.utcnow() + timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS),
        })
        await email_service.send_verification_email(email, user.first_name, token)

    async def verify_email(self, token: str) -> User:
        user = await self.storage.get_user_by_verification_token(token)
        if not user:
            raise InvalidTokenError("Invalid verification token")

        if is_expired(user.verification_token_expiry):
            raise TokenExpiredError("Verification token has expired")

        user = await self.storage.update_user(user.id, {
            "email_verified": True,
            "verification_token": None,
            "verification_token_expiry": None,
        })
        logger.log_auth_event("verify_email", True, user_email=user.email, user_id=user.id)
        return user

    # ========== Login ==========

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue a session token.

        Order matters: existence, then verification, then password. An unverified
        account is reported as such even when the password is wrong.
        """
        email = normalize_email(email)
        user = await self.storage.get_user_by_email(email)
        if not user:
            logger.log_auth_event("login", False, user_email=email, reason="unknown_email")
            raise InvalidCredentialsError()

        if not user.email_verified:
            logger.log_auth_event("login", False, user_email=email, reason="email_not_verified")
            raise EmailNotVerifiedError(user.email)

        if not verify_password(password, user.password_hash):
            logger.log_auth_event("login", False, user_email=email, reason="wrong_password")
            raise InvalidCredentialsError()

        user = await self.storage.update_user_metrics(user.id) or user
        logger.log_auth_event("login", True, user_email=email, user_id=user.id)
        return user, create_access_token(user.id, user.email)

    # ========== Password reset ==========

    async def forgot_password(self, email: str) -> str:
        email = normalize_email(email)
        user = await self.storage.get_user_by_email(email)
        if not user:
            raise UserNotFoundError()

        otp = generate_otp()
        await self.storage.update_user(user.id, {
            "reset_otp": otp,
            "reset_otp_expiry": datetime.utcnow() + timedelta(minutes=settings.RESET_OTP_EXPIRE_MINUTES),
        })
        logger.log_auth_event("forgot_password", True, user_email=email, user_id=user.id)
        await email_service.send_password_reset_otp(email, otp)
        return user.id

    async def verify_otp(self, user_id: str, otp: str) -> str:
        user = await self._get_user_or_404(user_id)

        if not user.reset_otp or not constant_time_equals(user.reset_otp, otp):
            logger.log_auth_event("verify_otp", False, user_email=user.email, reason="mismatch")
            raise InvalidOtpError()

        if is_expired(user.reset_otp_expiry):
            logger.log_auth_event("verify_otp", False, user_email=user.email, reason="expired")
            raise TokenExpiredError("OTP has expired")

        reset_token = generate_reset_token()
        await self.storage.update_user(user.id, {
            "reset_otp": None,
            "reset_otp_expiry": None,
            "reset_token": reset_token,
            "reset_token_expiry": datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
        })
        return reset_token

    async def reset_password(self, user_id: str, reset_token: str, new_password: str) -> None:
        self._check_password(new_password)

        user = await self._get_user_or_404(user_id)

        if not user.reset_token or not constant_time_equals(user.reset_token, reset_token):
            raise InvalidTokenError("Invalid reset token")

        if is_expired(user.reset_token_expiry):
            raise TokenExpiredError("Reset token has expired")

        await self.storage.update_user(user.id, {
            "password_hash": get_password_hash(new_password),
            "reset_token": None,
            "reset_token_expiry": None,
        })
        logger.log_auth_event("reset_password", True, user_email=user.email, user_id=user.id)

    # ========== Profile ==========

    async def get_me(self, user_id: str) -> User:
        return await self._get_user_or_404(user_id)

    async def update_profile(self, user_id: str, data: ProfileUpdate) -> User:
        await self._get_user_or_404(user_id)
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            return await self._get_user_or_404(user_id)
        return await self.storage.update_user(user_id, updates)

    async def delete_account(self, user_id: str) -> None:
        if not await self.storage.delete_user(user_id):
            raise UserNotFoundError(user_id)
        logger.info(f"Deleted account {user_id} with its forms, responses and private users")

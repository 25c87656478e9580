"""
Custom Exceptions for FormFlow
==============================

Every error the service raises on purpose derives from FormFlowError and carries
the HTTP status it maps to, so the API layer can translate it without knowing
which service raised it.

Usage:
    from formflow.core.exceptions import FormNotFoundError, ForbiddenError

    form = await storage.get_form(form_id)
    if not form:
        raise FormNotFoundError(form_id)
    if form.user_id != user_id:
        raise ForbiddenError()
"""

from typing import Optional, Any, Dict


class FormFlowError(Exception):
    """Base exception for all FormFlow errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class InternalError(FormFlowError):
    """Store or unexpected failure"""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(FormFlowError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidTokenError(FormFlowError):
    """Verification or reset token does not match"""

    status_code = 400

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class TokenExpiredError(FormFlowError):
    """Verification token, OTP or reset token has expired"""

    status_code = 400

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class InvalidOtpError(FormFlowError):
    """One-time code does not match"""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid OTP", code="INVALID_OTP")


# ============================================
# Authentication & Authorization Errors
# ============================================

class UnauthorizedError(FormFlowError):
    """Missing or invalid identity"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class InvalidCredentialsError(UnauthorizedError):
    """Unknown email or wrong password (same message for both)"""

    def __init__(self):
        super().__init__("Invalid email or password")
        self.code = "INVALID_CREDENTIALS"


class ForbiddenError(FormFlowError):
    """Authenticated but not entitled"""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


class EmailNotVerifiedError(ForbiddenError):
    """Login attempted before the email address was verified"""

    def __init__(self, email: str):
        super().__init__("Please verify your email before logging in")
        self.code = "EMAIL_NOT_VERIFIED"
        self.details = {"email": email}


class AccountSuspendedError(ForbiddenError):
    """Suspended accounts are read-only"""

    def __init__(self):
        super().__init__("Your account has been suspended by the administrator")
        self.code = "ACCOUNT_SUSPENDED"


class FormLimitExceededError(ForbiddenError):
    """User already owns as many forms as allowed"""

    def __init__(self, current: int, limit: int):
        super().__init__(f"Form limit reached ({current}/{limit}). Delete a form to create a new one.")
        self.code = "FORM_LIMIT_EXCEEDED"
        self.details = {"current": current, "limit": limit}


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(FormFlowError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str = ""):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(NotFoundError):
    """User not found"""

    def __init__(self, user_id: str = ""):
        super().__init__("User", user_id)


class FormNotFoundError(NotFoundError):
    """Form not found"""

    def __init__(self, form_id: str):
        super().__init__("Form", form_id)


class ResponseNotFoundError(NotFoundError):
    """Response not found"""

    def __init__(self, response_id: str):
        super().__init__("Response", response_id)


class PrivateUserNotFoundError(NotFoundError):
    """Private user not found"""

    def __init__(self, private_user_id: str):
        super().__init__("Private user", private_user_id)


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(FormFlowError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class DuplicateSubmissionError(ConflictError):
    """Form only accepts one submission per respondent"""

    def __init__(self, form_id: str):
        super().__init__("You have already submitted this form")
        self.code = "DUPLICATE_SUBMISSION"
        self.details = {"form_id": form_id}


class PayloadTooLargeError(FormFlowError):
    """Request body over the configured size limit"""

    status_code = 413

    def __init__(self, max_size: int):
        super().__init__(
            f"Request body too large. Maximum size is {max_size // 1024 // 1024}MB",
            code="PAYLOAD_TOO_LARGE",
            details={"max_size": max_size},
        )


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: FormFlowError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "message": error.message,
        "error": error.to_dict()
    }

from formflow.services.email_service import EmailService, email_service
from formflow.services.auth_service import AuthService
from formflow.services.form_service import FormService
from formflow.services.response_service import ResponseService
from formflow.services.private_user_service import PrivateUserService
from formflow.services.admin_service import AdminService

__all__ = [
    "EmailService",
    "email_service",
    "AuthService",
    "FormService",
    "ResponseService",
    "PrivateUserService",
    "AdminService",
]

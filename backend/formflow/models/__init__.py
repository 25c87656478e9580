# Re-export all models for convenient imports
from formflow.models.user import User
from formflow.models.form import Form
from formflow.models.response import Response
from formflow.models.private_user import PrivateUser

__all__ = [
    "User",
    "Form",
    "Response",
    "PrivateUser",
]

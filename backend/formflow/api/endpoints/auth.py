from fastapi import APIRouter, Depends, status

from formflow.core.logging_config import set_user_id
from formflow.modules.auth.dependencies import get_current_user_id
from formflow.schemas.auth import (
    SignupRequest,
    LoginRequest,
    EmailRequest,
    VerifyEmailRequest,
    VerifyOtpRequest,
    ResetPasswordRequest,
    ForgotPasswordResponse,
    VerifyOtpResponse,
)
from formflow.schemas.common import MessageResponse
from formflow.schemas.private_user import PrivateLoginRequest, PrivateLoginResponse
from formflow.schemas.user import UserResponse, LoginResponse, ProfileUpdate
from formflow.services.auth_service import AuthService
from formflow.services.private_user_service import PrivateUserService
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    storage: BaseStorage = Depends(get_storage)
):
    """Register a new account; a verification link is emailed"""
    return await AuthService(storage).signup(data)


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    data: EmailRequest,
    storage: BaseStorage = Depends(get_storage)
):
    await AuthService(storage).resend_verification(data.email)
    return MessageResponse(
        message="If the account exists and is not verified, a new verification email has been sent"
    )


@router.post("/verify-email", response_model=UserResponse)
async def verify_email(
    data: VerifyEmailRequest,
    storage: BaseStorage = Depends(get_storage)
):
    return await AuthService(storage).verify_email(data.token)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    storage: BaseStorage = Depends(get_storage)
):
    """Login; returns the user with fresh metrics and an access token"""
    user, access_token = await AuthService(storage).login(credentials.email, credentials.password)
    set_user_id(user.id)
    return LoginResponse(
        **UserResponse.model_validate(user.model_dump()).model_dump(),
        access_token=access_token,
    )


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    data: EmailRequest,
    storage: BaseStorage = Depends(get_storage)
):
    user_id = await AuthService(storage).forgot_password(data.email)
    return ForgotPasswordResponse(message="OTP sent to your email", user_id=user_id)


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(
    data: VerifyOtpRequest,
    storage: BaseStorage = Depends(get_storage)
):
    reset_token = await AuthService(storage).verify_otp(data.user_id, data.otp)
    return VerifyOtpResponse(message="OTP verified", reset_token=reset_token)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    data: ResetPasswordRequest,
    storage: BaseStorage = Depends(get_storage)
):
    await AuthService(storage).reset_password(data.user_id, data.reset_token, data.new_password)
    return MessageResponse(message="Password reset successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Get current user info"""
    return await AuthService(storage).get_me(user_id)


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await AuthService(storage).update_profile(user_id, data)


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Delete the account with all its forms, responses and private users"""
    await AuthService(storage).delete_account(user_id)
    return MessageResponse(message="Account deleted")


@router.post("/private-login", response_model=PrivateLoginResponse)
async def private_login(
    credentials: PrivateLoginRequest,
    storage: BaseStorage = Depends(get_storage)
):
    """Sign in a private user by login name"""
    private_user, session_token = await PrivateUserService(storage).login(
        credentials.user_id, credentials.password
    )
    return PrivateLoginResponse(
        id=private_user.id,
        name=private_user.name,
        email=private_user.email,
        accessible_forms=private_user.accessible_forms,
        session_token=session_token,
    )

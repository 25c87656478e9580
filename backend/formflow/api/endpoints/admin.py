from fastapi import APIRouter, Depends
from typing import List

from formflow.modules.auth.dependencies import get_current_admin
from formflow.schemas.admin import (
    AdminLoginRequest,
    AdminLoginResponse,
    AdminUserSummary,
    AdminUserUpdate,
    PlatformStats,
)
from formflow.schemas.user import UserResponse
from formflow.services.admin_service import AdminService
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter()


@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(
    credentials: AdminLoginRequest,
    storage: BaseStorage = Depends(get_storage)
):
    token = AdminService(storage).login(credentials.username, credentials.password)
    return AdminLoginResponse(session_token=token)


@router.get("/users", response_model=List[AdminUserSummary])
async def list_users(
    admin: str = Depends(get_current_admin),
    storage: BaseStorage = Depends(get_storage)
):
    """All users with form counts and storage usage"""
    return await AdminService(storage).list_users()


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: AdminUserUpdate,
    admin: str = Depends(get_current_admin),
    storage: BaseStorage = Depends(get_storage)
):
    """Suspend/reactivate an account or change its limits"""
    return await AdminService(storage).update_user_settings(user_id, data)


@router.get("/stats", response_model=PlatformStats)
async def platform_stats(
    admin: str = Depends(get_current_admin),
    storage: BaseStorage = Depends(get_storage)
):
    return await AdminService(storage).platform_stats()

from fastapi import APIRouter, Depends, status
from typing import List

from formflow.modules.auth.dependencies import get_current_user_id, get_current_private_user
from formflow.schemas.common import MessageResponse
from formflow.schemas.form import Form
from formflow.schemas.private_user import (
    PrivateUser,
    PrivateUserCreate,
    PrivateUserAccessUpdate,
    PrivateUserResponse,
)
from formflow.services.form_service import FormService
from formflow.services.private_user_service import PrivateUserService
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter()

# Endpoints used by a signed-in private user
private_router = APIRouter()


@router.post("", response_model=PrivateUserResponse, status_code=status.HTTP_201_CREATED)
async def create_private_user(
    data: PrivateUserCreate,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await PrivateUserService(storage).create(user_id, data)


@router.get("", response_model=List[PrivateUserResponse])
async def list_private_users(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await PrivateUserService(storage).list_for_owner(user_id)


@router.get("/{private_user_id}", response_model=PrivateUserResponse)
async def get_private_user(
    private_user_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await PrivateUserService(storage).get_owned(private_user_id, user_id)


@router.patch("/{private_user_id}/access", response_model=PrivateUserResponse)
async def update_private_user_access(
    private_user_id: str,
    data: PrivateUserAccessUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Replace the list of private forms this user may open"""
    return await PrivateUserService(storage).update_access(private_user_id, user_id, data.form_ids)


@router.delete("/{private_user_id}", response_model=MessageResponse)
async def delete_private_user(
    private_user_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    await PrivateUserService(storage).delete(private_user_id, user_id)
    return MessageResponse(message="Private user deleted")


@private_router.get("/forms", response_model=List[Form])
async def list_accessible_forms(
    private_user: PrivateUser = Depends(get_current_private_user),
    storage: BaseStorage = Depends(get_storage)
):
    """Forms the signed-in private user was granted"""
    return await FormService(storage).list_private_forms(private_user)

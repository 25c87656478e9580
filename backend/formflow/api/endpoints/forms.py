from fastapi import APIRouter, Depends, Response, status
from typing import List, Optional

from formflow.modules.auth.dependencies import (
    get_current_user_id,
    get_current_user,
    get_optional_user_id,
    get_optional_private_user,
)
from formflow.schemas.form import Form, FormCreate, FormUpdate, FormStats
from formflow.schemas.private_user import PrivateUser
from formflow.schemas.response import FormResponse
from formflow.schemas.user import User
from formflow.services.form_service import FormService
from formflow.services.response_service import ResponseService
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter()


@router.get("", response_model=List[Form])
async def list_forms(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Caller's forms, most recently updated first"""
    return await FormService(storage).list_forms(user_id)


@router.post("", response_model=Form, status_code=status.HTTP_201_CREATED)
async def create_form(
    data: FormCreate,
    current_user: User = Depends(get_current_user),
    storage: BaseStorage = Depends(get_storage)
):
    return await FormService(storage).create_form(current_user, data)


@router.get("/{form_id}", response_model=Form)
async def get_form(
    form_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    private_user: Optional[PrivateUser] = Depends(get_optional_private_user),
    storage: BaseStorage = Depends(get_storage)
):
    """Public form definition; private forms need the owner or a private session"""
    return await FormService(storage).get_form(form_id, user_id, private_user)


@router.patch("/{form_id}", response_model=Form)
async def update_form(
    form_id: str,
    data: FormUpdate,
    current_user: User = Depends(get_current_user),
    storage: BaseStorage = Depends(get_storage)
):
    return await FormService(storage).update_form(form_id, current_user, data)


@router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_form(
    form_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Delete a form and all of its responses"""
    await FormService(storage).delete_form(form_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{form_id}/stats", response_model=FormStats)
async def get_form_stats(
    form_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await FormService(storage).get_form_stats(form_id, user_id)


@router.get("/{form_id}/responses", response_model=List[FormResponse])
async def list_form_responses(
    form_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Responses to the form, newest first"""
    return await ResponseService(storage).list_by_form(form_id, user_id)


@router.get("/{form_id}/data", response_model=List[FormResponse])
async def get_form_data(
    form_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Response data of another owned form, used for lookups"""
    return await FormService(storage).get_form_data(form_id, user_id)

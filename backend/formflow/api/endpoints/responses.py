from fastapi import APIRouter, Depends, Header, Query, Response, status
from typing import Optional

from formflow.modules.auth.dependencies import get_current_user_id
from formflow.schemas.response import FormResponse, ResponseCreate, ResponseUpdate, WhatsappShare
from formflow.services.output_service import build_whatsapp_share
from formflow.services.response_service import ResponseService
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter()


@router.post("", response_model=FormResponse, status_code=status.HTTP_201_CREATED,
             response_model_exclude={"respondent_key"})
async def submit_response(
    data: ResponseCreate,
    x_respondent_id: Optional[str] = Header(None, alias="X-Respondent-Id"),
    storage: BaseStorage = Depends(get_storage)
):
    """Public submission endpoint"""
    return await ResponseService(storage).submit(data.form_id, data.data, x_respondent_id)


@router.get("/{response_id}", response_model=FormResponse, response_model_exclude={"respondent_key"})
async def get_response(
    response_id: str,
    storage: BaseStorage = Depends(get_storage)
):
    """Single response, read by the confirmation page"""
    return await ResponseService(storage).get(response_id)


@router.get("/{response_id}/whatsapp", response_model=WhatsappShare)
async def get_whatsapp_share(
    response_id: str,
    phone: Optional[str] = Query(None, description="Recipient number, digits only"),
    storage: BaseStorage = Depends(get_storage)
):
    """WhatsApp share message and wa.me link for a response"""
    response, form = await ResponseService(storage).get_with_form(response_id)
    return build_whatsapp_share(form, response, phone)


@router.patch("/{response_id}", response_model=FormResponse)
async def update_response(
    response_id: str,
    data: ResponseUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await ResponseService(storage).update(response_id, user_id, data.data)


@router.delete("/{response_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_response(
    response_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    await ResponseService(storage).delete(response_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from fastapi import APIRouter, Depends
from typing import List

from formflow.core.exceptions import UserNotFoundError
from formflow.modules.auth.dependencies import get_current_user_id
from formflow.modules.auth.usage_limits import get_user_metrics
from formflow.schemas.response import FormResponse
from formflow.schemas.user import UserMetrics, TotalResponses
from formflow.services.response_service import ResponseService
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter()


@router.get("/total-responses", response_model=TotalResponses)
async def get_total_responses(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Live count across all of the caller's forms"""
    total = await ResponseService(storage).total_for_user(user_id)
    return TotalResponses(total_responses=total)


@router.get("/responses", response_model=List[FormResponse])
async def get_all_responses(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    return await ResponseService(storage).list_all_for_user(user_id)


@router.get("/metrics", response_model=UserMetrics)
async def get_metrics(
    user_id: str = Depends(get_current_user_id),
    storage: BaseStorage = Depends(get_storage)
):
    """Usage totals next to the limits set by the administrator"""
    user = await storage.get_user(user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return await get_user_metrics(user, storage)

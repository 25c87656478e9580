"""
Response Service - public submissions and owner-side response management
"""

from typing import Any, Dict, List, Optional, Tuple

from formflow.core.exceptions import (
    DuplicateSubmissionError,
    FormNotFoundError,
    ResponseNotFoundError,
)
from formflow.core.logging_config import logger
from formflow.modules.auth.dependencies import get_owned_form
from formflow.schemas.form import Form
from formflow.schemas.response import FormResponse
from formflow.storage.base import BaseStorage


class ResponseService:
    """Collect, list, edit and delete responses"""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    async def submit(
        self,
        form_id: str,
        data: Dict[str, Any],
        respondent_key: Optional[str] = None,
    ) -> FormResponse:
        """
        Store a public submission.

        The data map is stored as sent. Forms with allow_editing off accept one
        submission per respondent key; submissions without a key are not tracked.
        """
        form = await self.storage.get_form(form_id)
        if not form:
            raise FormNotFoundError(form_id)

        if respondent_key and not form.allow_editing:
            existing = await self.storage.find_response_by_respondent(form_id, respondent_key)
            if existing:
                logger.info(f"Rejected repeat submission to form {form_id}")
                raise DuplicateSubmissionError(form_id)

        response = await self.storage.create_response({
            "form_id": form_id,
            "data": data,
            "respondent_key": respondent_key,
        })
        await self.storage.update_user_metrics(form.user_id)
        logger.log_submission(form_id, response.id, tracked=bool(respondent_key))
        return response

    async def list_by_form(self, form_id: str, user_id: str) -> List[FormResponse]:
        await get_owned_form(self.storage, form_id, user_id)
        return await self.storage.get_responses_by_form_id(form_id)

    async def get(self, response_id: str) -> FormResponse:
        response = await self.storage.get_response(response_id)
        if not response:
            raise ResponseNotFoundError(response_id)
        return response

    async def get_with_form(self, response_id: str) -> Tuple[FormResponse, Form]:
        response = await self.get(response_id)
        form = await self.storage.get_form(response.form_id)
        if not form:
            raise FormNotFoundError(response.form_id)
        return response, form

    async def _get_owned_response(self, response_id: str, user_id: str) -> FormResponse:
        response = await self.get(response_id)
        await get_owned_form(self.storage, response.form_id, user_id)
        return response

    async def update(self, response_id: str, user_id: str, data: Dict[str, Any]) -> FormResponse:
        await self._get_owned_response(response_id, user_id)
        updated = await self.storage.update_response(response_id, data)
        if not updated:
            raise ResponseNotFoundError(response_id)
        return updated

    async def delete(self, response_id: str, user_id: str) -> None:
        await self._get_owned_response(response_id, user_id)
        await self.storage.delete_response(response_id)
        await self.storage.update_user_metrics(user_id)

    async def list_all_for_user(self, user_id: str) -> List[FormResponse]:
        """Every response across the user's forms, newest first"""
        responses: List[FormResponse] = []
        for form in await self.storage.get_forms_by_user_id(user_id):
            responses.extend(await self.storage.get_responses_by_form_id(form.id))
        responses.sort(key=lambda r: r.submitted_at, reverse=True)
        return responses

    async def total_for_user(self, user_id: str) -> int:
        forms = await self.storage.get_forms_by_user_id(user_id)
        return await self.storage.get_response_count_by_form_ids([f.id for f in forms])

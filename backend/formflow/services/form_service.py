"""
Form Service - form lifecycle for owners

Creating a form passes the suspension gate and the form quota; editing passes the
suspension gate only; deleting is always allowed to the owner. Field-schema edits
back-fill existing responses (see BaseStorage.update_form).
"""

from typing import List, Optional

from formflow.core.exceptions import ForbiddenError, FormNotFoundError
from formflow.core.logging_config import logger
from formflow.modules.auth.dependencies import can_view_form, get_owned_form
from formflow.modules.auth.usage_limits import enforce_form_creation, ensure_not_suspended
from formflow.schemas.form import Form, FormCreate, FormUpdate, FormStats
from formflow.schemas.private_user import PrivateUser
from formflow.schemas.response import FormResponse
from formflow.schemas.user import User
from formflow.storage.base import BaseStorage

# Non-nullable attributes; a null for one of these in an update leaves it unchanged
REQUIRED_FORM_ATTRS = {
    "title", "fields", "status", "visibility",
    "output_formats", "confirmation_style", "allow_editing",
}


class FormService:
    """Create, edit, delete and read forms"""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    async def list_forms(self, user_id: str) -> List[Form]:
        """Owner's forms, most recently updated first"""
        return await self.storage.get_forms_by_user_id(user_id)

    async def create_form(self, owner: User, data: FormCreate) -> Form:
        await enforce_form_creation(owner, self.storage)

        values = data.model_dump()
        values["user_id"] = owner.id
        form = await self.storage.create_form(values)

        await self.storage.update_user_metrics(owner.id)
        logger.log_form_event("created", form.id, field_count=len(form.fields))
        return form

    async def update_form(self, form_id: str, requester: User, data: FormUpdate) -> Form:
        await get_owned_form(self.storage, form_id, requester.id)
        ensure_not_suspended(requester)

        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in REQUIRED_FORM_ATTRS
        }
        form = await self.storage.update_form(form_id, updates)
        if not form:
            raise FormNotFoundError(form_id)

        logger.log_form_event("updated", form_id, changed=sorted(updates))
        return form

    async def delete_form(self, form_id: str, user_id: str) -> None:
        await get_owned_form(self.storage, form_id, user_id)
        await self.storage.delete_form(form_id)
        await self.storage.update_user_metrics(user_id)
        logger.log_form_event("deleted", form_id)

    async def get_form(
        self,
        form_id: str,
        user_id: Optional[str] = None,
        private_user: Optional[PrivateUser] = None,
    ) -> Form:
        """Public read; private forms need the owner or a granted private session"""
        form = await self.storage.get_form(form_id)
        if not form:
            raise FormNotFoundError(form_id)
        if not can_view_form(form, user_id, private_user):
            raise ForbiddenError("This form is private")
        return form

    async def get_form_stats(self, form_id: str, user_id: str) -> FormStats:
        await get_owned_form(self.storage, form_id, user_id)
        count = await self.storage.get_response_count(form_id)
        return FormStats(response_count=count)

    async def get_form_data(self, form_id: str, user_id: str) -> List[FormResponse]:
        """Responses used as lookup data by the form builder"""
        await get_owned_form(self.storage, form_id, user_id)
        return await self.storage.get_responses_by_form_id(form_id)

    async def list_private_forms(self, private_user: PrivateUser) -> List[Form]:
        """Forms a private user was granted, skipping ones that were since deleted"""
        forms = []
        for form_id in private_user.accessible_forms:
            form = await self.storage.get_form(form_id)
            if form and form.user_id == private_user.user_id:
                forms.append(form)
        return forms

"""
Storage Interface
=================

Every persistence backend implements BaseStorage in full. Services depend only on
this interface; the concrete adapter is chosen once at startup by create_storage().

Records cross this boundary as the pydantic models in formflow.schemas. Create
methods take a mapping of snake_case attributes and assign the id and timestamps;
update methods take a partial mapping and return the updated record, or None when
the target does not exist.
"""

import enum
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from formflow.schemas.common import FieldType
from formflow.schemas.form import Form, FormField
from formflow.schemas.private_user import PrivateUser
from formflow.schemas.response import FormResponse
from formflow.schemas.user import User


def to_storable(value: Any) -> Any:
    """Reduce enums and pydantic models to plain JSON-compatible values"""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: to_storable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_storable(v) for v in value]
    return value


def backfill_response_data(fields: Iterable[FormField], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Add a default for every field label missing from a response.

    Checkbox fields default to False, everything else to "". Existing keys are
    never overwritten or removed.
    """
    filled = dict(data)
    for field in fields:
        if field.label not in filled:
            filled[field.label] = False if field.type == FieldType.CHECKBOX.value else ""
    return filled


class BaseStorage(ABC):
    """Uniform persistence interface for users, forms, responses and private users"""

    # ==========================================
    # Lifecycle
    # ==========================================

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    # ==========================================
    # Users
    # ==========================================

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_verification_token(self, token: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create_user(self, data: Dict[str, Any]) -> User:
        ...

    @abstractmethod
    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> Optional[User]:
        ...

    @abstractmethod
    async def delete_user(self, user_id: str) -> bool:
        """Remove the user's responses, forms and private users, then the user"""

    @abstractmethod
    async def get_all_users(self) -> List[User]:
        ...

    async def update_user_metrics(self, user_id: str) -> Optional[User]:
        """Recount the user's forms and responses and persist the totals"""
        forms = await self.get_forms_by_user_id(user_id)
        total_responses = await self.get_response_count_by_form_ids([f.id for f in forms])
        return await self.update_user(user_id, {
            "total_forms": len(forms),
            "total_responses": total_responses,
        })

    # ==========================================
    # Forms
    # ==========================================

    @abstractmethod
    async def get_form(self, form_id: str) -> Optional[Form]:
        ...

    @abstractmethod
    async def get_forms_by_user_id(self, user_id: str) -> List[Form]:
        """Most recently updated first"""

    @abstractmethod
    async def create_form(self, data: Dict[str, Any]) -> Form:
        ...

    @abstractmethod
    async def update_form(self, form_id: str, updates: Dict[str, Any]) -> Optional[Form]:
        """
        Partial update. When "fields" is present, existing responses are
        back-filled with defaults for labels they do not have yet.
        """

    @abstractmethod
    async def delete_form(self, form_id: str) -> bool:
        """Remove the form's responses, then the form"""

    # ==========================================
    # Responses
    # ==========================================

    @abstractmethod
    async def create_response(self, data: Dict[str, Any]) -> FormResponse:
        ...

    @abstractmethod
    async def get_response(self, response_id: str) -> Optional[FormResponse]:
        ...

    @abstractmethod
    async def get_responses_by_form_id(self, form_id: str) -> List[FormResponse]:
        """Newest first"""

    @abstractmethod
    async def get_response_count(self, form_id: str) -> int:
        ...

    @abstractmethod
    async def get_response_count_by_form_ids(self, form_ids: List[str]) -> int:
        ...

    @abstractmethod
    async def find_response_by_respondent(self, form_id: str, respondent_key: str) -> Optional[FormResponse]:
        ...

    @abstractmethod
    async def update_response(self, response_id: str, data: Dict[str, Any]) -> Optional[FormResponse]:
        """Replace the response's data map"""

    @abstractmethod
    async def delete_response(self, response_id: str) -> bool:
        ...

    # ==========================================
    # Private users
    # ==========================================

    @abstractmethod
    async def create_private_user(self, data: Dict[str, Any]) -> PrivateUser:
        ...

    @abstractmethod
    async def get_private_user(self, private_user_id: str) -> Optional[PrivateUser]:
        ...

    @abstractmethod
    async def get_private_user_by_name(self, name: str) -> Optional[PrivateUser]:
        ...

    @abstractmethod
    async def get_private_users_by_user_id(self, user_id: str) -> List[PrivateUser]:
        ...

    @abstractmethod
    async def update_private_user_access(self, private_user_id: str, form_ids: List[str]) -> Optional[PrivateUser]:
        ...

    @abstractmethod
    async def delete_private_user(self, private_user_id: str) -> bool:
        ...

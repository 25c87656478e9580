"""
Document storage backed by MongoDB (motor).

Documents use camelCase keys, the same shape the API serves. Every query projects
out `_id`; records are addressed by their application-generated `id`.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from formflow.core.exceptions import ConflictError
from formflow.core.logging_config import logger
from formflow.core.mongo import MongoConnection
from formflow.core.types import generate_id
from formflow.schemas.form import Form, FormField
from formflow.schemas.private_user import PrivateUser
from formflow.schemas.response import FormResponse
from formflow.schemas.user import User
from formflow.storage.base import BaseStorage, backfill_response_data, to_storable

NO_ID = {"_id": 0}


def _camel_keys(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Top-level attribute names to document keys (nested values are left alone)"""
    return {to_camel(key): value for key, value in to_storable(updates).items()}


class MongoStorage(BaseStorage):
    """BaseStorage over the users/forms/responses/private_users collections"""

    def __init__(self, uri: str, db_name: str):
        self.connection = MongoConnection(uri, db_name)
        self.db = None

    async def connect(self) -> None:
        self.db = await self.connection.connect()

    async def close(self) -> None:
        await self.connection.close()
        self.db = None

    async def _insert(self, collection: str, record, conflict_message: Optional[str] = None) -> None:
        doc = record.model_dump(by_alias=True)
        try:
            await self.db[collection].insert_one(doc)
        except DuplicateKeyError:
            if conflict_message is None:
                raise
            raise ConflictError(conflict_message)

    # ==========================================
    # Users
    # ==========================================

    async def get_user(self, user_id: str) -> Optional[User]:
        doc = await self.db.users.find_one({"id": user_id}, NO_ID)
        return User.model_validate(doc) if doc else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        doc = await self.db.users.find_one({"email": email}, NO_ID)
        return User.model_validate(doc) if doc else None

    async def get_user_by_verification_token(self, token: str) -> Optional[User]:
        doc = await self.db.users.find_one({"verificationToken": token}, NO_ID)
        return User.model_validate(doc) if doc else None

    async def create_user(self, data: Dict[str, Any]) -> User:
        user = User(id=generate_id(), **to_storable(data))
        await self._insert("users", user, "Email already registered")
        return user

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> Optional[User]:
        changes = _camel_keys(updates)
        changes["updatedAt"] = datetime.utcnow()
        doc = await self.db.users.find_one_and_update(
            {"id": user_id},
            {"$set": changes},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        return User.model_validate(doc) if doc else None

    async def delete_user(self, user_id: str) -> bool:
        user = await self.db.users.find_one({"id": user_id}, {"_id": 0, "id": 1})
        if not user:
            return False

        form_ids = await self.db.forms.distinct("id", {"userId": user_id})
        responses = await self.db.responses.delete_many({"formId": {"$in": form_ids}})
        await self.db.forms.delete_many({"userId": user_id})
        await self.db.private_users.delete_many({"userId": user_id})
        await self.db.users.delete_one({"id": user_id})

        logger.log_db_query(
            "delete", "users",
            rows_affected=1 + len(form_ids) + responses.deleted_count,
        )
        return True

    async def get_all_users(self) -> List[User]:
        cursor = self.db.users.find({}, NO_ID).sort("createdAt", -1)
        return [User.model_validate(doc) async for doc in cursor]

    # ==========================================
    # Forms
    # ==========================================

    async def get_form(self, form_id: str) -> Optional[Form]:
        doc = await self.db.forms.find_one({"id": form_id}, NO_ID)
        return Form.model_validate(doc) if doc else None

    async def get_forms_by_user_id(self, user_id: str) -> List[Form]:
        cursor = self.db.forms.find({"userId": user_id}, NO_ID).sort("updatedAt", -1)
        return [Form.model_validate(doc) async for doc in cursor]

    async def create_form(self, data: Dict[str, Any]) -> Form:
        form = Form(id=generate_id(), **to_storable(data))
        await self._insert("forms", form)
        return form

    async def update_form(self, form_id: str, updates: Dict[str, Any]) -> Optional[Form]:
        updates = to_storable(updates)
        for immutable in ("id", "user_id", "created_at"):
            updates.pop(immutable, None)

        changes = _camel_keys(updates)
        changes["updatedAt"] = datetime.utcnow()
        doc = await self.db.forms.find_one_and_update(
            {"id": form_id},
            {"$set": changes},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None

        if "fields" in updates:
            fields = [FormField.model_validate(f) for f in updates["fields"]]
            backfilled = 0
            async for response in self.db.responses.find({"formId": form_id}, NO_ID):
                data = response.get("data") or {}
                filled = backfill_response_data(fields, data)
                if filled != data:
                    await self.db.responses.update_one(
                        {"id": response["id"]},
                        {"$set": {"data": filled}},
                    )
                    backfilled += 1
            if backfilled:
                logger.log_db_query("backfill", "responses", rows_affected=backfilled)

        return Form.model_validate(doc)

    async def delete_form(self, form_id: str) -> bool:
        form = await self.db.forms.find_one({"id": form_id}, {"_id": 0, "id": 1})
        if not form:
            return False
        await self.db.responses.delete_many({"formId": form_id})
        await self.db.forms.delete_one({"id": form_id})
        return True

    # ==========================================
    # Responses
    # ==========================================

    async def create_response(self, data: Dict[str, Any]) -> FormResponse:
        response = FormResponse(id=generate_id(), **to_storable(data))
        await self._insert("responses", response)
        return response

    async def get_response(self, response_id: str) -> Optional[FormResponse]:
        doc = await self.db.responses.find_one({"id": response_id}, NO_ID)
        return FormResponse.model_validate(doc) if doc else None

    async def get_responses_by_form_id(self, form_id: str) -> List[FormResponse]:
        cursor = self.db.responses.find({"formId": form_id}, NO_ID).sort("submittedAt", -1)
        return [FormResponse.model_validate(doc) async for doc in cursor]

    async def get_response_count(self, form_id: str) -> int:
        return await self.db.responses.count_documents({"formId": form_id})

    async def get_response_count_by_form_ids(self, form_ids: List[str]) -> int:
        if not form_ids:
            return 0
        return await self.db.responses.count_documents({"formId": {"$in": form_ids}})

    async def find_response_by_respondent(self, form_id: str, respondent_key: str) -> Optional[FormResponse]:
        doc = await self.db.responses.find_one(
            {"formId": form_id, "respondentKey": respondent_key}, NO_ID
        )
        return FormResponse.model_validate(doc) if doc else None

    async def update_response(self, response_id: str, data: Dict[str, Any]) -> Optional[FormResponse]:
        doc = await self.db.responses.find_one_and_update(
            {"id": response_id},
            {"$set": {"data": to_storable(data)}},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        return FormResponse.model_validate(doc) if doc else None

    async def delete_response(self, response_id: str) -> bool:
        result = await self.db.responses.delete_one({"id": response_id})
        return result.deleted_count > 0

    # ==========================================
    # Private users
    # ==========================================

    async def create_private_user(self, data: Dict[str, Any]) -> PrivateUser:
        private_user = PrivateUser(id=generate_id(), **to_storable(data))
        await self._insert("private_users", private_user, "A private user with this name already exists")
        return private_user

    async def get_private_user(self, private_user_id: str) -> Optional[PrivateUser]:
        doc = await self.db.private_users.find_one({"id": private_user_id}, NO_ID)
        return PrivateUser.model_validate(doc) if doc else None

    async def get_private_user_by_name(self, name: str) -> Optional[PrivateUser]:
        doc = await self.db.private_users.find_one({"name": name}, NO_ID)
        return PrivateUser.model_validate(doc) if doc else None

    async def get_private_users_by_user_id(self, user_id: str) -> List[PrivateUser]:
        cursor = self.db.private_users.find({"userId": user_id}, NO_ID).sort("createdAt", -1)
        return [PrivateUser.model_validate(doc) async for doc in cursor]

    async def update_private_user_access(self, private_user_id: str, form_ids: List[str]) -> Optional[PrivateUser]:
        doc = await self.db.private_users.find_one_and_update(
            {"id": private_user_id},
            {"$set": {"accessibleForms": list(form_ids)}},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        return PrivateUser.model_validate(doc) if doc else None

    async def delete_private_user(self, private_user_id: str) -> bool:
        result = await self.db.private_users.delete_one({"id": private_user_id})
        return result.deleted_count > 0

"""
Relational storage backed by SQLAlchemy (async).

PostgreSQL through asyncpg in production, SQLite through aiosqlite for local
development and tests.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError

from formflow.core.exceptions import ConflictError
from formflow.core.database import Base, build_engine, build_session_factory, init_db
from formflow.core.logging_config import logger
from formflow.core.types import generate_id
from formflow.models import (
    User as UserRow,
    Form as FormRow,
    Response as ResponseRow,
    PrivateUser as PrivateUserRow,
)
from formflow.schemas.form import Form, FormField
from formflow.schemas.private_user import PrivateUser
from formflow.schemas.response import FormResponse
from formflow.schemas.user import User
from formflow.storage.base import BaseStorage, backfill_response_data, to_storable

RecordT = TypeVar("RecordT")


def _to_record(schema: Type[RecordT], row: Base) -> RecordT:
    values = {column.key: getattr(row, column.key) for column in row.__table__.columns}
    return schema.model_validate(values)


class SqlStorage(BaseStorage):
    """BaseStorage over the users/forms/responses/private_users tables"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = build_engine(database_url, echo=echo)
        self.session_factory = build_session_factory(self.engine)

    async def connect(self) -> None:
        await init_db(self.engine)
        logger.info("Relational store ready")

    async def close(self) -> None:
        await self.engine.dispose()

    async def _commit_unique(self, session, conflict_message: str) -> None:
        """Commit an insert guarded by a unique column; a lost race is a conflict"""
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            raise ConflictError(conflict_message)

    # ==========================================
    # Users
    # ==========================================

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self.session_factory() as session:
            row = await session.get(UserRow, user_id)
            return _to_record(User, row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserRow).where(UserRow.email == email))
            row = result.scalar_one_or_none()
            return _to_record(User, row) if row else None

    async def get_user_by_verification_token(self, token: str) -> Optional[User]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserRow).where(UserRow.verification_token == token))
            row = result.scalars().first()
            return _to_record(User, row) if row else None

    async def create_user(self, data: Dict[str, Any]) -> User:
        async with self.session_factory() as session:
            row = UserRow(id=generate_id(), **to_storable(data))
            session.add(row)
            await self._commit_unique(session, "Email already registered")
            await session.refresh(row)
            return _to_record(User, row)

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> Optional[User]:
        async with self.session_factory() as session:
            row = await session.get(UserRow, user_id)
            if not row:
                return None
            for key, value in to_storable(updates).items():
                setattr(row, key, value)
            row.updated_at = datetime.utcnow()
            await session.commit()
            await session.refresh(row)
            return _to_record(User, row)

    async def delete_user(self, user_id: str) -> bool:
        async with self.session_factory() as session:
            async with session.begin():
                row = await session.get(UserRow, user_id)
                if not row:
                    return False
                owned_forms = select(FormRow.id).where(FormRow.user_id == user_id)
                responses = await session.execute(
                    delete(ResponseRow).where(ResponseRow.form_id.in_(owned_forms))
                )
                forms = await session.execute(delete(FormRow).where(FormRow.user_id == user_id))
                await session.execute(delete(PrivateUserRow).where(PrivateUserRow.user_id == user_id))
                await session.delete(row)

        logger.log_db_query("delete", "users", rows_affected=1 + forms.rowcount + responses.rowcount)
        return True

    async def get_all_users(self) -> List[User]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserRow).order_by(UserRow.created_at.desc()))
            return [_to_record(User, row) for row in result.scalars().all()]

    # ==========================================
    # Forms
    # ==========================================

    async def get_form(self, form_id: str) -> Optional[Form]:
        async with self.session_factory() as session:
            row = await session.get(FormRow, form_id)
            return _to_record(Form, row) if row else None

    async def get_forms_by_user_id(self, user_id: str) -> List[Form]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(FormRow)
                .where(FormRow.user_id == user_id)
                .order_by(FormRow.updated_at.desc())
            )
            return [_to_record(Form, row) for row in result.scalars().all()]

    async def create_form(self, data: Dict[str, Any]) -> Form:
        async with self.session_factory() as session:
            row = FormRow(id=generate_id(), **to_storable(data))
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _to_record(Form, row)

    async def update_form(self, form_id: str, updates: Dict[str, Any]) -> Optional[Form]:
        updates = to_storable(updates)
        for immutable in ("id", "user_id", "created_at"):
            updates.pop(immutable, None)

        async with self.session_factory() as session:
            async with session.begin():
                row = await session.get(FormRow, form_id)
                if not row:
                    return None
                for key, value in updates.items():
                    setattr(row, key, value)
                row.updated_at = datetime.utcnow()

                if "fields" in updates:
                    fields = [FormField.model_validate(f) for f in updates["fields"]]
                    result = await session.execute(
                        select(ResponseRow).where(ResponseRow.form_id == form_id)
                    )
                    backfilled = 0
                    for response in result.scalars().all():
                        data = backfill_response_data(fields, response.data or {})
                        if data != response.data:
                            # Reassign so the JSON column is flagged dirty
                            response.data = data
                            backfilled += 1
                    if backfilled:
                        logger.log_db_query("backfill", "responses", rows_affected=backfilled)

            await session.refresh(row)
            return _to_record(Form, row)

    async def delete_form(self, form_id: str) -> bool:
        async with self.session_factory() as session:
            async with session.begin():
                row = await session.get(FormRow, form_id)
                if not row:
                    return False
                await session.execute(delete(ResponseRow).where(ResponseRow.form_id == form_id))
                await session.delete(row)
        return True

    # ==========================================
    # Responses
    # ==========================================

    async def create_response(self, data: Dict[str, Any]) -> FormResponse:
        async with self.session_factory() as session:
            row = ResponseRow(id=generate_id(), **to_storable(data))
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _to_record(FormResponse, row)

    async def get_response(self, response_id: str) -> Optional[FormResponse]:
        async with self.session_factory() as session:
            row = await session.get(ResponseRow, response_id)
            return _to_record(FormResponse, row) if row else None

    async def get_responses_by_form_id(self, form_id: str) -> List[FormResponse]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ResponseRow)
                .where(ResponseRow.form_id == form_id)
                .order_by(ResponseRow.submitted_at.desc())
            )
            return [_to_record(FormResponse, row) for row in result.scalars().all()]

    async def get_response_count(self, form_id: str) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(ResponseRow.id)).where(ResponseRow.form_id == form_id)
            )
            return result.scalar() or 0

    async def get_response_count_by_form_ids(self, form_ids: List[str]) -> int:
        if not form_ids:
            return 0
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(ResponseRow.id)).where(ResponseRow.form_id.in_(form_ids))
            )
            return result.scalar() or 0

    async def find_response_by_respondent(self, form_id: str, respondent_key: str) -> Optional[FormResponse]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ResponseRow)
                .where(ResponseRow.form_id == form_id, ResponseRow.respondent_key == respondent_key)
                .limit(1)
            )
            row = result.scalar_one_or_none()
            return _to_record(FormResponse, row) if row else None

    async def update_response(self, response_id: str, data: Dict[str, Any]) -> Optional[FormResponse]:
        async with self.session_factory() as session:
            row = await session.get(ResponseRow, response_id)
            if not row:
                return None
            row.data = to_storable(data)
            await session.commit()
            await session.refresh(row)
            return _to_record(FormResponse, row)

    async def delete_response(self, response_id: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(delete(ResponseRow).where(ResponseRow.id == response_id))
            await session.commit()
            return result.rowcount > 0

    # ==========================================
    # Private users
    # ==========================================

    async def create_private_user(self, data: Dict[str, Any]) -> PrivateUser:
        async with self.session_factory() as session:
            row = PrivateUserRow(id=generate_id(), **to_storable(data))
            session.add(row)
            await self._commit_unique(session, "A private user with this name already exists")
            await session.refresh(row)
            return _to_record(PrivateUser, row)

    async def get_private_user(self, private_user_id: str) -> Optional[PrivateUser]:
        async with self.session_factory() as session:
            row = await session.get(PrivateUserRow, private_user_id)
            return _to_record(PrivateUser, row) if row else None

    async def get_private_user_by_name(self, name: str) -> Optional[PrivateUser]:
        async with self.session_factory() as session:
            result = await session.execute(select(PrivateUserRow).where(PrivateUserRow.name == name))
            row = result.scalar_one_or_none()
            return _to_record(PrivateUser, row) if row else None

    async def get_private_users_by_user_id(self, user_id: str) -> List[PrivateUser]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PrivateUserRow)
                .where(PrivateUserRow.user_id == user_id)
                .order_by(PrivateUserRow.created_at.desc())
            )
            return [_to_record(PrivateUser, row) for row in result.scalars().all()]

    async def update_private_user_access(self, private_user_id: str, form_ids: List[str]) -> Optional[PrivateUser]:
        async with self.session_factory() as session:
            row = await session.get(PrivateUserRow, private_user_id)
            if not row:
                return None
            row.accessible_forms = list(form_ids)
            await session.commit()
            await session.refresh(row)
            return _to_record(PrivateUser, row)

    async def delete_private_user(self, private_user_id: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                delete(PrivateUserRow).where(PrivateUserRow.id == private_user_id)
            )
            await session.commit()
            return result.rowcount > 0

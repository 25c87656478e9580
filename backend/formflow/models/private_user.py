from sqlalchemy import Column, String, DateTime, JSON, ForeignKey
from datetime import datetime

from formflow.core.database import Base
from formflow.core.types import GUID, generate_id


class PrivateUser(Base):
    """Owner-managed credential for viewing private forms"""
    __tablename__ = "private_users"

    id = Column(GUID, primary_key=True, default=generate_id)
    user_id = Column(GUID, ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    accessible_forms = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<PrivateUser {self.name}>"

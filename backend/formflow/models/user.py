from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from datetime import datetime

from formflow.core.database import Base
from formflow.core.types import GUID, generate_id


class User(Base):
    """Form owner account"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Profile fields
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    company = Column(String(255), nullable=True)
    photo = Column(Text, nullable=True)  # data URL

    status = Column(String(20), default="active", nullable=False)

    # Email verification
    email_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String(128), index=True, nullable=True)
    verification_token_expiry = Column(DateTime, nullable=True)

    # Password reset
    reset_otp = Column(String(6), nullable=True)
    reset_otp_expiry = Column(DateTime, nullable=True)
    reset_token = Column(String(128), nullable=True)
    reset_token_expiry = Column(DateTime, nullable=True)

    # Derived metrics, refreshed opportunistically
    total_forms = Column(Integer, default=0, nullable=False)
    total_responses = Column(Integer, default=0, nullable=False)

    # Admin-set limits
    form_limit = Column(Integer, default=10, nullable=False)
    storage_limit = Column(Integer, default=10240, nullable=False)  # KB

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.email}>"

from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, ForeignKey
from datetime import datetime

from formflow.core.database import Base
from formflow.core.types import GUID, generate_id


class Form(Base):
    """User-authored form: ordered fields plus presentation/export configuration"""
    __tablename__ = "forms"

    id = Column(GUID, primary_key=True, default=generate_id)
    user_id = Column(GUID, ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String(500), nullable=False)
    status = Column(String(20), default="Active", nullable=False)
    visibility = Column(String(20), default="public", nullable=False)

    fields = Column(JSON, nullable=False, default=list)
    output_formats = Column(JSON, nullable=False, default=lambda: ["thank_you"])

    confirmation_style = Column(String(20), default="table", nullable=False)
    confirmation_text = Column(Text, nullable=True)
    table_config = Column(JSON, nullable=True)
    grid_config = Column(JSON, nullable=True)
    whatsapp_format = Column(Text, nullable=True)
    allow_editing = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Form {self.id} {self.title!r}>"

from sqlalchemy import Column, String, DateTime, JSON, ForeignKey
from datetime import datetime

from formflow.core.database import Base
from formflow.core.types import GUID, generate_id


class Response(Base):
    """One respondent's submission, keyed by field label"""
    __tablename__ = "responses"

    id = Column(GUID, primary_key=True, default=generate_id)
    form_id = Column(GUID, ForeignKey("forms.id"), index=True, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    respondent_key = Column(String(255), index=True, nullable=True)
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Response {self.id} form={self.form_id}>"

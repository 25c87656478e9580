from pydantic import Field
from typing import Optional, Dict, Any
from datetime import datetime

from formflow.schemas.common import CamelModel


class FormResponse(CamelModel):
    """Stored submission; data is keyed by field label"""
    id: str
    form_id: str
    data: Dict[str, Any] = Field(default_factory=dict)
    respondent_key: Optional[str] = None
    submitted_at: datetime = Field(default_factory=datetime.utcnow)


class ResponseCreate(CamelModel):
    form_id: str = Field(..., min_length=1)
    data: Dict[str, Any]


class ResponseUpdate(CamelModel):
    data: Dict[str, Any]


class WhatsappShare(CamelModel):
    message: str
    link: str

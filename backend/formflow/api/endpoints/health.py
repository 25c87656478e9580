"""
Health check endpoint

/health answers 200 while the process is up and reports which store is active.
"""

from fastapi import APIRouter, Depends
from datetime import datetime
from typing import Dict, Any

from formflow.core.config import settings
from formflow.storage.base import BaseStorage
from formflow.storage.factory import get_storage


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(storage: BaseStorage = Depends(get_storage)) -> Dict[str, Any]:
    """Simple health check endpoint for load balancer"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "storage": type(storage).__name__,
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }

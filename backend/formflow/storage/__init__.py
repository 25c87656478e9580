from formflow.storage.base import BaseStorage, backfill_response_data
from formflow.storage.factory import create_storage, get_storage

__all__ = [
    "BaseStorage",
    "backfill_response_data",
    "create_storage",
    "get_storage",
]

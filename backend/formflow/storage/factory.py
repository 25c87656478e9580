from fastapi import Request

from formflow.core.config import Settings
from formflow.core.logging_config import logger
from formflow.storage.base import BaseStorage


def create_storage(settings: Settings) -> BaseStorage:
    """
    Pick the persistence backend once, at startup.

    A MONGODB_URI selects the document store; otherwise the relational store at
    DATABASE_URL is used.
    """
    if settings.use_document_store:
        from formflow.storage.mongo_storage import MongoStorage

        logger.info(f"Using MongoDB storage (database: {settings.MONGODB_DB_NAME})")
        return MongoStorage(settings.MONGODB_URI, settings.MONGODB_DB_NAME)

    from formflow.storage.sql_storage import SqlStorage

    logger.info("Using relational storage")
    return SqlStorage(settings.DATABASE_URL, echo=settings.DB_ECHO)


def get_storage(request: Request) -> BaseStorage:
    """FastAPI dependency: the storage opened by the application lifespan"""
    return request.app.state.storage

from pydantic_settings import BaseSettings
from typing import List, Any, Optional
import json


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "FormFlow"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000

    # ==========================================
    # Storage
    # ==========================================
    # A MongoDB connection string selects the document store;
    # without one the relational store at DATABASE_URL is used.
    MONGODB_URI: Optional[str] = None
    MONGODB_DB_NAME: str = "formflow"

    DATABASE_URL: str = "sqlite+aiosqlite:///./formflow.db"
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    PRIVATE_SESSION_EXPIRE_MINUTES: int = 720
    ADMIN_SESSION_EXPIRE_MINUTES: int = 120
    BCRYPT_ROUNDS: int = 12  # 4 for tests (fast), 12 for prod

    # Accept the legacy x-user-id header as identity (the web client still sends it)
    ALLOW_USER_ID_HEADER: bool = True

    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 24
    RESET_OTP_EXPIRE_MINUTES: int = 10
    RESET_TOKEN_EXPIRE_MINUTES: int = 30
    MIN_PASSWORD_LENGTH: int = 6

    # ==========================================
    # Quotas (admin-configurable per user)
    # ==========================================
    DEFAULT_FORM_LIMIT: int = 10
    DEFAULT_STORAGE_LIMIT_KB: int = 10240  # 10MB

    # ==========================================
    # Admin console
    # ==========================================
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""

    # ==========================================
    # Email
    # ==========================================
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_FROM: str = "noreply@formflow.app"
    EMAIL_FROM_NAME: str = "FormFlow"

    # Public base URL used to build verification links
    APP_URL: str = "http://localhost:5000"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5000,http://localhost:5173,http://127.0.0.1:5000,http://127.0.0.1:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    @property
    def use_document_store(self) -> bool:
        return bool(self.MONGODB_URI)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


settings = Settings()

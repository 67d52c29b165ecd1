"""
Configuration management for Africure Pharma API
Loads settings from environment variables
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3002
    ENVIRONMENT: str = "development"  # development, production, test

    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Africure Pharma API"
    VERSION: str = "1.0.0"
    MAX_BODY_SIZE: int = 10485760  # 10MB

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:5500,http://localhost:5500"

    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_KEY: str = ""
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    CONNECTION_RETRIES: int = 3
    CONNECTION_RETRY_DELAY_SECONDS: float = 2.0

    # Direct Postgres connection, only used by scripts/create_tables.py
    DATABASE_URL: Optional[str] = None

    # Resume uploads
    RESUME_BUCKET: str = "career-applications"
    MAX_RESUME_SIZE: int = 5242880  # 5MB
    ALLOWED_RESUME_TYPES: str = (
        "application/pdf,"
        "application/msword,"
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )

    # Rate limiting
    ENABLE_RATE_LIMITING: bool = True
    TRUST_PROXY_HEADERS: bool = False
    RATE_LIMIT_WINDOW_SECONDS: int = 900  # 15 minutes, whole API
    RATE_LIMIT_MAX_REQUESTS: int = 100
    CONTACT_RATE_LIMIT_WINDOW_SECONDS: int = 900  # 15 minutes
    CONTACT_RATE_LIMIT_MAX_REQUESTS: int = 3
    CAREER_RATE_LIMIT_WINDOW_SECONDS: int = 3600  # 1 hour
    CAREER_RATE_LIMIT_MAX_REQUESTS: int = 3

    # Admin authentication
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ADMIN_EMAIL: str = "admin@africurepharma.com"
    ADMIN_PASSWORD_HASH: str = ""
    ADMIN_ROUTES_ENABLED: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_REQUESTS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow"
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def cors_origins(self) -> List[str]:
        """Allowed origins; everything is allowed while developing"""
        if self.is_development:
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_resume_types(self) -> List[str]:
        """Get allowed resume MIME types as a list"""
        return [t.strip() for t in self.ALLOWED_RESUME_TYPES.split(",") if t.strip()]

    @property
    def supabase_key(self) -> str:
        """Service key when configured, anon key otherwise"""
        return self.SUPABASE_SERVICE_KEY or self.SUPABASE_ANON_KEY

    @property
    def request_logging_enabled(self) -> bool:
        return self.LOG_REQUESTS and self.ENVIRONMENT != "test"


# Global settings instance
settings = Settings()

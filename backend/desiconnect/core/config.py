"""
Centralized application configuration
"""
import json
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings (environment variables / .env)"""

    # API Settings
    API_TITLE: str = "DesiConnect API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Multi-role marketplace API for admins, sellers and customers"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./desiconnect.db"

    # Tokens and passwords
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_HOURS: int = 24
    BCRYPT_ROUNDS: int = 12

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5173,https://desiconnect.com" or '["http://localhost:5173"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:5173"

    # Uploads
    UPLOADS_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Email
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    EMAIL_FROM: str = "noreply@desiconnect.com"

    # Default accounts seeded on startup
    SEED_DEFAULT_ACCOUNTS: bool = True
    DEFAULT_ADMIN_EMAIL: str = "admin@desiconnect.com"
    DEFAULT_ADMIN_PASSWORD: str = "Admin@123"
    DEFAULT_CUSTOMER_EMAIL: str = "customer@desiconnect.com"
    DEFAULT_CUSTOMER_PASSWORD: str = "Customer@123"

    ALLOW_ADMIN_REGISTRATION: bool = False

    # Login / password reset throttle (requests per minute per client)
    AUTH_RATE_LIMIT_PER_MINUTE: int = Field(20, ge=1)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()

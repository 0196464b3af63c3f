# legal_vault/core/config.py
"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "Legal Vault"
    ENVIRONMENT: str = "production"  # development | production
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str

    # JWT Authentication
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # Login verification
    OTP_EXPIRY_MINUTES: int = 5
    RESET_TOKEN_EXPIRY_MINUTES: int = 15

    # AWS / S3 file storage
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-southeast-1"
    S3_BUCKET_NAME: str = "legal-vault-uploads"
    UPLOAD_URL_EXPIRY_SECONDS: int = 900
    DOWNLOAD_URL_EXPIRY_SECONDS: int = 3600
    MAX_DOCUMENT_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    MAX_PROFILE_UPLOAD_SIZE: int = 2 * 1024 * 1024  # 2MB

    # Outbound email
    EMAIL_PROVIDER: str = "dev"  # dev | resend
    EMAIL_FROM: str = ""
    RESEND_API_KEY: str = ""
    FRONTEND_URL: str = "http://localhost:4000"

    # CORS
    CORS_ORIGINS: str = '["http://localhost:4000"]'

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("ENVIRONMENT", "EMAIL_PROVIDER", mode="before")
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string to list"""
        try:
            return json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development"


# Create settings instance
settings = Settings()

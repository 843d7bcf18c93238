from typing import Optional
from urllib.parse import urlparse

from pydantic import EmailStr, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _check_url(value):
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return value.rstrip("/")


class Settings(BaseSettings):
    """Process-wide configuration, read once from the environment.

    Instances are immutable; build one in ``create_app`` (or pass one in)
    and hand it to the components that need it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # Server
    PORT: int = Field(3001, gt=0)
    TESTING: bool = False

    # Database
    DATABASE_URL: str = "postgresql://localhost/dorothy"

    # Object storage
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str = Field(min_length=20)
    STORAGE_BUCKET: str = "uploads"

    # Security
    JWT_SECRET: str = Field(min_length=32)
    ALLOW_ADMIN_SIGNUP: bool = False

    # Email
    ADMIN_EMAIL: EmailStr
    BREVO_API_KEY: str = Field(min_length=10)
    BREVO_SENDER_EMAIL: Optional[EmailStr] = None
    MAIL_SUPPRESS_SEND: bool = False

    # Public URLs
    FRONTEND_URL: str
    FRONTEND_URL_2: Optional[str] = None
    BACKEND_URL: str

    # Rate limiting
    RATELIMIT_ENABLED: bool = True
    RATELIMIT_STORAGE_URI: str = "memory://"

    @field_validator("SUPABASE_URL", "FRONTEND_URL", "BACKEND_URL")
    @classmethod
    def validate_url(cls, value):
        return _check_url(value)

    @field_validator("FRONTEND_URL_2")
    @classmethod
    def validate_optional_url(cls, value):
        if not value:
            return None
        return _check_url(value)

    @property
    def sender_email(self):
        return self.BREVO_SENDER_EMAIL or self.ADMIN_EMAIL

    @property
    def cors_origins(self):
        return [url for url in (self.FRONTEND_URL, self.FRONTEND_URL_2) if url]

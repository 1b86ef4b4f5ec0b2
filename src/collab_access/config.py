"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from collab_access.services.capabilities import DEFAULT_GENERATION_ATTEMPTS
from collab_access.services.codes import ACCESS_CODE_LENGTH, SHARE_KEY_LENGTH

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    access_code_length: int = ACCESS_CODE_LENGTH
    share_key_length: int = SHARE_KEY_LENGTH
    code_generation_attempts: int = DEFAULT_GENERATION_ATTEMPTS
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

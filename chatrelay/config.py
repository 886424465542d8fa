"""Runtime configuration for the chatrelay service."""

import os
from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_STORAGE_DIR = os.path.join(os.path.dirname(__file__), "storage")


class Settings(BaseSettings):
    """Service settings loaded from environment variables and ``.env``."""

    # JWT配置
    jwt_secret_key: str = Field(
        "insecure_secret_key_for_development_only", validation_alias="JWT_SECRET_KEY"
    )
    jwt_algorithm: str = Field("HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    storage_dir: str = Field(DEFAULT_STORAGE_DIR, validation_alias="CHATRELAY_STORAGE_DIR")

    # Relay
    relay_echo_to_sender: bool = Field(False, validation_alias="RELAY_ECHO_TO_SENDER")
    relay_send_timeout: float = Field(5.0, gt=0, validation_alias="RELAY_SEND_TIMEOUT")

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field("", validation_alias="LOG_FILE")

    host: str = Field("0.0.0.0", validation_alias="CHATRELAY_HOST")
    port: int = Field(8000, validation_alias="CHATRELAY_PORT")
    reload: bool = Field(False, validation_alias="CHATRELAY_RELOAD")

    # CORS Configuration, comma separated in the environment
    cors_origins: Annotated[List[str], NoDecode] = Field(
        ["*"], validation_alias="CORS_ORIGINS"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def user_storage_path(self) -> str:
        return os.path.join(self.storage_dir, "users")

    @property
    def user_file(self) -> str:
        return os.path.join(self.user_storage_path, "users.yaml")


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings; call ``get_settings.cache_clear()`` to reload."""
    return Settings()

"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Push routing configuration. All values come from environment variables."""

    # Identity storage
    database_path: Path = Field(default=Path("data/chatpush.db"))

    # Registration
    push_app_name: str = Field(default="")
    push_token_namespace: str = Field(default="apn")
    push_update_method: str = Field(default="raix:push-update")
    push_setuser_method: str = Field(default="raix:push-setuser")

    # Inbound HTTP
    webhook_port: int = Field(default=8443)
    webhook_secret: str = Field(default="")

    # Reply dispatch
    reply_drain_timeout_seconds: float = Field(default=30.0)

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_app_name(self) -> str:
        """Application identity announced with the push token, ``"main"`` if unset."""
        return self.push_app_name.strip() or "main"


settings = Settings()

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # HTTP fetcher
    http_connect_timeout: float = 30.0
    http_user_agent: str = "BN/2.0.0"
    http_verify_ssl: bool = True  # set False behind corporate SSL-inspection proxies

    # Beacon query defaults
    default_api_version: str = "v2.0.0"

    # Logging
    log_level: str = "INFO"


settings = Settings()

# fantasy_sdk/core/config.py
from __future__ import annotations

import base64
from typing import List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


EnvType = Literal["local", "dev", "staging", "prod"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "FantasySDK"
    APP_ENV: EnvType = "local"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = []
    ENCRYPTION_KEY: Optional[str] = None  # Fernet key; only needed to persist tokens

    # DB
    DATABASE_URL: str = "sqlite:///./fantasy.db"

    # Yahoo OAuth
    YAHOO_CLIENT_ID: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("YAHOO_CLIENT_ID", "YAHOO_CONSUMER_KEY")
    )
    YAHOO_CLIENT_SECRET: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("YAHOO_CLIENT_SECRET", "YAHOO_CONSUMER_SECRET")
    )
    YAHOO_REDIRECT_URI: Optional[str] = None
    YAHOO_ACCESS_TOKEN: Optional[str] = None
    YAHOO_REFRESH_TOKEN: Optional[str] = None
    YAHOO_AUTH_URL: str = "https://api.login.yahoo.com/oauth2/request_auth"
    YAHOO_TOKEN_URL: str = "https://api.login.yahoo.com/oauth2/get_token"
    YAHOO_API_BASE: str = Field(
        default="https://fantasysports.yahooapis.com/fantasy/v2",
        validation_alias=AliasChoices("YAHOO_API_BASE", "YAHOO_BASE_URL"),
    )

    # Client behaviour
    YAHOO_ENABLE_CACHE: bool = False
    YAHOO_HTTP_TIMEOUT: float = 30.0

    @property
    def IS_LOCAL(self) -> bool:
        return self.APP_ENV == "local"

    # ---------- Validators ----------

    @field_validator("ENCRYPTION_KEY")
    @classmethod
    def _validate_fernet_key(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        # Fernet requires 32-byte urlsafe base64-encoded key
        raw = v.strip().strip('"').strip("'")
        try:
            decoded = base64.urlsafe_b64decode(raw + "===")  # tolerate missing padding
        except ValueError as exc:
            raise ValueError("ENCRYPTION_KEY is not valid urlsafe base64") from exc
        if len(decoded) != 32:
            raise ValueError(
                "ENCRYPTION_KEY must be a 32-byte urlsafe base64-encoded Fernet key "
                "(generate with: from cryptography.fernet import Fernet; print(Fernet.generate_key().decode()))"
            )
        return raw

    @field_validator("YAHOO_API_BASE")
    @classmethod
    def _strip_base(cls, v: str) -> str:
        return v.rstrip("/")

    # ---------- Runtime validations ----------

    def validate_at_startup(self) -> None:
        """Fail fast with clear messages for misconfigurations."""
        problems: list[str] = []

        if not self.DATABASE_URL:
            problems.append("DATABASE_URL is required.")

        if not self.YAHOO_CLIENT_ID:
            problems.append("YAHOO_CLIENT_ID is required.")
        if not self.YAHOO_CLIENT_SECRET:
            problems.append("YAHOO_CLIENT_SECRET is required.")

        # Outside local we expect the OAuth callback flow to be wired up
        if not self.IS_LOCAL:
            if not self.YAHOO_REDIRECT_URI:
                problems.append("YAHOO_REDIRECT_URI is required in non-local env.")
            if not self.ENCRYPTION_KEY:
                problems.append("ENCRYPTION_KEY is required in non-local env.")

        if problems:
            raise RuntimeError("Config validation failed: " + " ".join(problems))


settings = Settings()

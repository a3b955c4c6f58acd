"""Configuration module: loads settings and Automate credentials from the environment."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from pydantic import BaseModel, field_validator

SERVER_URL_ENV = "CW_AUTOMATE_SERVER_URL"
CLIENT_ID_ENV = "CW_AUTOMATE_CLIENT_ID"
USERNAME_ENV = "CW_AUTOMATE_USERNAME"
PASSWORD_ENV = "CW_AUTOMATE_PASSWORD"
TWO_FACTOR_CODE_ENV = "CW_AUTOMATE_2FA_CODE"

REQUIRED_CREDENTIAL_ENV = (SERVER_URL_ENV, CLIENT_ID_ENV, USERNAME_ENV, PASSWORD_ENV)


class Settings(BaseModel):
    log_level: str = "INFO"
    request_timeout: float = 30.0
    max_retries: int = 2
    retry_backoff_base: float = 1.0

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        numeric = getattr(logging, v.upper(), None)
        if not isinstance(numeric, int):
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("MAX_RETRIES must not be negative")
        return v


def _load_from_env() -> Settings:
    """Build Settings from environment variables."""
    env = {}
    for field_name in Settings.model_fields:
        env_key = field_name.upper()
        val = os.environ.get(env_key)
        if val is not None:
            env[field_name] = val
    return Settings(**env)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance."""
    return _load_from_env()


@dataclass(frozen=True)
class Credentials:
    server_url: str
    client_id: str
    username: str
    password: str
    two_factor_code: str | None = None


def get_credentials() -> Credentials | None:
    """Read Automate credentials from the environment.

    Returns None unless all four required variables are set and non-empty.
    Never cached, so a changed environment is seen on the next call.
    """
    server_url = os.environ.get(SERVER_URL_ENV)
    client_id = os.environ.get(CLIENT_ID_ENV)
    username = os.environ.get(USERNAME_ENV)
    password = os.environ.get(PASSWORD_ENV)
    two_factor_code = os.environ.get(TWO_FACTOR_CODE_ENV) or None

    if not server_url or not client_id or not username or not password:
        return None

    return Credentials(
        server_url=server_url,
        client_id=client_id,
        username=username,
        password=password,
        two_factor_code=two_factor_code,
    )
